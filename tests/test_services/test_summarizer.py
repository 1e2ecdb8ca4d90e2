from src.news.services.summarizer import summarize


class TestSummarize:
    def test_short_text_unchanged(self):
        text = "A short description."
        assert summarize(text) == text

    def test_exactly_max_length_unchanged(self):
        text = "x" * 230
        assert summarize(text) == text

    def test_cuts_at_word_boundary_past_200(self):
        text = "a" * 210 + " " + "b" * 50

        assert summarize(text) == "a" * 210 + "..."

    def test_hard_cut_when_no_late_space(self):
        text = "a" * 100 + " " + "b" * 200

        result = summarize(text)

        assert result == text[:230] + "..."
        assert len(result) == 233

    def test_blank_text(self):
        assert summarize("") == ""
        assert summarize("   ") == ""
