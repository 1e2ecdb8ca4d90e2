import pytest
from unittest.mock import MagicMock
from sqlalchemy.exc import OperationalError

from src.core.exceptions import PersistenceError
from src.news.models.news_article import NewsArticle
from src.news.schemas.requests import NewsFilter
from src.news.services.ingestion import IngestionPipeline


class TestIngestionPipeline:
    @pytest.fixture(autouse=True)
    def setup_pipeline(self, session_factory):
        self.pipeline = IngestionPipeline(session_factory)

    def test_saves_valid_articles(self, make_item, test_db):
        stats = self.pipeline.ingest([make_item(), make_item()], NewsFilter())

        assert stats.to_dict() == {"saved": 2, "duplicate": 0, "errored": 0}
        assert test_db.query(NewsArticle).count() == 2

    def test_duplicate_url_first_write_wins(self, make_item, test_db):
        first = make_item(url="https://dup.example.com/x", title="First title")
        second = make_item(url="https://dup.example.com/x", title="Second title")

        stats = self.pipeline.ingest([first, second], NewsFilter())

        assert stats.saved == 1
        assert stats.duplicate == 1
        stored = test_db.query(NewsArticle).one()
        assert stored.title == "First title"

    def test_invalid_articles_are_counted_not_saved(self, make_item, test_db):
        items = [
            make_item(title="x" * 600),
            make_item(title="   "),
            make_item(url=""),
            make_item(image_url="https://img.example.com/" + "a" * 1000),
            make_item(),
        ]

        stats = self.pipeline.ingest(items, NewsFilter())

        assert stats.saved == 1
        assert stats.errored == 4
        assert test_db.query(NewsArticle).count() == 1

    def test_enrichment_from_filter_then_defaults(self, make_item, test_db):
        self.pipeline.ingest(
            [make_item(url="https://e.example.com/1")],
            NewsFilter(country="gb", category="technology"),
        )
        self.pipeline.ingest([make_item(url="https://e.example.com/2", country="de")], NewsFilter())

        first = test_db.query(NewsArticle).filter_by(url="https://e.example.com/1").one()
        second = test_db.query(NewsArticle).filter_by(url="https://e.example.com/2").one()
        assert (first.country, first.language, first.category) == ("gb", "en", "technology")
        assert (second.country, second.language, second.category) == ("de", "en", "general")

    def test_summary_generated_from_description(self, make_item, test_db):
        long_description = "word " * 100
        self.pipeline.ingest(
            [make_item(url="https://s.example.com/1", description=long_description),
             make_item(url="https://s.example.com/2", description=None)],
            NewsFilter(),
        )

        with_description = test_db.query(NewsArticle).filter_by(url="https://s.example.com/1").one()
        without_description = test_db.query(NewsArticle).filter_by(url="https://s.example.com/2").one()
        assert with_description.summary.endswith("...")
        assert len(with_description.summary) <= 233
        assert without_description.summary is None

    def test_custom_summarizer(self, make_item, session_factory, test_db):
        pipeline = IngestionPipeline(session_factory, summarizer=lambda text: text.upper())

        pipeline.ingest([make_item(description="short text")], NewsFilter())

        assert test_db.query(NewsArticle).one().summary == "SHORT TEXT"

    def test_store_failure_on_lookup_raises(self, make_item):
        session = MagicMock()
        session.query.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))
        pipeline = IngestionPipeline(lambda: session)

        with pytest.raises(PersistenceError):
            pipeline.ingest([make_item()], NewsFilter())

        session.close.assert_called_once()

    def test_write_failure_counts_error_and_continues(self, make_item, session_factory, test_db):
        calls = {"n": 0}

        def flaky_summarizer(text):
            calls["n"] += 1
            if calls["n"] == 1:
                raise RuntimeError("summarizer crashed")
            return text

        pipeline = IngestionPipeline(session_factory, summarizer=flaky_summarizer)

        stats = pipeline.ingest([make_item(), make_item()], NewsFilter())

        assert stats.errored == 1
        assert stats.saved == 1
        assert test_db.query(NewsArticle).count() == 1
