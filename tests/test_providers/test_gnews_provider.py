import httpx
import pytest
from unittest.mock import patch, AsyncMock

from src.core.exceptions import ProviderError
from src.news.providers.base import ProviderConfig, ProviderHealth, ProviderHttpClient
from src.news.providers.gnews import GNewsProvider
from src.news.schemas.requests import NewsFilter


class TestGNewsProvider:
    @pytest.fixture(autouse=True)
    def setup_provider(self):
        self.requests = []
        self.response = httpx.Response(200, json={"totalArticles": 0, "articles": []})

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return self.response

        self.health = ProviderHealth()
        self.provider = GNewsProvider(
            ProviderConfig(name="GNews", base_url="https://gnews.io/api/v4", api_key="g-key", priority=2),
            http_client=ProviderHttpClient("GNews", 5.0, transport=httpx.MockTransport(handler)),
            health=self.health,
        )

    def test_build_params_uses_gnews_names(self):
        params = self.provider.build_params(
            NewsFilter(country="gb", language="en", category="science", keyword="climate"),
            page_size=10,
        )

        assert params == {
            "apikey": "g-key",
            "max": 10,
            "country": "gb",
            "lang": "en",
            "category": "science",
            "q": "climate",
        }

    @pytest.mark.parametrize("category,expected", [
        ("business", "business"),
        ("technology", "technology"),
        ("general", "world"),
        ("nation", "world"),
        ("world", "world"),
    ])
    def test_map_category(self, category, expected):
        assert GNewsProvider.map_category(category) == expected

    @pytest.mark.asyncio
    async def test_fetch_parses_articles(self):
        self.response = httpx.Response(200, json={
            "totalArticles": 2,
            "articles": [
                {
                    "title": "Rates held steady",
                    "description": "The central bank paused.",
                    "url": "https://gnews.example.com/rates",
                    "image": "https://gnews.example.com/rates.png",
                    "publishedAt": "2024-05-01T08:30:00Z",
                    "source": {"name": "Reuters", "url": "https://reuters.com"},
                },
                {"title": "", "url": "https://gnews.example.com/empty"},
            ],
        })

        items = await self.provider.fetch(NewsFilter(category="business"))

        assert len(items) == 1
        assert items[0].source == "Reuters"
        assert items[0].image_url == "https://gnews.example.com/rates.png"
        assert self.requests[0].url.params["category"] == "business"
        assert "page" not in self.requests[0].url.params
        assert self.health.is_healthy()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        ["You did not provide an API key."],
        {"apikey": "Invalid key"},
        "Forbidden",
    ])
    async def test_error_field_raises_api_error(self, error):
        self.response = httpx.Response(200, json={"errors": error})

        with pytest.raises(ProviderError) as exc_info:
            await self.provider.fetch(NewsFilter())

        assert exc_info.value.code == "API_ERROR"
        assert exc_info.value.message.startswith("GNews API error")
        assert not self.health.is_healthy()

    @patch('httpx.AsyncClient')
    @pytest.mark.asyncio
    async def test_fetch_timeout(self, mock_client):
        mock_client.return_value.__aenter__.return_value.get = AsyncMock(
            side_effect=httpx.TimeoutException("Request timeout")
        )
        provider = GNewsProvider(
            ProviderConfig(name="GNews", base_url="https://gnews.io/api/v4", api_key="g-key"),
            health=self.health,
        )

        with pytest.raises(ProviderError) as exc_info:
            await provider.fetch(NewsFilter())

        assert exc_info.value.code == "TIMEOUT"
        assert not self.health.is_healthy()
