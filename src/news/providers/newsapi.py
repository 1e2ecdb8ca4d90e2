"""
NewsAPI adapter (https://newsapi.org)
Top headlines endpoint; errors are reported in-body with status != "ok".
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog

from ...core.exceptions import ProviderError
from ..constants import MAX_PROVIDER_PAGE_SIZE, MIN_KEYWORD_LENGTH, REMOVED_PLACEHOLDER, ProviderErrorCode
from ..schemas.requests import NewsFilter
from .base import (
    NewsItem,
    ProviderConfig,
    ProviderDescriptor,
    ProviderHealth,
    ProviderHttpClient,
    describe_provider,
    fetch_and_track,
    is_supported,
    parse_published_at,
    text_value,
)

logger = structlog.get_logger(__name__)


class NewsApiProvider:
    """NewsAPI adapter"""

    def __init__(
        self,
        config: ProviderConfig,
        http_client: Optional[ProviderHttpClient] = None,
        health: Optional[ProviderHealth] = None,
    ):
        self.config = config
        self.http = http_client or ProviderHttpClient(config.name, config.timeout_seconds)
        self.health = health or ProviderHealth()

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def priority(self) -> int:
        return self.config.priority

    @property
    def enabled(self) -> bool:
        return self.config.is_enabled

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/top-headlines"

    def is_healthy(self) -> bool:
        return self.health.is_healthy()

    def describe(self) -> ProviderDescriptor:
        return describe_provider(self.config, self.health)

    async def fetch(
        self,
        news_filter: NewsFilter,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> List[NewsItem]:
        if not self.enabled:
            logger.warning("provider_disabled", provider=self.name)
            return []

        params = self.build_params(news_filter, page, page_size or self.config.max_articles)
        logger.info(
            "provider_fetch_started",
            provider=self.name,
            **{k: v for k, v in params.items() if k != "apiKey"},
        )
        return await fetch_and_track(
            self.config,
            self.health,
            lambda: self.http.get_json(self.endpoint, params),
            self.parse_response,
        )

    def build_params(self, news_filter: NewsFilter, page: int, page_size: int) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "apiKey": self.config.api_key,
            "pageSize": min(page_size, MAX_PROVIDER_PAGE_SIZE),
            "page": page,
        }

        if is_supported(news_filter.country, self.config.supported_countries):
            params["country"] = news_filter.country.lower()

        if is_supported(news_filter.language, self.config.supported_languages):
            params["language"] = news_filter.language.lower()

        if is_supported(news_filter.category, self.config.supported_categories):
            params["category"] = self.map_category(news_filter.category)

        if news_filter.keyword and len(news_filter.keyword.strip()) >= MIN_KEYWORD_LENGTH:
            params["q"] = news_filter.keyword.strip()

        return params

    @staticmethod
    def map_category(category: str) -> str:
        category = category.lower()
        if category in ("world", "nation"):
            return "general"
        return category

    def parse_response(self, payload: Dict[str, Any]) -> List[NewsItem]:
        status = text_value(payload, "status")
        if status != "ok":
            raise ProviderError(
                self.name,
                text_value(payload, "code") or ProviderErrorCode.API_ERROR.value,
                f"NewsAPI error: {text_value(payload, 'message') or 'unknown error'}",
            )

        raw_articles = payload.get("articles") or []
        if not isinstance(raw_articles, list):
            raise ProviderError(self.name, ProviderErrorCode.PARSE_ERROR.value, "articles is not a list")

        now = datetime.now()
        items = []
        for raw in raw_articles:
            item = self._parse_article(raw, now)
            if item:
                items.append(item)
        return items

    def _parse_article(self, raw: Any, now: datetime) -> Optional[NewsItem]:
        title = text_value(raw, "title")
        url = text_value(raw, "url")

        if not title or not title.strip() or not url or not url.strip():
            return None

        if REMOVED_PLACEHOLDER in title or REMOVED_PLACEHOLDER in url:
            return None

        source = text_value(raw.get("source"), "name") or self.name

        return NewsItem(
            title=title.strip(),
            url=url.strip(),
            source=source,
            description=text_value(raw, "description"),
            image_url=text_value(raw, "urlToImage"),
            published_at=parse_published_at(text_value(raw, "publishedAt"), now),
            fetched_at=now,
        )
