"""
Read-only News Service for API endpoints
Handles only database reads and the query cache - no fetching or processing
"""

import math
from datetime import datetime
from typing import List, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...core.cache import TTLCache
from ...core.exceptions import PersistenceError
from ...repositories.article_repository import ArticleRepository
from ...utils.validation_utils import validate_keyword, validate_news_filter
from ..constants import CacheNamespace, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..schemas.requests import NewsFilter
from ..schemas.responses import ArticleResponse, NewsListResponse

logger = structlog.get_logger(__name__)


class NewsService:
    """Read-only news service; paginated queries are cached until the next refresh"""

    def __init__(self, db: Session, cache: Optional[TTLCache] = None, cache_ttl_seconds: Optional[float] = None):
        self.db = db
        self.repository = ArticleRepository(db)
        self.cache = cache
        self.cache_ttl_seconds = cache_ttl_seconds

    def get_news(
        self,
        news_filter: Optional[NewsFilter] = None,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
    ) -> NewsListResponse:
        news_filter = news_filter or NewsFilter()
        validate_news_filter(news_filter)
        page = max(page, 0)
        size = min(max(size, 1), MAX_PAGE_SIZE)

        cache_key = (*news_filter.fingerprint, page, size)
        if self.cache is not None:
            cached = self.cache.get(CacheNamespace.NEWS, cache_key)
            if cached is not None:
                logger.debug("news_cache_hit", key=cache_key)
                return cached

        try:
            articles, total = self.repository.find_with_filters(news_filter, offset=page * size, limit=size)
            response = NewsListResponse(
                articles=[ArticleResponse.model_validate(a) for a in articles],
                total_elements=total,
                total_pages=math.ceil(total / size) if total else 0,
                current_page=page,
                page_size=size,
                has_next=(page + 1) * size < total,
                has_previous=page > 0,
                available_countries=self.repository.distinct_countries(),
                available_languages=self.repository.distinct_languages(),
                available_categories=self.repository.distinct_categories(),
                available_sources=self.repository.distinct_sources(),
            )
        except SQLAlchemyError as e:
            logger.error("news_query_failed", error=str(e))
            raise PersistenceError("Failed to query news articles", details={"error": str(e)}) from e

        if self.cache is not None:
            self.cache.set(CacheNamespace.NEWS, cache_key, response, ttl_seconds=self.cache_ttl_seconds)

        logger.info(
            "news_query_completed",
            country=news_filter.country,
            language=news_filter.language,
            category=news_filter.category,
            keyword=news_filter.keyword,
            page=page,
            size=size,
            total=total,
        )
        return response

    def search_news(self, keyword: Optional[str], page: int = 0, size: int = DEFAULT_PAGE_SIZE) -> NewsListResponse:
        validate_keyword(keyword, required=True)
        return self.get_news(NewsFilter(keyword=keyword), page=page, size=size)

    def get_todays_news(self) -> List[ArticleResponse]:
        midnight = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)
        try:
            articles = self.repository.find_fetched_since(midnight)
        except SQLAlchemyError as e:
            logger.error("todays_news_query_failed", error=str(e))
            raise PersistenceError("Failed to query today's news", details={"error": str(e)}) from e
        return [ArticleResponse.model_validate(a) for a in articles]

    def count_articles(self) -> int:
        try:
            return self.repository.count()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to count news articles", details={"error": str(e)}) from e

    def clear_cache(self) -> None:
        if self.cache is not None:
            self.cache.clear()
        logger.info("news_cache_cleared")
