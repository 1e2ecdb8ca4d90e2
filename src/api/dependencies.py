from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from ..config import get_settings
from ..core.cache import TTLCache
from ..core.database import SessionLocal, get_db
from ..news.providers.registry import ProviderRegistry, create_default_registry
from ..news.services.aggregator import NewsAggregator
from ..news.services.ingestion import IngestionPipeline
from ..news.services.news_scheduler import NewsScheduler
from ..news.services.news_service import NewsService
from ..news.services.retention import RetentionService


@lru_cache()
def get_news_cache() -> TTLCache:
    return TTLCache(default_ttl_seconds=get_settings().news_cache_ttl_seconds)


@lru_cache()
def get_provider_registry() -> ProviderRegistry:
    return create_default_registry(get_settings())


@lru_cache()
def get_ingestion_pipeline() -> IngestionPipeline:
    settings = get_settings()
    return IngestionPipeline(
        session_factory=SessionLocal,
        default_country=settings.default_country,
        default_language=settings.default_language,
        default_category=settings.default_category,
    )


@lru_cache()
def get_news_aggregator() -> NewsAggregator:
    return NewsAggregator(
        registry=get_provider_registry(),
        pipeline=get_ingestion_pipeline(),
        cache=get_news_cache(),
    )


@lru_cache()
def get_retention_service() -> RetentionService:
    return RetentionService(session_factory=SessionLocal, cache=get_news_cache())


@lru_cache()
def get_news_scheduler() -> NewsScheduler:
    return NewsScheduler(
        settings=get_settings(),
        aggregator=get_news_aggregator(),
        registry=get_provider_registry(),
        retention=get_retention_service(),
        session_factory=SessionLocal,
        cache=get_news_cache(),
    )


def get_news_service(
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_news_cache),
) -> NewsService:
    return NewsService(db, cache=cache, cache_ttl_seconds=get_settings().news_cache_ttl_seconds)
