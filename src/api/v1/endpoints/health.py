from datetime import datetime
from typing import Any, Dict

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.orm import Session

from ...dependencies import get_db, get_news_aggregator, get_news_cache, get_provider_registry
from ....config import get_settings
from ....core.cache import TTLCache
from ....news.providers.registry import ProviderRegistry
from ....news.services.aggregator import NewsAggregator
from ....repositories.article_repository import ArticleRepository

logger = structlog.get_logger(__name__)
settings = get_settings()

router = APIRouter()


@router.get("/health")
async def health_check(
    db: Session = Depends(get_db),
    registry: ProviderRegistry = Depends(get_provider_registry),
) -> Dict[str, Any]:
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "database": "unhealthy",
                "error": "Database connectivity failed",
                "timestamp": datetime.now().isoformat()
            }
        )

    active = [p.name for p in registry.enabled_providers()]
    status = "healthy" if active else "degraded"

    logger.info("Health check passed", database_status="healthy", active_providers=len(active))

    return {
        "status": status,
        "service": "Aurora News Aggregator",
        "version": "0.1.0",
        "environment": "development" if settings.debug else "production",
        "database": "healthy",
        "active_providers": active,
        "timestamp": datetime.now().isoformat(),
    }


@router.get("/metrics")
async def metrics(
    db: Session = Depends(get_db),
    registry: ProviderRegistry = Depends(get_provider_registry),
    aggregator: NewsAggregator = Depends(get_news_aggregator),
    cache: TTLCache = Depends(get_news_cache),
) -> Dict[str, Any]:
    return {
        "providers": registry.statistics(),
        "articles": ArticleRepository(db).count(),
        "refresh": aggregator.metrics(),
        "cache": cache.stats(),
        "timestamp": datetime.now().isoformat(),
    }
