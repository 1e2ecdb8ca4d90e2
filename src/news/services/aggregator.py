"""
News aggregation engine.

Pipeline for one refresh:
1. Pick enabled providers from the registry
2. Fetch from all of them concurrently, isolating each provider's failure
3. Merge successful results in priority order
4. Ingest the merged batch
5. Invalidate cached query results
"""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog

from ...core.cache import TTLCache
from ...core.exceptions import ProviderError
from ...core.performance_timer import PerformanceTimer
from ..constants import CacheNamespace, NO_ARTICLES_REASON, NO_PROVIDERS_REASON, ProviderErrorCode
from ..providers.base import NewsItem, NewsProvider
from ..providers.registry import ProviderRegistry
from ..schemas.requests import NewsFilter
from .ingestion import IngestionPipeline, IngestionStats

logger = structlog.get_logger(__name__)


@dataclass
class ProviderResult:
    """Outcome of one provider's fetch; exactly one of articles/error is meaningful"""
    provider: str
    articles: List[NewsItem] = field(default_factory=list)
    error: Optional[ProviderError] = None
    elapsed_ms: int = 0

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "articles": len(self.articles),
            "error_code": self.error.code if self.error else None,
            "error": self.error.message if self.error else None,
            "elapsed_ms": self.elapsed_ms,
        }


@dataclass
class RefreshOutcome:
    fetched: int = 0
    contributing_providers: int = 0
    total_providers: int = 0
    reason: Optional[str] = None
    provider_results: List[ProviderResult] = field(default_factory=list)
    ingestion: IngestionStats = field(default_factory=IngestionStats)
    elapsed_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fetched": self.fetched,
            "contributing_providers": self.contributing_providers,
            "total_providers": self.total_providers,
            "reason": self.reason,
            "providers": [r.to_dict() for r in self.provider_results],
            "ingestion": self.ingestion.to_dict(),
            "elapsed_ms": self.elapsed_ms,
        }


class NewsAggregator:
    """Fans a refresh out to every enabled provider and stores the merged result"""

    def __init__(
        self,
        registry: ProviderRegistry,
        pipeline: IngestionPipeline,
        cache: Optional[TTLCache] = None,
    ):
        self.registry = registry
        self.pipeline = pipeline
        self.cache = cache
        self.started_at = time.time()
        self.refreshes_started = 0
        self.refreshes_completed = 0
        self.refreshes_failed = 0
        self.last_refresh_at: Optional[datetime] = None
        self.last_outcome: Optional[RefreshOutcome] = None

    async def refresh(self, news_filter: Optional[NewsFilter] = None) -> RefreshOutcome:
        news_filter = news_filter or NewsFilter()
        self.refreshes_started += 1
        timer = PerformanceTimer("refresh")
        timer.start()

        logger.info(
            "news_refresh_started",
            country=news_filter.country,
            language=news_filter.language,
            category=news_filter.category,
            keyword=news_filter.keyword,
        )

        try:
            outcome = await self._refresh(news_filter)
        except Exception as e:
            self.refreshes_failed += 1
            logger.error("news_refresh_failed", error=str(e), elapsed_ms=timer.elapsed_ms)
            raise

        timer.stop()
        outcome.elapsed_ms = timer.elapsed_ms
        self.refreshes_completed += 1
        self.last_refresh_at = datetime.now()
        self.last_outcome = outcome

        if self.cache is not None:
            self.cache.invalidate(CacheNamespace.NEWS)

        logger.info("news_refresh_completed", **{k: v for k, v in outcome.to_dict().items() if k != "providers"})
        return outcome

    async def _refresh(self, news_filter: NewsFilter) -> RefreshOutcome:
        providers = self.registry.enabled_providers()
        if not providers:
            logger.warning("news_refresh_skipped", reason=NO_PROVIDERS_REASON)
            return RefreshOutcome(reason=NO_PROVIDERS_REASON)

        for provider in providers:
            logger.info("provider_selected", provider=provider.name, priority=provider.priority)

        # Each task converts its own failure into a result, so gather never raises
        results = await asyncio.gather(
            *(self._fetch_isolated(provider, news_filter) for provider in providers)
        )

        merged = self.merge(results)
        contributing = sum(1 for r in results if r.articles)

        logger.info(
            "provider_fetches_collected",
            articles=len(merged),
            contributing_providers=contributing,
            total_providers=len(providers),
        )

        outcome = RefreshOutcome(
            fetched=len(merged),
            contributing_providers=contributing,
            total_providers=len(providers),
            provider_results=list(results),
        )

        if contributing == 0:
            logger.warning(
                "no_provider_contributed",
                failed=[r.provider for r in results if not r.succeeded],
            )
            outcome.reason = NO_ARTICLES_REASON
            return outcome

        outcome.ingestion = self.pipeline.ingest(merged, news_filter)
        return outcome

    async def _fetch_isolated(self, provider: NewsProvider, news_filter: NewsFilter) -> ProviderResult:
        timer = PerformanceTimer(f"provider:{provider.name}")
        timer.start()
        try:
            articles = await provider.fetch(news_filter)
        except ProviderError as e:
            logger.error("provider_failed", provider=provider.name, error_code=e.code, error=e.message)
            return ProviderResult(provider=provider.name, error=e, elapsed_ms=timer.elapsed_ms)
        except Exception as e:
            logger.error("provider_failed_unexpectedly", provider=provider.name, error=str(e), exc_info=e)
            error = ProviderError(provider.name, ProviderErrorCode.UNEXPECTED_ERROR.value, str(e))
            return ProviderResult(provider=provider.name, error=error, elapsed_ms=timer.elapsed_ms)

        timer.stop()
        return ProviderResult(provider=provider.name, articles=list(articles or []), elapsed_ms=timer.elapsed_ms)

    @staticmethod
    def merge(results: List[ProviderResult]) -> List[NewsItem]:
        """Concatenate successful results; ``results`` is already in priority order"""
        merged: List[NewsItem] = []
        for result in results:
            merged.extend(result.articles)
        return merged

    def metrics(self) -> Dict[str, Any]:
        return {
            "refreshes_started": self.refreshes_started,
            "refreshes_completed": self.refreshes_completed,
            "refreshes_failed": self.refreshes_failed,
            "last_refresh_at": self.last_refresh_at.isoformat() if self.last_refresh_at else None,
            "last_outcome": self.last_outcome.to_dict() if self.last_outcome else None,
            "uptime_seconds": int(time.time() - self.started_at),
        }
