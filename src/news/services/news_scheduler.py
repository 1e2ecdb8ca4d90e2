"""
Background news jobs.

Jobs:
- refresh: default filter, then the popular categories one by one
- trending: one keyword refresh per trending keyword
- cleanup: daily retention sweep
- provider health: periodic status report
- cache warmup: first page of popular country/language pairs
"""

import asyncio
from typing import Awaitable, Callable, List, Optional, Tuple

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.orm import Session

from ...config import Settings
from ...core.cache import TTLCache
from ..constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from ..providers.registry import ProviderRegistry
from ..schemas.requests import NewsFilter
from .aggregator import NewsAggregator
from .news_service import NewsService
from .retention import RetentionService

logger = structlog.get_logger(__name__)

WARMUP_PAIRS: List[Tuple[str, str]] = [
    ("us", "en"),
    ("gb", "en"),
    ("ca", "en"),
    ("au", "en"),
    ("de", "de"),
    ("fr", "fr"),
    ("it", "it"),
    ("es", "es"),
]
WARMUP_CATEGORY = "general"
TRENDING_LANGUAGE = "en"


class NewsScheduler:
    def __init__(
        self,
        settings: Settings,
        aggregator: NewsAggregator,
        registry: ProviderRegistry,
        retention: RetentionService,
        session_factory: Callable[[], Session],
        cache: Optional[TTLCache] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings
        self.aggregator = aggregator
        self.registry = registry
        self.retention = retention
        self.session_factory = session_factory
        self.cache = cache
        self._sleep = sleep
        self.scheduler: Optional[AsyncIOScheduler] = None

    def start(self) -> None:
        if not self.settings.scheduler_enabled:
            logger.info("news_scheduler_disabled")
            return
        if self.scheduler and self.scheduler.running:
            return

        self.scheduler = AsyncIOScheduler(
            job_defaults={"coalesce": True, "max_instances": 1, "misfire_grace_time": 60}
        )
        s = self.settings

        if s.refresh_enabled:
            self.scheduler.add_job(
                self.refresh_job,
                trigger=IntervalTrigger(minutes=s.refresh_interval_minutes),
                id="news_refresh",
                name="Refresh news",
                replace_existing=True,
            )
        if s.trending_refresh_enabled:
            self.scheduler.add_job(
                self.trending_job,
                trigger=IntervalTrigger(hours=s.trending_refresh_interval_hours),
                id="news_trending_refresh",
                name="Refresh trending keywords",
                replace_existing=True,
            )
        if s.cleanup_enabled:
            self.scheduler.add_job(
                self.cleanup_job,
                trigger=CronTrigger(hour=s.cleanup_hour, minute=0),
                id="news_cleanup",
                name="Delete expired articles",
                replace_existing=True,
            )
        self.scheduler.add_job(
            self.health_check_job,
            trigger=IntervalTrigger(minutes=s.health_check_interval_minutes),
            id="provider_health_check",
            name="Report provider health",
            replace_existing=True,
        )
        if s.cache_warmup_enabled:
            self.scheduler.add_job(
                self.cache_warmup_job,
                trigger=IntervalTrigger(hours=s.cache_warmup_interval_hours),
                id="news_cache_warmup",
                name="Warm news cache",
                replace_existing=True,
            )

        self.scheduler.start()
        logger.info("news_scheduler_started", jobs=[job.id for job in self.scheduler.get_jobs()])

    def shutdown(self) -> None:
        if self.scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("news_scheduler_stopped")
        self.scheduler = None

    async def refresh_job(self) -> None:
        logger.info("scheduled_refresh_started")
        filters = [NewsFilter()] + [
            NewsFilter(category=category) for category in self.settings.refresh_popular_categories
        ]
        await self._run_refreshes(filters, self.settings.refresh_stagger_seconds)
        logger.info("scheduled_refresh_completed", refreshes=len(filters))

    async def trending_job(self) -> None:
        logger.info("trending_refresh_started")
        filters = [
            NewsFilter(keyword=keyword, language=TRENDING_LANGUAGE)
            for keyword in self.settings.trending_keywords
        ]
        await self._run_refreshes(filters, self.settings.trending_stagger_seconds)
        logger.info("trending_refresh_completed", keywords=len(filters))

    async def _run_refreshes(self, filters: List[NewsFilter], stagger_seconds: float) -> None:
        for index, news_filter in enumerate(filters):
            if index and stagger_seconds > 0:
                await self._sleep(stagger_seconds)
            try:
                await self.aggregator.refresh(news_filter)
            except Exception as e:
                # One failed refresh must not stop the rest of the batch
                logger.error(
                    "scheduled_refresh_failed",
                    category=news_filter.category,
                    keyword=news_filter.keyword,
                    error=str(e),
                )

    async def cleanup_job(self) -> None:
        try:
            self.retention.purge_expired(self.settings.news_retention_days)
        except Exception as e:
            logger.error("scheduled_cleanup_failed", error=str(e))

    async def health_check_job(self) -> None:
        self.registry.log_status()
        if not self.registry.has_healthy_providers():
            logger.warning("no_healthy_providers", **self.registry.statistics())

    async def cache_warmup_job(self) -> None:
        if self.cache is None:
            return
        logger.info("cache_warmup_started", pairs=len(WARMUP_PAIRS))
        db = self.session_factory()
        try:
            service = NewsService(db, cache=self.cache, cache_ttl_seconds=self.settings.news_cache_ttl_seconds)
            for country, language in WARMUP_PAIRS:
                try:
                    service.get_news(
                        NewsFilter(country=country, language=language, category=WARMUP_CATEGORY),
                        page=DEFAULT_PAGE,
                        size=DEFAULT_PAGE_SIZE,
                    )
                except Exception as e:
                    logger.warning("cache_warmup_failed", country=country, language=language, error=str(e))
        finally:
            db.close()
        logger.info("cache_warmup_completed")
