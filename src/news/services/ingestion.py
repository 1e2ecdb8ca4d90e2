"""
Ingestion pipeline: validate -> deduplicate -> enrich -> summarize -> persist.

Each article is handled independently: a bad or conflicting article is
counted and skipped, never failing the batch. Only an unreachable store
aborts the batch.
"""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Callable, Dict, List

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...core.exceptions import PersistenceError
from ...repositories.article_repository import ArticleRepository
from ...utils.validation_utils import article_rejection_reason
from ..models.news_article import NewsArticle
from ..providers.base import NewsItem
from ..schemas.requests import NewsFilter
from .summarizer import Summarizer, summarize

logger = structlog.get_logger(__name__)


@dataclass
class IngestionStats:
    saved: int = 0
    duplicate: int = 0
    errored: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class IngestionPipeline:
    """Turns provider output into stored articles"""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        summarizer: Summarizer = summarize,
        default_country: str = "us",
        default_language: str = "en",
        default_category: str = "general",
    ):
        self.session_factory = session_factory
        self.summarizer = summarizer
        self.default_country = default_country
        self.default_language = default_language
        self.default_category = default_category

    def ingest(self, items: List[NewsItem], news_filter: NewsFilter) -> IngestionStats:
        stats = IngestionStats()
        db = self.session_factory()
        try:
            repository = ArticleRepository(db)
            for item in items:
                self._ingest_one(repository, db, item, news_filter, stats)
        finally:
            db.close()

        logger.info(
            "article_ingestion_completed",
            candidates=len(items),
            **stats.to_dict(),
        )
        return stats

    def _ingest_one(
        self,
        repository: ArticleRepository,
        db: Session,
        item: NewsItem,
        news_filter: NewsFilter,
        stats: IngestionStats,
    ) -> None:
        reason = article_rejection_reason(item)
        if reason:
            stats.errored += 1
            logger.debug("article_rejected", url=item.url, reason=reason)
            return

        try:
            existing = repository.get_by_url(item.url)
        except SQLAlchemyError as e:
            raise PersistenceError("Article store unavailable", details={"error": str(e)}) from e

        if existing:
            stats.duplicate += 1
            return

        try:
            self.enrich(item, news_filter)
            if item.description and item.description.strip():
                item.summary = self.summarizer(item.description)
            repository.add(self._to_model(item))
            stats.saved += 1
        except IntegrityError:
            # Another refresh stored the same url between lookup and insert
            db.rollback()
            stats.duplicate += 1
        except Exception as e:
            db.rollback()
            stats.errored += 1
            logger.error("article_save_failed", url=item.url, error=str(e))

    def enrich(self, item: NewsItem, news_filter: NewsFilter) -> NewsItem:
        """Fill missing classification from the refresh filter, then from defaults"""
        item.country = item.country or news_filter.country or self.default_country
        item.language = item.language or news_filter.language or self.default_language
        item.category = item.category or news_filter.category or self.default_category
        return item

    @staticmethod
    def _to_model(item: NewsItem) -> NewsArticle:
        return NewsArticle(
            title=item.title,
            url=item.url,
            source=item.source,
            description=item.description,
            summary=item.summary,
            image_url=item.image_url,
            category=item.category,
            country=item.country,
            language=item.language,
            published_at=item.published_at,
            fetched_at=item.fetched_at or datetime.now(),
        )
