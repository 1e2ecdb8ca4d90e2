"""Deletes articles that have outlived the retention window."""

from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...core.cache import TTLCache
from ...core.exceptions import PersistenceError
from ...repositories.article_repository import ArticleRepository
from ..constants import CacheNamespace

logger = structlog.get_logger(__name__)


class RetentionService:
    def __init__(self, session_factory: Callable[[], Session], cache: Optional[TTLCache] = None):
        self.session_factory = session_factory
        self.cache = cache

    def purge_expired(self, retention_days: int, now: Optional[datetime] = None) -> Dict[str, int]:
        """Remove every article fetched more than ``retention_days`` ago"""
        cutoff = (now or datetime.now()) - timedelta(days=retention_days)
        db = self.session_factory()
        try:
            before, deleted, after = ArticleRepository(db).delete_fetched_before(cutoff)
        except SQLAlchemyError as e:
            logger.error("news_cleanup_failed", cutoff=cutoff.isoformat(), error=str(e))
            raise PersistenceError("Failed to delete expired articles", details={"error": str(e)}) from e
        finally:
            db.close()

        if deleted:
            if self.cache is not None:
                self.cache.invalidate(CacheNamespace.NEWS)
            logger.info(
                "news_cleanup_completed",
                cutoff=cutoff.isoformat(),
                before=before,
                deleted=deleted,
                after=after,
            )
        else:
            logger.info("news_cleanup_nothing_to_delete", cutoff=cutoff.isoformat(), total=before)

        return {"before": before, "deleted": deleted, "after": after}
