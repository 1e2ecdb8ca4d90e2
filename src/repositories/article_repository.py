from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, or_, select
from sqlalchemy.orm import Session

from src.news.models.news_article import NewsArticle
from src.news.schemas.requests import NewsFilter


class ArticleRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_url(self, url: str) -> Optional[NewsArticle]:
        return self.db.query(NewsArticle).filter(NewsArticle.url == url).first()

    def add(self, article: NewsArticle) -> NewsArticle:
        self.db.add(article)
        self.db.commit()
        self.db.refresh(article)
        return article

    def find_with_filters(self, news_filter: NewsFilter, offset: int, limit: int) -> Tuple[List[NewsArticle], int]:
        query = self.db.query(NewsArticle)

        if news_filter.country:
            query = query.filter(NewsArticle.country == news_filter.country)
        if news_filter.language:
            query = query.filter(NewsArticle.language == news_filter.language)
        if news_filter.category:
            query = query.filter(NewsArticle.category == news_filter.category)
        if news_filter.keyword:
            # Literal substring match: % and _ in the keyword are escaped
            keyword = news_filter.keyword
            query = query.filter(
                or_(
                    NewsArticle.title.icontains(keyword, autoescape=True),
                    NewsArticle.description.icontains(keyword, autoescape=True),
                )
            )

        total = query.count()
        articles = (
            query.order_by(
                NewsArticle.published_at.desc(),
                NewsArticle.fetched_at.desc(),
                NewsArticle.id.desc(),
            )
            .offset(offset)
            .limit(limit)
            .all()
        )
        return articles, total

    def find_fetched_since(self, since: datetime) -> List[NewsArticle]:
        return (
            self.db.query(NewsArticle)
            .filter(NewsArticle.fetched_at >= since)
            .order_by(NewsArticle.published_at.desc(), NewsArticle.id.desc())
            .all()
        )

    def distinct_countries(self) -> List[str]:
        return self._distinct(NewsArticle.country)

    def distinct_languages(self) -> List[str]:
        return self._distinct(NewsArticle.language)

    def distinct_categories(self) -> List[str]:
        return self._distinct(NewsArticle.category)

    def distinct_sources(self) -> List[str]:
        return self._distinct(NewsArticle.source)

    def _distinct(self, column) -> List[str]:
        rows = self.db.execute(
            select(column).where(column.isnot(None)).distinct().order_by(column)
        ).scalars().all()
        return list(rows)

    def count(self) -> int:
        return self.db.query(func.count(NewsArticle.id)).scalar() or 0

    def delete_fetched_before(self, cutoff: datetime) -> Tuple[int, int, int]:
        """
        Delete every article fetched before ``cutoff`` in one transaction.
        Returns (count_before, deleted, count_after).
        """
        try:
            count_before = self.count()
            result = self.db.execute(delete(NewsArticle).where(NewsArticle.fetched_at < cutoff))
            deleted = result.rowcount or 0
            count_after = self.count()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return count_before, deleted, count_after
