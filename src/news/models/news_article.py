from sqlalchemy import Column, Integer, String, Text, DateTime, Index

from ...core.database import Base


class NewsArticle(Base):
    """
    Aggregated news article.
    Identified by its source URL; rows are written once and only removed by the retention sweep.
    """
    __tablename__ = "news_articles"

    # Primary key
    id = Column(Integer, primary_key=True, autoincrement=True)

    # Core article info
    title = Column(String(500), nullable=False)
    url = Column(String(1000), nullable=False, unique=True)
    source = Column(String(200), nullable=False)
    description = Column(Text)
    summary = Column(Text)
    image_url = Column(String(1000))

    # Classification (filled by enrichment)
    category = Column(String(100))
    country = Column(String(10))
    language = Column(String(10))

    # Timestamps
    published_at = Column(DateTime)
    fetched_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("idx_news_articles_published_at", "published_at"),
        Index("idx_news_articles_fetched_at", "fetched_at"),
        Index("idx_news_articles_filters", "country", "language", "category"),
    )

    def __repr__(self):
        return f"<NewsArticle(id={self.id}, title='{self.title[:50]}...', source='{self.source}')>"
