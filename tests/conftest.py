from datetime import datetime, timedelta
from typing import List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.core.cache import TTLCache
from src.core.exceptions import ProviderError
from src.news.providers.base import NewsItem, ProviderConfig, ProviderHealth, describe_provider


class FakeProvider:
    """In-memory provider returning canned articles or raising a canned error"""

    def __init__(
        self,
        name: str,
        priority: int = 1,
        articles: Optional[List[NewsItem]] = None,
        error: Optional[Exception] = None,
        enabled: bool = True,
        health: Optional[ProviderHealth] = None,
    ):
        self.config = ProviderConfig(
            name=name,
            base_url="http://fake.test",
            api_key="test-key",
            enabled=enabled,
            priority=priority,
        )
        self.health = health or ProviderHealth()
        self.articles = articles or []
        self.error = error
        self.calls = []

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def priority(self) -> int:
        return self.config.priority

    @property
    def enabled(self) -> bool:
        return self.config.is_enabled

    def is_healthy(self) -> bool:
        return self.health.is_healthy()

    def describe(self):
        return describe_provider(self.config, self.health)

    async def fetch(self, news_filter, page=1, page_size=None):
        self.calls.append(news_filter)
        if self.error is not None:
            self.health.record_failure()
            raise self.error
        self.health.record_success()
        return list(self.articles)


@pytest.fixture
def make_item():
    counter = {"n": 0}

    def _make_item(**overrides) -> NewsItem:
        counter["n"] += 1
        n = counter["n"]
        data = dict(
            title=f"Headline {n}",
            url=f"https://news.example.com/articles/{n}",
            source="Example Times",
            description=f"Description of story {n}",
            published_at=datetime.now() - timedelta(minutes=n),
        )
        data.update(overrides)
        return NewsItem(**data)

    return _make_item


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def provider_error():
    def _provider_error(provider: str, code: str = "HTTP_ERROR", message: str = "HTTP 500: boom"):
        return ProviderError(provider, code, message)
    return _provider_error


@pytest.fixture
def engine():
    from src.core.database import Base
    from src.news.models import news_article  # noqa: F401

    # Single shared connection so every session sees the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def test_db(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def cache():
    return TTLCache(default_ttl_seconds=3600)


@pytest.fixture
def registry(make_provider, make_item):
    from src.news.providers.registry import ProviderRegistry

    return ProviderRegistry([
        make_provider("NewsAPI", priority=1, articles=[make_item(), make_item()]),
        make_provider("GNews", priority=2, articles=[make_item()]),
    ])


@pytest.fixture
def aggregator(registry, session_factory, cache):
    from src.news.services.aggregator import NewsAggregator
    from src.news.services.ingestion import IngestionPipeline

    return NewsAggregator(registry, IngestionPipeline(session_factory), cache)


@pytest.fixture
async def async_client(test_db, registry, aggregator, cache):
    from httpx import AsyncClient, ASGITransport
    from src.main import app
    from src.core.database import get_db
    from src.api.dependencies import get_news_aggregator, get_news_cache, get_provider_registry

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_news_cache] = lambda: cache
    app.dependency_overrides[get_provider_registry] = lambda: registry
    app.dependency_overrides[get_news_aggregator] = lambda: aggregator

    # Use ASGITransport for direct app interaction
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
