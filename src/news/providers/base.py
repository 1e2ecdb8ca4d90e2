"""
Building blocks shared by all news provider adapters.

Adapters are independent classes composed from the pieces below rather than
subclasses of a common base: a ProviderConfig, a ProviderHealth tracker and a
ProviderHttpClient. Each adapter only knows how to build its request and parse
its response.
"""

import asyncio
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Protocol

import httpx
import structlog

from ...core.exceptions import ProviderError
from ...core.performance_timer import PerformanceTimer
from ..constants import (
    PLACEHOLDER_API_KEYS,
    ProviderErrorCode,
    SUPPORTED_CATEGORIES,
    SUPPORTED_COUNTRIES,
    SUPPORTED_LANGUAGES,
)
from ..schemas.requests import NewsFilter

logger = structlog.get_logger(__name__)


@dataclass
class NewsItem:
    """Normalized article produced by a provider, before ingestion"""
    title: str
    url: str
    source: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    published_at: Optional[datetime] = None
    fetched_at: datetime = field(default_factory=datetime.now)
    category: Optional[str] = None
    country: Optional[str] = None
    language: Optional[str] = None
    summary: Optional[str] = None


@dataclass
class ProviderConfig:
    """Static configuration of one provider"""
    name: str
    base_url: str
    api_key: Optional[str] = None
    enabled: bool = True
    timeout_seconds: float = 30.0
    max_articles: int = 100
    priority: int = 100
    supported_countries: Iterable[str] = SUPPORTED_COUNTRIES
    supported_languages: Iterable[str] = SUPPORTED_LANGUAGES
    supported_categories: Iterable[str] = SUPPORTED_CATEGORIES

    @property
    def has_valid_key(self) -> bool:
        key = (self.api_key or "").strip()
        return bool(key) and key.lower() not in PLACEHOLDER_API_KEYS

    @property
    def is_enabled(self) -> bool:
        return self.enabled and self.has_valid_key


@dataclass
class ProviderDescriptor:
    """Point-in-time view of a provider for status reporting"""
    name: str
    priority: int
    enabled: bool
    healthy: bool
    last_success_millis: int
    supported_countries: List[str]
    supported_languages: List[str]
    supported_categories: List[str]


class ProviderHealth:
    """
    Tracks fetch outcomes for one provider.

    Healthy means the last success happened within the health window and no
    failure has been recorded since. A provider that has never been tried is
    treated as healthy so it gets its first chance to fetch. An unhealthy
    provider becomes due for a retry once ``retry_after_seconds`` have passed
    since its last attempt.
    """

    def __init__(
        self,
        window_seconds: float = 2 * 60 * 60,
        retry_after_seconds: float = 15 * 60,
        clock: Callable[[], float] = time.time,
    ):
        self.window_seconds = window_seconds
        self.retry_after_seconds = retry_after_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._last_success: Optional[float] = None
        self._last_attempt: Optional[float] = None
        self._failing = False

    def record_success(self) -> None:
        with self._lock:
            now = self._clock()
            self._last_success = now
            self._last_attempt = now
            self._failing = False

    def record_failure(self) -> None:
        with self._lock:
            self._last_attempt = self._clock()
            self._failing = True

    @property
    def last_success_millis(self) -> int:
        return int(self._last_success * 1000) if self._last_success is not None else 0

    @property
    def failing(self) -> bool:
        return self._failing

    def is_healthy(self) -> bool:
        with self._lock:
            if self._last_attempt is None:
                return True
            if self._failing or self._last_success is None:
                return False
            return self._clock() - self._last_success <= self.window_seconds

    def is_due_for_retry(self) -> bool:
        with self._lock:
            if self._last_attempt is None:
                return False
            return self._clock() - self._last_attempt >= self.retry_after_seconds


class ProviderHttpClient:
    """Async JSON GET helper; every failure is raised as a ProviderError."""

    def __init__(
        self,
        provider_name: str,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.provider_name = provider_name
        self.timeout_seconds = timeout_seconds
        self.transport = transport
        self.headers = {
            "Accept": "application/json",
            "User-Agent": "AuroraNews/1.0",
        }

    async def get_json(self, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self.transport,
                headers=self.headers,
            ) as client:
                # httpx timeouts are per phase; wait_for bounds the whole call
                response = await asyncio.wait_for(
                    client.get(url, params=params),
                    timeout=self.timeout_seconds,
                )
                response.raise_for_status()
        except (asyncio.TimeoutError, httpx.TimeoutException):
            raise ProviderError(
                self.provider_name,
                ProviderErrorCode.TIMEOUT.value,
                f"Request timed out after {self.timeout_seconds}s",
            )
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                self.provider_name,
                ProviderErrorCode.HTTP_ERROR.value,
                f"HTTP {e.response.status_code}: {e.response.text[:300]}",
            )
        except httpx.HTTPError as e:
            raise ProviderError(
                self.provider_name,
                ProviderErrorCode.NETWORK_ERROR.value,
                f"Network error: {e}",
            )

        try:
            payload = response.json()
        except ValueError:
            raise ProviderError(
                self.provider_name,
                ProviderErrorCode.PARSE_ERROR.value,
                "Failed to parse API response",
            )

        if not isinstance(payload, dict):
            raise ProviderError(
                self.provider_name,
                ProviderErrorCode.PARSE_ERROR.value,
                "Unexpected response shape",
            )
        return payload


class NewsProvider(Protocol):
    """Capability every provider adapter offers to the registry and aggregator"""

    config: ProviderConfig
    health: ProviderHealth

    @property
    def name(self) -> str: ...

    @property
    def priority(self) -> int: ...

    @property
    def enabled(self) -> bool: ...

    def is_healthy(self) -> bool: ...

    def describe(self) -> ProviderDescriptor: ...

    async def fetch(
        self,
        news_filter: NewsFilter,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> List[NewsItem]: ...


def is_supported(value: Optional[str], vocabulary: Iterable[str]) -> bool:
    if value is None or not value.strip():
        return False
    return value.strip().lower() in {v.lower() for v in vocabulary}


def text_value(node: Any, field_name: str) -> Optional[str]:
    """Non-null field of a JSON object as a string, else None"""
    if not isinstance(node, dict):
        return None
    value = node.get(field_name)
    if value is None:
        return None
    return str(value)


def parse_published_at(value: Optional[str], now: Optional[datetime] = None) -> datetime:
    """
    Parse an ISO-8601 timestamp into a naive local datetime.
    Absent or unparsable values fall back to ``now``.
    """
    now = now or datetime.now()
    if value is None or not value.strip():
        return now

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.warning("unparsable_published_date", value=value)
        return now

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def describe_provider(config: ProviderConfig, health: ProviderHealth) -> ProviderDescriptor:
    return ProviderDescriptor(
        name=config.name,
        priority=config.priority,
        enabled=config.is_enabled,
        healthy=health.is_healthy(),
        last_success_millis=health.last_success_millis,
        supported_countries=list(config.supported_countries),
        supported_languages=list(config.supported_languages),
        supported_categories=list(config.supported_categories),
    )


async def fetch_and_track(
    config: ProviderConfig,
    health: ProviderHealth,
    request: Callable[[], Awaitable[Dict[str, Any]]],
    parse: Callable[[Dict[str, Any]], List[NewsItem]],
) -> List[NewsItem]:
    """Run one provider request, parse it and record the outcome on ``health``"""
    timer = PerformanceTimer(f"fetch:{config.name}")
    timer.start()
    try:
        payload = await request()
        items = parse(payload)
    except ProviderError as e:
        health.record_failure()
        logger.error(
            "provider_fetch_failed",
            provider=config.name,
            error_code=e.code,
            error=e.message,
            elapsed_ms=timer.elapsed_ms,
        )
        raise
    except Exception as e:
        health.record_failure()
        logger.error("provider_fetch_crashed", provider=config.name, error=str(e), exc_info=e)
        raise ProviderError(
            config.name,
            ProviderErrorCode.UNEXPECTED_ERROR.value,
            f"Failed to fetch news articles: {e}",
        ) from e

    timer.stop()
    health.record_success()
    logger.info(
        "provider_fetch_succeeded",
        provider=config.name,
        articles=len(items),
        elapsed_ms=timer.elapsed_ms,
    )
    return items
