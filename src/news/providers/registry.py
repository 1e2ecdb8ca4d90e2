"""
Provider registry - holds every adapter and answers which ones may be queried.
"""

from typing import Any, Dict, List, Optional

import structlog

from ...config import Settings
from ...core.exceptions import ProviderNotFoundError
from ..constants import ProviderName
from .base import NewsProvider, ProviderConfig, ProviderHealth
from .gnews import GNewsProvider
from .newsapi import NewsApiProvider

logger = structlog.get_logger(__name__)


class ProviderRegistry:
    """
    Ordered collection of providers.
    Sorting is by priority (lower first); equal priorities keep registration order.
    """

    def __init__(self, providers: Optional[List[NewsProvider]] = None):
        self._providers: List[NewsProvider] = []
        for provider in providers or []:
            self.register(provider)

    def register(self, provider: NewsProvider) -> None:
        self._providers.append(provider)
        logger.info(
            "provider_registered",
            provider=provider.name,
            priority=provider.priority,
            enabled=provider.enabled,
        )

    def enabled_providers(self) -> List[NewsProvider]:
        """Enabled providers that are healthy or due for a retry probe, by priority"""
        candidates = [
            p for p in self._providers
            if p.enabled and (p.is_healthy() or p.health.is_due_for_retry())
        ]
        return sorted(candidates, key=lambda p: p.priority)

    def all_providers(self) -> List[NewsProvider]:
        return sorted(self._providers, key=lambda p: p.priority)

    def by_name(self, name: str) -> NewsProvider:
        for provider in self._providers:
            if provider.name.lower() == (name or "").strip().lower():
                return provider
        raise ProviderNotFoundError(name)

    def health_summary(self) -> Dict[str, Any]:
        providers = {}
        for provider in self.all_providers():
            descriptor = provider.describe()
            providers[descriptor.name] = {
                "name": descriptor.name,
                "enabled": descriptor.enabled,
                "healthy": descriptor.healthy,
                "priority": descriptor.priority,
                "last_success_millis": descriptor.last_success_millis,
                "supported_countries": descriptor.supported_countries,
                "supported_languages": descriptor.supported_languages,
                "supported_categories": descriptor.supported_categories,
            }

        return {
            "providers": providers,
            "summary": {
                "total": len(self._providers),
                "enabled": sum(1 for p in self._providers if p.enabled),
                "healthy": sum(1 for p in self._providers if p.enabled and p.is_healthy()),
            },
        }

    def statistics(self) -> Dict[str, int]:
        total = len(self._providers)
        enabled = sum(1 for p in self._providers if p.enabled)
        healthy = sum(1 for p in self._providers if p.enabled and p.is_healthy())
        return {
            "total": total,
            "enabled": enabled,
            "healthy": healthy,
            "disabled": total - enabled,
            "unhealthy": enabled - healthy,
        }

    def has_healthy_providers(self) -> bool:
        return any(p.enabled and p.is_healthy() for p in self._providers)

    def supported_countries(self) -> List[str]:
        return self._union("supported_countries")

    def supported_languages(self) -> List[str]:
        return self._union("supported_languages")

    def supported_categories(self) -> List[str]:
        return self._union("supported_categories")

    def _union(self, attribute: str) -> List[str]:
        values = set()
        for provider in self._providers:
            if provider.enabled:
                values.update(getattr(provider.config, attribute))
        return sorted(values)

    def status_label(self, provider: NewsProvider) -> str:
        if not provider.enabled:
            return "disabled"
        return "enabled" if provider.is_healthy() else "enabled (unhealthy)"

    def log_status(self) -> None:
        for provider in self.all_providers():
            logger.info(
                "provider_status",
                provider=provider.name,
                priority=provider.priority,
                status=self.status_label(provider),
            )


def create_default_registry(settings: Settings) -> ProviderRegistry:
    """Build the NewsAPI and GNews adapters from settings"""
    window_seconds = settings.provider_health_window_hours * 3600
    retry_after_seconds = settings.provider_retry_after_minutes * 60

    def health() -> ProviderHealth:
        return ProviderHealth(window_seconds=window_seconds, retry_after_seconds=retry_after_seconds)

    newsapi = NewsApiProvider(
        ProviderConfig(
            name=ProviderName.NEWSAPI,
            base_url=settings.newsapi_base_url,
            api_key=settings.newsapi_api_key,
            enabled=settings.newsapi_enabled,
            timeout_seconds=settings.newsapi_timeout_seconds,
            max_articles=settings.newsapi_max_articles,
            priority=settings.newsapi_priority,
        ),
        health=health(),
    )
    gnews = GNewsProvider(
        ProviderConfig(
            name=ProviderName.GNEWS,
            base_url=settings.gnews_base_url,
            api_key=settings.gnews_api_key,
            enabled=settings.gnews_enabled,
            timeout_seconds=settings.gnews_timeout_seconds,
            max_articles=settings.gnews_max_articles,
            priority=settings.gnews_priority,
        ),
        health=health(),
    )
    return ProviderRegistry([newsapi, gnews])
