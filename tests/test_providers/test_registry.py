import pytest

from src.config import Settings
from src.core.exceptions import ProviderNotFoundError
from src.news.providers.base import ProviderHealth
from src.news.providers.registry import ProviderRegistry, create_default_registry


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestProviderHealth:
    def test_never_attempted_is_healthy(self):
        assert ProviderHealth().is_healthy()

    def test_success_then_failure_then_success(self):
        clock = FakeClock()
        health = ProviderHealth(window_seconds=7200, retry_after_seconds=900, clock=clock)

        health.record_success()
        assert health.is_healthy()
        assert health.last_success_millis == int(clock.now * 1000)

        health.record_failure()
        assert not health.is_healthy()

        health.record_success()
        assert health.is_healthy()

    def test_success_expires_after_window(self):
        clock = FakeClock()
        health = ProviderHealth(window_seconds=7200, clock=clock)
        health.record_success()

        clock.now += 7201

        assert not health.is_healthy()

    def test_failed_provider_due_for_retry(self):
        clock = FakeClock()
        health = ProviderHealth(retry_after_seconds=900, clock=clock)
        health.record_failure()

        assert not health.is_due_for_retry()
        clock.now += 900
        assert health.is_due_for_retry()


class TestProviderRegistry:
    def test_enabled_providers_sorted_by_priority_stable(self, make_provider):
        registry = ProviderRegistry([
            make_provider("Gamma", priority=2),
            make_provider("Alpha", priority=1),
            make_provider("Beta", priority=2),
            make_provider("Off", priority=0, enabled=False),
        ])

        assert [p.name for p in registry.enabled_providers()] == ["Alpha", "Gamma", "Beta"]
        assert [p.name for p in registry.all_providers()] == ["Off", "Alpha", "Gamma", "Beta"]

    def test_unhealthy_provider_excluded_until_retry(self, make_provider):
        clock = FakeClock()
        health = ProviderHealth(retry_after_seconds=900, clock=clock)
        health.record_failure()
        registry = ProviderRegistry([make_provider("Flaky", health=health), make_provider("Solid", priority=2)])

        assert [p.name for p in registry.enabled_providers()] == ["Solid"]

        clock.now += 901
        assert [p.name for p in registry.enabled_providers()] == ["Flaky", "Solid"]

    def test_by_name_is_case_insensitive(self, make_provider):
        registry = ProviderRegistry([make_provider("NewsAPI")])

        assert registry.by_name("newsapi").name == "NewsAPI"
        with pytest.raises(ProviderNotFoundError):
            registry.by_name("Bing")

    def test_health_summary_and_statistics(self, make_provider):
        failing = ProviderHealth()
        failing.record_failure()
        registry = ProviderRegistry([
            make_provider("NewsAPI", priority=1),
            make_provider("GNews", priority=2, health=failing),
            make_provider("Off", priority=3, enabled=False),
        ])

        summary = registry.health_summary()

        assert summary["summary"] == {"total": 3, "enabled": 2, "healthy": 1}
        assert summary["providers"]["GNews"]["healthy"] is False
        assert summary["providers"]["Off"]["enabled"] is False
        assert registry.statistics() == {
            "total": 3, "enabled": 2, "healthy": 1, "disabled": 1, "unhealthy": 1,
        }
        assert registry.status_label(registry.by_name("GNews")) == "enabled (unhealthy)"
        assert registry.status_label(registry.by_name("Off")) == "disabled"
        assert registry.has_healthy_providers()

    def test_create_default_registry_respects_keys(self):
        settings = Settings(newsapi_api_key="real-key", gnews_api_key=None, gnews_priority=5)

        registry = create_default_registry(settings)

        assert [p.name for p in registry.all_providers()] == ["NewsAPI", "GNews"]
        assert [p.name for p in registry.enabled_providers()] == ["NewsAPI"]
        assert registry.by_name("gnews").priority == 5
        assert "us" in registry.supported_countries()
