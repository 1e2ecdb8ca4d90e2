"""News provider adapters and the registry that orders them"""

from .base import NewsItem, NewsProvider, ProviderConfig, ProviderHealth, ProviderHttpClient
from .gnews import GNewsProvider
from .newsapi import NewsApiProvider
from .registry import ProviderRegistry, create_default_registry

__all__ = [
    "NewsItem",
    "NewsProvider",
    "ProviderConfig",
    "ProviderHealth",
    "ProviderHttpClient",
    "GNewsProvider",
    "NewsApiProvider",
    "ProviderRegistry",
    "create_default_registry",
]
