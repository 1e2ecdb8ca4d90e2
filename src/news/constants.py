"""Shared vocabularies, limits and message strings for the news module"""

from enum import Enum


class ProviderName:
    NEWSAPI = "NewsAPI"
    GNEWS = "GNews"


class ProviderErrorCode(str, Enum):
    HTTP_ERROR = "HTTP_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    PARSE_ERROR = "PARSE_ERROR"
    API_ERROR = "API_ERROR"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


class CacheNamespace:
    NEWS = "news"


SUPPORTED_COUNTRIES = (
    "us", "gb", "ca", "au", "de", "fr", "it", "jp", "kr", "in", "br", "mx", "ru", "cn", "ae", "sa",
)

SUPPORTED_LANGUAGES = (
    "en", "de", "fr", "it", "es", "pt", "ru", "ja", "ko", "zh", "ar", "he", "hi", "nl", "no", "sv",
)

SUPPORTED_CATEGORIES = (
    "business", "entertainment", "general", "health", "science", "sports", "technology", "world", "nation",
)

# Placeholder keys shipped in sample env files; treated as "no key"
PLACEHOLDER_API_KEYS = frozenset({
    "your_newsapi_key_here",
    "your_gnews_key_here",
    "changeme",
})

REMOVED_PLACEHOLDER = "[Removed]"

# Validation
MIN_KEYWORD_LENGTH = 2
MAX_KEYWORD_LENGTH = 100
MAX_TITLE_LENGTH = 500
MAX_DESCRIPTION_LENGTH = 2000
MAX_URL_LENGTH = 1000
MAX_IMAGE_URL_LENGTH = 1000

# Pagination
DEFAULT_PAGE = 0
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
MAX_PROVIDER_PAGE_SIZE = 100

# Summaries
SUMMARY_LENGTH = 230
SUMMARY_MIN_WORD_BREAK = 200

# Messages
SUCCESS_NEWS_REFRESHED = "News refresh initiated successfully"
SUCCESS_CACHE_CLEARED = "Cache cleared successfully"
NO_PROVIDERS_REASON = "no providers"
NO_ARTICLES_REASON = "no articles returned"
