"""News API response schemas"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict


# ============================================================================
# Articles
# ============================================================================

class ArticleResponse(BaseModel):
    """Single stored article"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    summary: Optional[str] = None
    url: str
    source: str
    category: Optional[str] = None
    country: Optional[str] = None
    language: Optional[str] = None
    published_at: Optional[datetime] = None
    fetched_at: datetime
    image_url: Optional[str] = None


class NewsListResponse(BaseModel):
    """Paginated article list with the filter facets present in the store"""
    articles: List[ArticleResponse]
    total_pages: int
    total_elements: int
    current_page: int
    page_size: int
    has_next: bool
    has_previous: bool
    available_countries: List[str] = []
    available_languages: List[str] = []
    available_categories: List[str] = []
    available_sources: List[str] = []


# ============================================================================
# Operations
# ============================================================================

class OperationResponse(BaseModel):
    """Acknowledgement for fire-and-forget operations (refresh, cache clear)"""
    status: str
    message: str
    timestamp: datetime


# ============================================================================
# Providers
# ============================================================================

class ProvidersResponse(BaseModel):
    active: List[str]
    all: List[str]
    status: str
    timestamp: datetime


class ProviderHealthEntry(BaseModel):
    name: str
    enabled: bool
    healthy: bool
    priority: int
    last_success_millis: int
    supported_countries: List[str] = []
    supported_languages: List[str] = []
    supported_categories: List[str] = []


class ProviderHealthSummary(BaseModel):
    total: int
    enabled: int
    healthy: int


class ProvidersStatusResponse(BaseModel):
    providers: Dict[str, ProviderHealthEntry]
    summary: ProviderHealthSummary
    active_count: int
    total_count: int
    supported_countries: List[str] = []
    supported_languages: List[str] = []
    supported_categories: List[str] = []
    timestamp: datetime
