from datetime import datetime
from typing import List, Optional

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, Query

from src.api.dependencies import get_news_aggregator, get_news_service
from src.news.constants import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    SUCCESS_CACHE_CLEARED,
    SUCCESS_NEWS_REFRESHED,
)
from src.news.schemas.requests import NewsFilter
from src.news.schemas.responses import ArticleResponse, NewsListResponse, OperationResponse
from src.news.services.aggregator import NewsAggregator
from src.news.services.news_service import NewsService
from src.utils.validation_utils import validate_news_filter

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("", response_model=NewsListResponse)
async def get_news(
    country: Optional[str] = Query(None, description="Country code, e.g. us"),
    language: Optional[str] = Query(None, description="Language code, e.g. en"),
    category: Optional[str] = Query(None, description="Category, e.g. technology"),
    keyword: Optional[str] = Query(None, description="Matched against title and description"),
    page: int = Query(DEFAULT_PAGE, ge=0, description="Zero-based page number"),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size (max 100)"),
    news_service: NewsService = Depends(get_news_service),
):
    """Get stored news articles with filters"""
    news_filter = NewsFilter(country=country, language=language, category=category, keyword=keyword)
    return news_service.get_news(news_filter, page=page, size=size)


@router.get("/today", response_model=List[ArticleResponse])
async def get_todays_news(news_service: NewsService = Depends(get_news_service)):
    """Articles fetched since local midnight"""
    return news_service.get_todays_news()


@router.get("/search", response_model=NewsListResponse)
async def search_news(
    keyword: Optional[str] = Query(None, description="Search term (min 2 characters)"),
    page: int = Query(DEFAULT_PAGE, ge=0),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    news_service: NewsService = Depends(get_news_service),
):
    return news_service.search_news(keyword, page=page, size=size)


async def run_refresh(aggregator: NewsAggregator, news_filter: NewsFilter) -> None:
    try:
        await aggregator.refresh(news_filter)
    except Exception as e:
        logger.error("background_refresh_failed", error=str(e), exc_info=e)


@router.post("/refresh", response_model=OperationResponse)
async def refresh_news(
    background_tasks: BackgroundTasks,
    country: Optional[str] = Query(None),
    language: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    keyword: Optional[str] = Query(None),
    aggregator: NewsAggregator = Depends(get_news_aggregator),
):
    """Start a refresh from every enabled provider; returns before the refresh finishes"""
    news_filter = NewsFilter(country=country, language=language, category=category, keyword=keyword)
    validate_news_filter(news_filter)

    background_tasks.add_task(run_refresh, aggregator, news_filter)
    logger.info("news_refresh_requested", filter=news_filter.model_dump())

    return OperationResponse(status="success", message=SUCCESS_NEWS_REFRESHED, timestamp=datetime.now())


@router.post("/cache/clear", response_model=OperationResponse)
async def clear_cache(news_service: NewsService = Depends(get_news_service)):
    news_service.clear_cache()
    return OperationResponse(status="success", message=SUCCESS_CACHE_CLEARED, timestamp=datetime.now())
