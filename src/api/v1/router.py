from fastapi import APIRouter

from .endpoints import health, news, providers

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(news.router, prefix="/news", tags=["news"])
api_router.include_router(providers.router, prefix="/providers", tags=["providers"])
