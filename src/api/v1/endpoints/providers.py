from datetime import datetime
from typing import Any, Dict, List

import structlog
from fastapi import APIRouter, Depends

from src.api.dependencies import get_provider_registry
from src.news.providers.registry import ProviderRegistry
from src.news.schemas.responses import ProviderHealthEntry, ProvidersResponse, ProvidersStatusResponse

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("", response_model=ProvidersResponse)
async def list_providers(registry: ProviderRegistry = Depends(get_provider_registry)):
    active = registry.enabled_providers()
    return ProvidersResponse(
        active=[p.name for p in active],
        all=[f"{p.name} ({registry.status_label(p)})" for p in registry.all_providers()],
        status="healthy" if registry.has_healthy_providers() else "degraded",
        timestamp=datetime.now(),
    )


@router.get("/active", response_model=List[str])
async def active_providers(registry: ProviderRegistry = Depends(get_provider_registry)):
    return [p.name for p in registry.enabled_providers()]


@router.get("/status", response_model=ProvidersStatusResponse)
async def providers_status(registry: ProviderRegistry = Depends(get_provider_registry)):
    summary = registry.health_summary()
    return ProvidersStatusResponse(
        providers=summary["providers"],
        summary=summary["summary"],
        active_count=len(registry.enabled_providers()),
        total_count=len(registry.all_providers()),
        supported_countries=registry.supported_countries(),
        supported_languages=registry.supported_languages(),
        supported_categories=registry.supported_categories(),
        timestamp=datetime.now(),
    )


@router.get("/{name}", response_model=ProviderHealthEntry)
async def provider_detail(name: str, registry: ProviderRegistry = Depends(get_provider_registry)) -> Dict[str, Any]:
    """404 when no provider has this name (case-insensitive)"""
    provider = registry.by_name(name)
    return registry.health_summary()["providers"][provider.name]
