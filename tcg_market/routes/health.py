"""
tcg_market/routes/health.py – liveness endpoint.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from tcg_market.context import ServiceContext, get_context
from tcg_market.models import HealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/healthz",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Returns 200 as long as the application process is running.",
)
async def healthz(ctx: ServiceContext = Depends(get_context)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=ctx.settings.app_version,
        api_key_configured=bool(ctx.settings.pokemon_tcg_api_key),
        cache_entries=len(ctx.cache),
    )
