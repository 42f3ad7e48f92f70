"""
tcg_market/routes/price_alerts.py – per-user price alerts.
"""
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from pydantic import ValidationError

from tcg_market.context import ServiceContext, get_context
from tcg_market.models import ApiResponse, PriceAlert, PriceAlertToggle

router = APIRouter(prefix="/api/price-alerts", tags=["Price alerts"])


@router.get(
    "",
    response_model=ApiResponse[list[PriceAlert]],
    summary="List a user's price alerts",
)
async def list_price_alerts(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    ctx: ServiceContext = Depends(get_context),
) -> ApiResponse[list[PriceAlert]]:
    return ApiResponse(success=True, data=ctx.price_alerts.list(user_id))


@router.post(
    "",
    response_model=ApiResponse[PriceAlert],
    summary="Create a price alert",
    description="Any extra fields in the body are stored and returned unchanged.",
)
async def add_price_alert(
    payload: dict[str, Any] = Body(
        ..., examples=[{"userId": "user-123", "cardId": "base1-4", "targetPrice": 250.0}]
    ),
    ctx: ServiceContext = Depends(get_context),
) -> ApiResponse[PriceAlert]:
    try:
        alert = ctx.price_alerts.add(payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc
    return ApiResponse(success=True, data=alert)


@router.delete(
    "/{alert_id}",
    response_model=ApiResponse[PriceAlert],
    summary="Remove a price alert",
)
async def remove_price_alert(
    alert_id: str,
    user_id: Optional[str] = Query(default=None, alias="userId"),
    ctx: ServiceContext = Depends(get_context),
) -> ApiResponse[PriceAlert]:
    if ctx.price_alerts.remove(user_id, alert_id):
        return ApiResponse(success=True)
    return ApiResponse(success=False, message="Alert not found")


@router.put(
    "/{alert_id}",
    response_model=ApiResponse[PriceAlert],
    summary="Enable or disable a price alert",
)
async def toggle_price_alert(
    alert_id: str,
    payload: PriceAlertToggle,
    user_id: Optional[str] = Query(default=None, alias="userId"),
    ctx: ServiceContext = Depends(get_context),
) -> ApiResponse[PriceAlert]:
    alert = ctx.price_alerts.set_enabled(user_id, alert_id, payload.enabled)
    if alert is None:
        return ApiResponse(success=False, message="Alert not found")
    return ApiResponse(success=True, data=alert)
