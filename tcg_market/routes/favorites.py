"""
tcg_market/routes/favorites.py – per-user favorite cards.

"Not found" and duplicate conditions are business outcomes: they answer 200
with `success: false` rather than an HTTP error.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from tcg_market.context import ServiceContext, get_context
from tcg_market.models import ApiResponse, Favorite, FavoriteCreate

router = APIRouter(prefix="/api/favorites", tags=["Favorites"])


@router.get(
    "",
    response_model=ApiResponse[list[Favorite]],
    summary="List a user's favorites",
)
async def list_favorites(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    ctx: ServiceContext = Depends(get_context),
) -> ApiResponse[list[Favorite]]:
    return ApiResponse(success=True, data=ctx.favorites.list(user_id))


@router.post(
    "",
    response_model=ApiResponse[Favorite],
    summary="Add a favorite",
)
async def add_favorite(
    payload: FavoriteCreate,
    ctx: ServiceContext = Depends(get_context),
) -> ApiResponse[Favorite]:
    favorite = ctx.favorites.add(payload.user_id, payload.card_id, payload.card_data)
    if favorite is None:
        return ApiResponse(success=False, message="Already in favorites")
    return ApiResponse(success=True, data=favorite)


@router.delete(
    "/{card_id}",
    response_model=ApiResponse[Favorite],
    summary="Remove a favorite",
)
async def remove_favorite(
    card_id: str,
    user_id: Optional[str] = Query(default=None, alias="userId"),
    ctx: ServiceContext = Depends(get_context),
) -> ApiResponse[Favorite]:
    if ctx.favorites.remove(user_id, card_id):
        return ApiResponse(success=True)
    return ApiResponse(success=False, message="Favorite not found")


@router.get(
    "/{card_id}",
    response_model=ApiResponse[Favorite],
    summary="Check whether a card is a favorite",
)
async def check_favorite(
    card_id: str,
    user_id: Optional[str] = Query(default=None, alias="userId"),
    ctx: ServiceContext = Depends(get_context),
) -> ApiResponse[Favorite]:
    favorite = ctx.favorites.get(user_id, card_id)
    return ApiResponse(success=favorite is not None, data=favorite)
