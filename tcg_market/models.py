"""
tcg_market/models.py – Pydantic v2 request / response schemas for the market API.

JSON bodies use camelCase keys (userId, cardId, ...); snake_case is accepted
on input as well.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


# ── Favorites ─────────────────────────────────────────────────────────────────


class FavoriteCreate(CamelModel):
    user_id: str = Field(..., examples=["user-123"])
    card_id: str = Field(..., examples=["base1-4"])
    card_data: Any = Field(
        default=None,
        description="Card snapshot as returned by the card search endpoint.",
        examples=[{"name": "Charizard", "set": {"name": "Base"}}],
    )


class Favorite(CamelModel):
    id: str = Field(default_factory=_new_id)
    user_id: str
    card_id: str
    card_data: Any = None
    created_at: datetime = Field(default_factory=_utcnow)


# ── Price alerts ──────────────────────────────────────────────────────────────


class PriceAlert(CamelModel):
    """A price alert; any extra caller-supplied fields are kept verbatim."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(default_factory=_new_id)
    user_id: Optional[str] = None
    enabled: bool = True
    created_at: datetime = Field(default_factory=_utcnow)


class PriceAlertToggle(BaseModel):
    enabled: bool


# ── Envelopes ─────────────────────────────────────────────────────────────────


class ApiResponse(BaseModel, Generic[T]):
    """`{success, data?, message?}`; absent parts are left out of the JSON.

    Only the envelope drops `None`: nulls inside `data` are kept.
    """

    success: bool
    data: Optional[T] = None
    message: Optional[str] = None

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler):
        dumped = handler(self)
        return {k: v for k, v in dumped.items() if v is not None}


class ErrorEnvelope(CamelModel):
    """Degraded card-search response: an error plus empty-result defaults."""

    error: str = "Failed to fetch cards"
    message: str
    data: list[Any] = Field(default_factory=list)
    count: int = 0
    total_count: int = 0


# ── Health ────────────────────────────────────────────────────────────────────


class HealthResponse(CamelModel):
    status: str
    version: str
    api_key_configured: bool
    cache_entries: int
