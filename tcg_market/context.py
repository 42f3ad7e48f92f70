"""
tcg_market/context.py – the service context owning all process-wide state.

One context is built per application lifespan and handed to routes through
the `get_context` dependency. Nothing is persisted across restarts.
"""
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

import httpx
from fastapi import Request

from tcg_market.config import Settings
from tcg_market.services.cache import ResponseCache
from tcg_market.services.cards import CardProxy
from tcg_market.services.favorites import FavoritesStore
from tcg_market.services.fetcher import RetryFetcher
from tcg_market.services.price_alerts import PriceAlertStore


@dataclass
class ServiceContext:
    settings: Settings
    client: httpx.AsyncClient
    cache: ResponseCache
    fetcher: RetryFetcher
    cards: CardProxy
    favorites: FavoritesStore
    price_alerts: PriceAlertStore

    @classmethod
    def create(
        cls,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> "ServiceContext":
        client = httpx.AsyncClient(transport=transport)
        cache = ResponseCache(
            ttl_seconds=settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
            clock=clock or time.monotonic,
        )
        fetcher = RetryFetcher(
            client,
            timeout_seconds=settings.fetch_timeout_seconds,
            backoff_seconds=settings.fetch_backoff_seconds,
            sleep=sleep or asyncio.sleep,
        )
        return cls(
            settings=settings,
            client=client,
            cache=cache,
            fetcher=fetcher,
            cards=CardProxy(fetcher, cache, settings),
            favorites=FavoritesStore(),
            price_alerts=PriceAlertStore(),
        )

    async def aclose(self) -> None:
        await self.client.aclose()


def get_context(request: Request) -> ServiceContext:
    """FastAPI dependency returning the context built during startup."""
    return request.app.state.context
