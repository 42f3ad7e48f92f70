"""
tcg_market/services/cards.py – card search proxy in front of the upstream card API.

Flow for one search
───────────────────
1. Key the query parameters (received order) and try the response cache.
2. On a miss, GET the upstream endpoint through the retry fetcher.
3. Reject non-2xx statuses and non-JSON content types (an HTML error page
   served with 200 must not be cached as a result).
4. Decode the JSON body, cache it, return it.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Iterable

import httpx

from tcg_market.config import Settings
from tcg_market.errors import CardProxyError, NetworkError, ParseError, UpstreamError
from tcg_market.models import ErrorEnvelope
from tcg_market.services.cache import ResponseCache, make_cache_key
from tcg_market.services.fetcher import RetryFetcher

logger = logging.getLogger(__name__)


def _is_json(response: httpx.Response) -> bool:
    content_type = response.headers.get("content-type")
    return bool(content_type) and "application/json" in content_type.lower()


class CardProxy:
    """Composes the retry fetcher and response cache into one search operation."""

    def __init__(
        self,
        fetcher: RetryFetcher,
        cache: ResponseCache,
        settings: Settings,
    ) -> None:
        self._fetcher = fetcher
        self._cache = cache
        self._settings = settings

    def build_headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": self._settings.upstream_user_agent,
            "Accept": "application/json",
        }
        if self._settings.pokemon_tcg_api_key:
            headers[self._settings.upstream_api_key_header] = (
                self._settings.pokemon_tcg_api_key
            )
        return headers

    async def search(self, params: Iterable[tuple[str, str]]) -> Any:
        """
        Return the upstream payload for *params*, from cache when fresh.

        Raises:
            NetworkError:  Every attempt failed at the transport level, or the
                           request could not be issued at all.
            UpstreamError: Non-2xx final status, or a non-JSON content type.
            ParseError:    The body could not be decoded or is not valid JSON.
        """
        params = list(params)
        key = make_cache_key(params)

        cached = self._cache.lookup(key)
        if cached is not None:
            logger.info("Serving from cache: %s", key)
            return cached

        try:
            response = await self._fetcher.fetch(
                self._settings.upstream_base_url,
                headers=self.build_headers(),
                params=httpx.QueryParams(params),
                max_attempts=self._settings.fetch_max_attempts,
            )
        except httpx.DecodingError as exc:
            raise ParseError(f"Undecodable body from upstream: {exc}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            # Not retried by the fetcher: redirects, bad URLs, protocol misuse.
            raise NetworkError(f"Request to upstream failed: {exc}", cause=exc) from exc

        if not response.is_success:
            raise UpstreamError(
                f"API returned {response.status_code}: {response.reason_phrase}",
                status=response.status_code,
                status_text=response.reason_phrase,
            )

        if not _is_json(response):
            logger.error(
                "Invalid content type: %s", response.headers.get("content-type")
            )
            raise UpstreamError("API did not return JSON", status=response.status_code)

        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ParseError(f"Malformed JSON from upstream: {exc}") from exc

        self._cache.store(key, payload)

        count = payload.get("count", 0) if isinstance(payload, dict) else 0
        logger.info("API success: %s cards found", count)
        return payload

    async def handle(self, params: Iterable[tuple[str, str]]) -> tuple[int, Any]:
        """Run a search and return (status_code, body); failures become the degraded envelope."""
        try:
            return 200, await self.search(params)
        except CardProxyError as exc:
            logger.error("Error fetching cards: %s", exc.message)
            envelope = ErrorEnvelope(message=exc.message)
            return exc.status_code, envelope.model_dump(by_alias=True)
