"""
tcg_market/services/fetcher.py – outbound GET with retries on transient failures.

Key design decisions
────────────────────
• Uses `tenacity.AsyncRetrying` so backoff sleeps suspend on the event loop.
• 5xx responses and transport faults (connection errors, per-attempt
  timeouts) are retried; any other response is returned immediately.
• Backoff is linear: `backoff_seconds × attempt_number` (1s, 2s, ...).
• When attempts run out, the last 5xx response is returned as-is, while a
  last transport fault is raised as `NetworkError`.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_incrementing,
)

from tcg_market.errors import NetworkError

logger = logging.getLogger(__name__)


# ── Helpers ───────────────────────────────────────────────────────────────────


def is_retriable_status(response: httpx.Response) -> bool:
    """Return True for server-side (5xx) statuses."""
    return 500 <= response.status_code < 600


def _give_up(retry_state: RetryCallState) -> httpx.Response:
    """Called once attempts are exhausted: hand back the response or fail."""
    outcome = retry_state.outcome
    if outcome.failed:
        exc = outcome.exception()
        raise NetworkError(
            f"Request failed after {retry_state.attempt_number} attempts: {exc}",
            cause=exc,
        )
    return outcome.result()


# ── Fetcher ───────────────────────────────────────────────────────────────────


class RetryFetcher:
    """Issues GET requests through a shared httpx client, retrying transient failures."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        timeout_seconds: float = 60.0,
        backoff_seconds: float = 1.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._timeout = timeout_seconds
        self._backoff = backoff_seconds
        self._sleep = sleep

    async def fetch(
        self,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        params: Any = None,
        max_attempts: int = 3,
    ) -> httpx.Response:
        """
        GET *url* up to *max_attempts* times.

        Returns the first non-5xx response, or the final 5xx response once
        attempts are exhausted.

        Raises:
            ValueError:   If max_attempts is lower than 1.
            NetworkError: If the final attempt failed at the transport level.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        def _log_attempt(retry_state: RetryCallState) -> None:
            logger.info("Attempt %d/%d: %s", retry_state.attempt_number, max_attempts, url)

        def _log_retry(retry_state: RetryCallState) -> None:
            outcome = retry_state.outcome
            if outcome.failed:
                reason = f"error: {outcome.exception()}"
            else:
                reason = f"{outcome.result().status_code} status"
            logger.warning(
                "Retrying after %s (sleeping %.1fs)",
                reason,
                retry_state.next_action.sleep,
            )

        retrying = AsyncRetrying(
            sleep=self._sleep,
            retry=(
                retry_if_exception_type(httpx.TransportError)
                | retry_if_result(is_retriable_status)
            ),
            stop=stop_after_attempt(max_attempts),
            wait=wait_incrementing(start=self._backoff, increment=self._backoff),
            before=_log_attempt,
            before_sleep=_log_retry,
            retry_error_callback=_give_up,
        )
        return await retrying(
            self._client.get,
            url,
            headers=headers,
            params=params,
            timeout=self._timeout,
        )
