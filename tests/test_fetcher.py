"""
tests/test_fetcher.py – unit tests for the retrying fetcher.

Backoff sleeps are recorded rather than awaited, so the suite never waits.
"""
from __future__ import annotations

import asyncio

import httpx
import pytest
from conftest import RecordingSleep, Upstream, json_response

from tcg_market.errors import NetworkError
from tcg_market.services.fetcher import RetryFetcher, is_retriable_status

URL = "https://cards.example.test/v2/cards"


def _fetch(upstream: Upstream, sleeps: RecordingSleep, **kwargs) -> httpx.Response:
    async def _run() -> httpx.Response:
        async with httpx.AsyncClient(transport=httpx.MockTransport(upstream)) as client:
            fetcher = RetryFetcher(client, sleep=sleeps.sleep)
            return await fetcher.fetch(URL, **kwargs)

    return asyncio.run(_run())


# ── Success and non-retriable statuses ────────────────────────────────────────


def test_success_on_first_attempt(upstream, sleeps):
    upstream.script(json_response({"count": 1}))

    response = _fetch(upstream, sleeps)

    assert response.status_code == 200
    assert response.json() == {"count": 1}
    assert len(upstream.requests) == 1
    assert sleeps.calls == []


@pytest.mark.parametrize("status", [400, 404, 429])
def test_client_errors_are_not_retried(upstream, sleeps, status):
    upstream.script(httpx.Response(status))

    response = _fetch(upstream, sleeps)

    assert response.status_code == status
    assert len(upstream.requests) == 1
    assert sleeps.calls == []


# ── Transport faults ──────────────────────────────────────────────────────────


def test_two_faults_then_success_uses_linear_backoff(upstream, sleeps):
    upstream.script(
        httpx.ConnectError("connection refused"),
        httpx.ConnectError("connection refused"),
        json_response({"data": []}),
    )

    response = _fetch(upstream, sleeps, max_attempts=3)

    assert response.status_code == 200
    assert len(upstream.requests) == 3
    assert sleeps.calls == [1.0, 2.0]


def test_timeout_counts_as_transport_fault(upstream, sleeps):
    upstream.script(httpx.ReadTimeout("timed out"), json_response({"ok": True}))

    response = _fetch(upstream, sleeps)

    assert response.json() == {"ok": True}
    assert sleeps.calls == [1.0]


def test_persistent_faults_raise_network_error(upstream, sleeps):
    upstream.always(lambda: httpx.ConnectError("connection refused"))

    with pytest.raises(NetworkError) as exc_info:
        _fetch(upstream, sleeps, max_attempts=3)

    assert len(upstream.requests) == 3
    assert sleeps.calls == [1.0, 2.0]
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
    assert "3 attempts" in exc_info.value.message


# ── Server errors ─────────────────────────────────────────────────────────────


def test_persistent_503_is_returned_not_raised(upstream, sleeps):
    upstream.always(lambda: httpx.Response(503))

    response = _fetch(upstream, sleeps, max_attempts=3)

    assert response.status_code == 503
    assert len(upstream.requests) == 3
    assert sleeps.calls == [1.0, 2.0]


def test_5xx_then_success(upstream, sleeps):
    upstream.script(httpx.Response(502), json_response({"count": 2}))

    response = _fetch(upstream, sleeps)

    assert response.status_code == 200
    assert len(upstream.requests) == 2


def test_mixed_fault_and_5xx_ends_with_final_response(upstream, sleeps):
    upstream.script(httpx.ConnectError("reset"), httpx.Response(500), httpx.Response(504))

    response = _fetch(upstream, sleeps, max_attempts=3)

    assert response.status_code == 504


def test_single_attempt_never_sleeps(upstream, sleeps):
    upstream.always(lambda: httpx.Response(500))

    response = _fetch(upstream, sleeps, max_attempts=1)

    assert response.status_code == 500
    assert len(upstream.requests) == 1
    assert sleeps.calls == []


def test_max_attempts_must_be_positive(upstream, sleeps):
    with pytest.raises(ValueError):
        _fetch(upstream, sleeps, max_attempts=0)
    assert upstream.requests == []


# ── Request shape ─────────────────────────────────────────────────────────────


def test_headers_params_and_timeout_are_sent(upstream, sleeps):
    _fetch(
        upstream,
        sleeps,
        headers={"Accept": "application/json"},
        params=httpx.QueryParams([("q", "name:pikachu")]),
    )

    request = upstream.requests[0]
    assert request.headers["Accept"] == "application/json"
    assert request.url.params["q"] == "name:pikachu"
    assert request.extensions["timeout"]["read"] == 60.0


@pytest.mark.parametrize(
    "status, expected",
    [(200, False), (404, False), (499, False), (500, True), (503, True), (599, True)],
)
def test_is_retriable_status(status, expected):
    assert is_retriable_status(httpx.Response(status)) is expected
