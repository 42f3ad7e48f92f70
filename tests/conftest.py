"""
tests/conftest.py – shared pytest configuration and fixtures.

Integration tests (marked with @pytest.mark.integration) are skipped by
default. Pass --integration to opt in:

    pytest --integration tests/test_integration.py -v

Everything else runs against an in-process upstream built on
httpx.MockTransport, with a recorded (non-blocking) backoff sleep and a
hand-driven cache clock.
"""
from __future__ import annotations

from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from tcg_market.config import Settings
from tcg_market.context import ServiceContext, get_context
from tcg_market.main import app


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="Run integration tests that make real card API calls.",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if not config.getoption("--integration"):
        skip = pytest.mark.skip(reason="Pass --integration to run this test.")
        for item in items:
            if item.get_closest_marker("integration"):
                item.add_marker(skip)


# ── Test doubles ──────────────────────────────────────────────────────────────


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Async stand-in for asyncio.sleep that only records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def sleep(self, seconds: float) -> None:
        self.calls.append(seconds)


class Upstream:
    """Programmable upstream standing in for the card API.

    Scripted outcomes are consumed first, then `always` takes over. An
    outcome that is an exception instance is raised instead of returned.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._script: list = []
        self._factory: Callable[[], object] = lambda: json_response(
            {"data": [], "count": 0, "totalCount": 0}
        )

    def script(self, *outcomes) -> None:
        self._script.extend(outcomes)

    def always(self, factory: Callable[[], object]) -> None:
        self._factory = factory

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self._script.pop(0) if self._script else self._factory()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def json_response(payload, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=payload)


# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None, pokemon_tcg_api_key="")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleeps() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def upstream() -> Upstream:
    return Upstream()


@pytest.fixture
def context(test_settings, upstream, sleeps, clock) -> ServiceContext:
    return ServiceContext.create(
        test_settings,
        transport=httpx.MockTransport(upstream),
        sleep=sleeps.sleep,
        clock=clock,
    )


@pytest.fixture
def client(context: ServiceContext):
    app.dependency_overrides[get_context] = lambda: context
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
