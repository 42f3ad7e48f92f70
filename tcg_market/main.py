"""
tcg_market/main.py – FastAPI application factory for the TCG market API.

Features
────────
• Structured logging via structlog
• Request-ID middleware (X-Request-ID header)
• Card search proxy with retry and a five-minute response cache
• In-memory favorites and price alerts
• Static client bundle served from `settings.static_dir` when present
"""
from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import structlog
import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from tcg_market.config import settings
from tcg_market.context import ServiceContext
from tcg_market.errors import register_error_handlers
from tcg_market.routes.cards import router as cards_router
from tcg_market.routes.favorites import router as favorites_router
from tcg_market.routes.health import router as health_router
from tcg_market.routes.price_alerts import router as price_alerts_router

# ── Logging setup ─────────────────────────────────────────────────────────────


def _configure_logging() -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.ConsoleRenderer()
            if settings.debug
            else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper(), logging.INFO)
        ),
        logger_factory=structlog.PrintLoggerFactory(),
    )
    # Service modules log through the standard library
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )


_configure_logging()
logger = structlog.get_logger(__name__)

# ── Request-ID middleware ─────────────────────────────────────────────────────


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Attaches a unique request ID to each incoming request.
    Reads X-Request-ID from the client if present, otherwise generates one.
    Echoes the request ID in the response header.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start = time.perf_counter()
        response: Response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 1)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time-Ms"] = str(duration_ms)

        logger.info(
            "request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )
        structlog.contextvars.clear_contextvars()
        return response


# ── Lifespan ──────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    app.state.context = ServiceContext.create(settings)
    logger.info(
        "TCG market API starting",
        name=settings.app_name,
        version=settings.app_version,
        upstream=settings.upstream_base_url,
        api_key_configured=bool(settings.pokemon_tcg_api_key),
        cache_ttl_seconds=settings.cache_ttl_seconds,
    )
    yield
    await app.state.context.aclose()
    logger.info("TCG market API shutting down")


# ── Application factory ───────────────────────────────────────────────────────


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Backend for the Pokemon TCG market client.\n\n"
            "## Features\n"
            "1. **Cards** – cached, retrying proxy to the upstream card API\n"
            "2. **Favorites** – per-user favorite cards\n"
            "3. **Price alerts** – per-user price alerts\n"
        ),
        openapi_tags=[
            {"name": "Cards", "description": "Search the upstream card catalogue."},
            {"name": "Favorites", "description": "Per-user favorite cards."},
            {"name": "Price alerts", "description": "Per-user price alerts."},
            {"name": "Health", "description": "Liveness probe."},
        ],
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # ── Middleware (order matters – outermost first) ───────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    register_error_handlers(app)

    # ── Routers ───────────────────────────────────────────────────────────────
    app.include_router(health_router)
    app.include_router(cards_router)
    app.include_router(favorites_router)
    app.include_router(price_alerts_router)

    # Mounted last so API routes take precedence over the client bundle.
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    logger.info("Serving", url=f"http://{settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
