"""
tcg_market/errors.py – proxy exception taxonomy and the fallback FastAPI handler.

Every card proxy failure is raised as a `CardProxyError` subclass and turned
into the degraded envelope by `CardProxy.handle`.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class CardProxyError(Exception):
    """Base exception for card proxy failures, carries an HTTP status code."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NetworkError(CardProxyError):
    """Raised when every attempt failed at the transport level."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.__cause__ = cause


class UpstreamError(CardProxyError):
    """Upstream answered with a non-success status or with non-JSON content."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        status_text: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.status_text = status_text


class ParseError(CardProxyError):
    """Upstream declared JSON but the body could not be decoded."""


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app.

    Card proxy failures never get here: `CardProxy.handle` answers them with
    the degraded envelope itself.
    """

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": "Internal server error", "message": str(exc)},
            status_code=500,
        )
