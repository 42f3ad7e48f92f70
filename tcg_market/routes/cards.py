"""
tcg_market/routes/cards.py – card search proxy endpoint.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from tcg_market.context import ServiceContext, get_context
from tcg_market.models import ErrorEnvelope

router = APIRouter(prefix="/api", tags=["Cards"])


@router.get(
    "/cards",
    summary="Search cards",
    description=(
        "Proxies the query string verbatim to the upstream card API. "
        "Responses are cached for five minutes per distinct query."
    ),
    responses={
        200: {"description": "Upstream JSON payload, unchanged."},
        500: {"model": ErrorEnvelope, "description": "Upstream or network failure."},
    },
)
async def search_cards(
    request: Request,
    ctx: ServiceContext = Depends(get_context),
) -> JSONResponse:
    status_code, body = await ctx.cards.handle(request.query_params.multi_items())
    return JSONResponse(body, status_code=status_code)
