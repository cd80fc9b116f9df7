"""OHLC series endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(tags=["ohlc"])


@router.get("/ohlc/{market}/{pair}/{periods}")
async def get_ohlc(market: str, pair: str, periods: int, request: Request) -> JSONResponse:
    """JSON object ``{"ohlc": [[open, high, low, close, volume, unixtime], ...]}``."""
    bars = await request.app.state.ohlc_store.get_bars(market, pair, periods)
    return JSONResponse(content={"ohlc": [list(bar.as_tuple()) for bar in bars]})
