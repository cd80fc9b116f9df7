"""Bot registration and token-gated read endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Header, Request
from fastapi.responses import JSONResponse

from market_api.exceptions import BotValidationError

router = APIRouter(tags=["bots"])


@router.post("/bot")
async def create_bot(request: Request) -> JSONResponse:
    """Register a bot; the response is the only place its token is shown."""
    try:
        payload = await request.json()
    except ValueError:
        raise BotValidationError("body", "request body is not valid JSON") from None

    record = await request.app.state.registrar.register(payload)
    return JSONResponse(content=record.to_dict())


@router.get("/bot/{bot_id}")
async def get_bot(
    bot_id: int,
    request: Request,
    token: str = Header(default=""),
) -> JSONResponse:
    """Return a bot to the caller holding its token."""
    view = await request.app.state.reader.get(bot_id, token)
    return JSONResponse(content=view.to_dict())
