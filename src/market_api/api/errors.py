"""Mapping of service exceptions to JSON error responses."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from market_api.exceptions import (
    BotNotFoundError,
    BotValidationError,
    MarketApiError,
    PoolExhaustedError,
    StorageError,
)

log = structlog.get_logger(__name__)

STRICT_STATUS = {
    BotValidationError: 422,
    BotNotFoundError: 404,
    PoolExhaustedError: 503,
    StorageError: 500,
}

ERROR_KIND = {
    BotValidationError: "validation_error",
    BotNotFoundError: "not_found",
    PoolExhaustedError: "service_unavailable",
    StorageError: "storage_error",
}


def status_for(exc: MarketApiError, strict: bool) -> int:
    """HTTP status for ``exc``; always 500 unless ``strict`` is set."""
    if not strict:
        return 500
    return STRICT_STATUS.get(type(exc), 500)


def register_exception_handlers(app: FastAPI, strict: bool = False) -> None:
    """Install handlers for every MarketApiError subclass and for FastAPI's
    own request validation, so no failure escapes the status mapping."""

    async def handle_market_api_error(request: Request, exc: MarketApiError) -> JSONResponse:
        kind = ERROR_KIND.get(type(exc), "internal_error")
        status_code = status_for(exc, strict)
        content: dict = {"error": kind, "message": str(exc)}
        if isinstance(exc, BotValidationError):
            content["field"] = exc.field

        log.warning(
            "request_failed",
            method=request.method,
            path=request.url.path,
            error=kind,
            status_code=status_code,
        )
        return JSONResponse(status_code=status_code, content=content)

    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # A malformed bot id is just another id that matches nothing
        if request.method == "GET" and request.url.path.startswith("/bot/"):
            return await handle_market_api_error(request, BotNotFoundError())

        errors = exc.errors()
        loc = errors[0].get("loc") if errors else None
        field = str(loc[-1]) if loc else "request"
        return await handle_market_api_error(request, BotValidationError(field))

    app.add_exception_handler(MarketApiError, handle_market_api_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
