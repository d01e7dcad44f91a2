"""
api/errors.py
-------------
Maps the service error hierarchy (modules/errors.py) onto HTTP responses.

Response body: {"error": <code>, "detail": <text>}
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from modules.errors import (
    AlreadyFinalized,
    EmptyMessage,
    InvalidRecord,
    InvalidRole,
    InvalidTargetStatus,
    MarketplaceError,
    NotAuthorized,
    NotFound,
    SelfConnection,
    UsernameTaken,
)

logger = logging.getLogger(__name__)

STATUS_CODES: dict[type[MarketplaceError], int] = {
    InvalidRole:         400,
    SelfConnection:      400,
    EmptyMessage:        400,
    InvalidTargetStatus: 400,
    InvalidRecord:       400,
    NotAuthorized:       403,
    NotFound:            404,
    AlreadyFinalized:    409,
    UsernameTaken:       409,
}


def status_for(exc: MarketplaceError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return 400


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    status = status_for(exc)
    logger.info("%s %s -> %d %s: %s", request.method, request.url.path, status, exc.code, exc.detail)
    body: dict = {"error": exc.code, "detail": exc.detail}
    if isinstance(exc, InvalidRecord):
        body["errors"] = exc.errors
    return JSONResponse(status_code=status, content=body)


def install(app: FastAPI) -> None:
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
