"""Turns PlaygroundException into the JSON error body."""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from ..exceptions import PlaygroundException

logger = logging.getLogger(__name__)


async def playground_exception_handler(request: Request, exc: PlaygroundException) -> JSONResponse:
    """Respond with ``{"error", "message", "details"}`` and the exception's status.

    Unknown ids and rejected names are routine while editing and log at
    warning; storage and render failures log at error.
    """
    level = logging.WARNING if exc.status_code < 500 else logging.ERROR
    logger.log(
        level,
        "%s on %s %s: %s", exc.error_code.value, request.method, request.url.path, exc.message,
        extra={
            "error_code": exc.error_code.value,
            "path": request.url.path,
            "method": request.method,
            "details": exc.details,
            "status_code": exc.status_code,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
