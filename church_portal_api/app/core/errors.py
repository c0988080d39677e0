"""
Domain exceptions and their translation to JSON responses.

Services raise ``NotFoundError`` and ``ForbiddenError``; endpoints turn
them into ``HTTPException`` with the entity specific message.  The
handlers registered by ``install_exception_handlers`` make every error
body look the same: ``{"message": ...}``, plus ``errors`` for request
validation failures.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


logger = logging.getLogger(__name__)


class NotFoundError(LookupError):
    """The requested record does not exist."""


class ForbiddenError(PermissionError):
    """The principal may not perform the operation on this record."""


VALIDATION_MESSAGE_KEY = "x-validation-message"


def validation_message(message: str) -> dict:
    """Build the ``openapi_extra`` entry naming a route's 400 message.

    Use as ``@router.post("/", openapi_extra=validation_message("Invalid
    event data"))``.
    """
    return {VALIDATION_MESSAGE_KEY: message}


def _message_for(request: Request) -> str:
    # FastAPI stores the matched APIRoute in the scope.
    route = request.scope.get("route")
    extra = getattr(route, "openapi_extra", None) or {}
    return extra.get(VALIDATION_MESSAGE_KEY, "Invalid request data")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"message": _message_for(request), "errors": errors}),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def install_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to ``app``."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
