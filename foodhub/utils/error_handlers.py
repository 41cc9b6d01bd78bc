"""Central exception handlers.

Every error leaving the API is rendered as::

    {"success": false, "message": "...", ...}

Mapping:
    - HTTPException (and the subclasses in foodhub.utils.exceptions): its own status
    - Request validation / path parameter cast errors: 400
    - IntegrityError (duplicate key and other constraint violations): 400
    - jwt.ExpiredSignatureError / jwt.InvalidTokenError: 401
    - Anything else: 500, with the exception detail only in development
"""

import logging
import traceback
from typing import Any

import jwt
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from foodhub.config import settings

logger = logging.getLogger(__name__)

TOKEN_EXPIRED_MESSAGE: str = "Token expired. Please refresh your token or login again."
TOKEN_INVALID_MESSAGE: str = "Invalid token. Please log in again!"


def error_body(message: str, **extra: Any) -> dict[str, Any]:
    """Build the error envelope shared by all handlers."""
    body: dict[str, Any] = {"success": False, "message": message}
    body.update({k: v for k, v in extra.items() if v is not None})
    return body


def _validation_message(exc: RequestValidationError) -> str:
    """Turn pydantic errors into a single human-readable message.

    A path parameter that cannot be cast (e.g. a malformed UUID) yields
    ``Invalid {name}: {value}``; anything else is reported field by field.
    """
    errors = exc.errors()
    for err in errors:
        loc = err.get("loc", ())
        if loc and loc[0] == "path":
            return f"Invalid {loc[-1]}: {err.get('input')}"

    parts: list[str] = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query")]
        field = ".".join(loc)
        parts.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return "Invalid input data. " + ". ".join(parts)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(_validation_message(exc)),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Duplicate field value. Please use another value!"),
    )


async def jwt_error_handler(request: Request, exc: jwt.PyJWTError) -> JSONResponse:
    message = TOKEN_EXPIRED_MESSAGE if isinstance(exc, jwt.ExpiredSignatureError) else TOKEN_INVALID_MESSAGE
    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content=error_body(message))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    if settings.is_development:
        content = error_body(
            "Something went wrong!",
            error=f"{type(exc).__name__}: {exc}",
            stack=traceback.format_exception(type(exc), exc, exc.__traceback__)[-5:],
        )
    else:
        content = error_body("Something went wrong!")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all handlers to the application."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(jwt.PyJWTError, jwt_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
