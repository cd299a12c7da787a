"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to JSON responses of the shape {error, message, details}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from kinext.core.config import get_settings
from kinext.domain.exceptions import KinextException, PersistenceException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "AUTHENTICATION_ERROR": 401,
    "AUTHORIZATION_ERROR": 403,
    "RESOURCE_NOT_FOUND": 404,
    "TENANT_NOT_FOUND": 404,
    "CONFLICT": 409,
    "DUPLICATE_EMAIL": 409,
    "DUPLICATE_PHONE": 409,
    "DUPLICATE_RESOURCE": 409,
    "PERSISTENCE_ERROR": 500,
    "TENANT_NAME_COLLISION": 500,
}


def _kinext_exception_handler(request: Request, exc: KinextException) -> JSONResponse:
    """Return JSON from KinextException.to_dict() with the mapped status code."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if status == 401:
        headers = {"WWW-Authenticate": "Bearer"}
    else:
        headers = None
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=headers)


def _persistence_exception_handler(
    request: Request, exc: PersistenceException
) -> JSONResponse:
    """Return 500. Storage details are only exposed when debug is True."""
    logger.error(
        "Persistence failure in %s: %s (%s)", exc.details.get("operation"), exc.message, exc.details
    )
    if get_settings().debug:
        content = exc.to_dict()
    else:
        content = {
            "error": exc.error_code,
            "message": "A storage error occurred; please retry later",
            "details": {
                k: v for k, v in exc.details.items() if k in ("phase", "user_id")
            },
        }
    return JSONResponse(status_code=500, content=content)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": _jsonable_errors(exc),
        },
    )


def _jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Strip non-serializable context (e.g. exception objects in `ctx`) from errors."""
    errors = []
    for err in exc.errors():
        item = {k: v for k, v in err.items() if k not in ("ctx", "input", "url")}
        errors.append(item)
    return errors


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    PersistenceException is registered before its KinextException base;
    Starlette picks the most specific class by MRO either way.
    """
    app.add_exception_handler(PersistenceException, _persistence_exception_handler)
    app.add_exception_handler(KinextException, _kinext_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
