# storefront/core/errors.py
"""
Envelope rendering for every error path.

Routers raise `HTTPException` (validation, not found, conflict...).
Repositories raise `StoreUnavailable` when Mongo is not reachable.
Anything else is a bug and becomes a logged 500.
All of them leave the API as `{"success": false, "error": "..."}`.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from storefront.db.mongo import StoreUnavailable

logger = logging.getLogger(__name__)


def envelope_error(status_code: int, error: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error}, headers=headers)


async def _http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    if exc.status_code >= 500:
        logger.error("%s %s -> %s %s", request.method, request.url.path, exc.status_code, detail)
    else:
        logger.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, detail)
    return envelope_error(exc.status_code, detail, headers=getattr(exc, "headers", None))


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = first.get("msg", "Invalid request")
    logger.info("%s %s -> 400 validation error %s", request.method, request.url.path, errors)
    return envelope_error(400, f"{loc}: {msg}" if loc else msg)


async def _store_unavailable_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
    logger.error("%s %s -> 503 store unavailable: %s", request.method, request.url.path, exc)
    return envelope_error(503, "Store unavailable")


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s -> 500 unhandled error", request.method, request.url.path)
    return envelope_error(500, str(exc) or "Server error")


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StoreUnavailable, _store_unavailable_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
