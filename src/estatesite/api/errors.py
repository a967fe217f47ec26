"""
API Error Handlers

Renders every failure as {"success": false, "message": ...}.
"""
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.estatesite.exceptions import SiteError, ValidationError
from src.estatesite.utils.logger import get_logger

logger = get_logger(__name__)


def error_body(message: str, **extra) -> dict:
    body = {"success": False, "message": message}
    body.update({key: value for key, value in extra.items() if value is not None})
    return body


def field_from_location(loc) -> Optional[str]:
    """Last named element of a pydantic error location ("body", "images", 0) -> "images"."""
    names = [str(part) for part in loc if isinstance(part, str) and part not in ("body", "query", "path")]
    return names[-1] if names else None


async def site_error_handler(request: Request, exc: SiteError) -> JSONResponse:
    field = exc.field if isinstance(exc, ValidationError) else None
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "request_rejected",
        path=request.url.path,
        status_code=exc.status_code,
        error_type=type(exc).__name__,
        message=exc.message,
        field=field,
    )
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, field=field))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = field_from_location(first.get("loc", ()))
    detail = first.get("msg", "Invalid request")
    message = f"{field}: {detail}" if field else detail
    logger.warning("request_validation_failed", path=request.url.path, field=field, error=detail)
    return JSONResponse(status_code=400, content=error_body(message, field=field))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "internal_server_error",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
    )
    return JSONResponse(status_code=500, content=error_body("Server Error", error=str(exc)))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SiteError, site_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
