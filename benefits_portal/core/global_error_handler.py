from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from typing import Any, Optional
import logging
from benefits_portal.core.config import settings
from benefits_portal.core.exceptions import PortalError

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Location prefixes FastAPI puts in front of request field paths.
REQUEST_LOCATIONS = ("body", "query", "path", "header", "cookie")


def create_error_response(status_code: int, message: str, details: Optional[Any] = None) -> dict:
    """Every error leaves the API as {message, code[, details]}."""
    response = {
        "message": message,
        "code": status_code,
    }
    if details:
        response["details"] = details
    return response


def _error_json(status_code: int, message: str, details: Optional[Any] = None, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=create_error_response(status_code, message, details),
        headers=headers,
    )


def _where(request: Request) -> str:
    return f"{request.method} {request.url.path}"


def field_path(loc) -> str:
    parts = [str(part) for part in loc]
    if len(parts) > 1 and parts[0] in REQUEST_LOCATIONS:
        parts = parts[1:]
    return ".".join(parts)


async def portal_exception_handler(request: Request, exc: PortalError):
    """Domain errors raised by services carry their own HTTP status."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{type(exc).__name__}: {exc.detail} for {_where(request)}")
    return _error_json(exc.status_code, exc.detail, exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"HTTP {exc.status_code}: {exc.detail} for {_where(request)}")
    return _error_json(exc.status_code, exc.detail, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": field_path(error.get("loc", ())), "message": error.get("msg", "")}
        for error in exc.errors()
    ]
    logger.warning(f"Request validation failed for {_where(request)}: {errors}")
    return _error_json(status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation failed", {"errors": errors})


async def general_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled {type(exc).__name__} for {_where(request)}: {exc}")
    return _error_json(status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected internal server error occurred.")


def register_global_exception_handlers(app: FastAPI):
    app.exception_handler(PortalError)(portal_exception_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(RequestValidationError)(validation_exception_handler)
    app.exception_handler(Exception)(general_exception_handler)
