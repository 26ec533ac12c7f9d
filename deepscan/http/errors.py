"""Uniform {success: false, error, message} envelope for every failure."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from deepscan.exceptions import ServiceError
from deepscan.logging.logger import Log
from deepscan.ratelimit.exceptions import RateLimitExceededError

_HTTP_TITLES = {
    400: "Validation error",
    403: "Access denied",
    404: "Not found",
    405: "Method not allowed",
    413: "Payload too large",
    429: "Rate limit exceeded",
}


def error_response(
    status_code: int,
    error: str,
    message: str,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "message": message, **extra},
        headers=headers,
    )


async def _handle_rate_limit(request: Request, exc: RateLimitExceededError) -> JSONResponse:
    return error_response(
        exc.status_code,
        exc.error,
        str(exc),
        headers={"Retry-After": str(exc.retry_after)},
        retryAfter=exc.retry_after,
    )


async def _handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        Log.error(f"[ERROR] {request.method} {request.url.path}: {exc}")
    else:
        Log.info(f"Rejected {request.method} {request.url.path}: {exc}")
    return error_response(exc.status_code, exc.title, str(exc))


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, "Validation error", "Invalid request", details=jsonable_encoder(exc.errors()))


async def _handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    title = _HTTP_TITLES.get(exc.status_code, "Request failed")
    return error_response(
        exc.status_code,
        title,
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    Log.exception(f"[ERROR] {request.method} {request.url.path}: {exc}")
    return error_response(500, "Internal server error", "An unexpected error occurred")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RateLimitExceededError, _handle_rate_limit)  # type: ignore[arg-type]
    app.add_exception_handler(ServiceError, _handle_service_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _handle_http_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _handle_unexpected)
