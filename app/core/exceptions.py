"""
API error taxonomy and the exception handlers that render it.

Every error leaves the API as:
    {"success": false, "error": {"code": "...", "message": "..."}}
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ErrorCode:
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    FORBIDDEN = "FORBIDDEN"
    ACCOUNT_DISABLED = "ACCOUNT_DISABLED"
    MEMBERSHIP_INACTIVE = "MEMBERSHIP_INACTIVE"
    MEMBERSHIP_EXPIRED = "MEMBERSHIP_EXPIRED"
    NOT_FOUND = "NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    CONFLICT = "CONFLICT"
    ALREADY_RATED = "ALREADY_RATED"
    PAYMENT_ERROR = "PAYMENT_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


_STATUS_CODES = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    409: ErrorCode.CONFLICT,
    503: ErrorCode.SERVICE_UNAVAILABLE,
}


class ApiError(Exception):
    """Domain error carrying its HTTP status and public error code."""

    def __init__(self, status_code: int, code: str, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message

    @classmethod
    def validation(cls, message: str) -> "ApiError":
        return cls(400, ErrorCode.VALIDATION_ERROR, message)

    @classmethod
    def unauthorized(cls, message: str = "Authentication required") -> "ApiError":
        return cls(401, ErrorCode.UNAUTHORIZED, message)

    @classmethod
    def forbidden(cls, message: str, code: str = ErrorCode.FORBIDDEN) -> "ApiError":
        return cls(403, code, message)

    @classmethod
    def not_found(cls, message: str, code: str = ErrorCode.NOT_FOUND) -> "ApiError":
        return cls(404, code, message)

    @classmethod
    def conflict(cls, message: str, code: str = ErrorCode.CONFLICT) -> "ApiError":
        return cls(409, code, message)

    @classmethod
    def internal(cls, message: str = "An unexpected error occurred") -> "ApiError":
        return cls(500, ErrorCode.INTERNAL_ERROR, message)


def error_body(code: str, message: str) -> dict:
    return {"success": False, "error": {"code": code, "message": message}}


def _cors_headers(request: Request) -> dict:
    """Headers so error responses (e.g. 500) still satisfy CORS in the browser."""
    settings = getattr(request.app.state, "settings", None)
    origins = settings.cors_origins if settings else []
    origin = request.headers.get("origin", "")
    if origin and (origin in origins or (settings and origin.endswith(settings.cors_origin_suffix))):
        return {"Access-Control-Allow-Origin": origin, "Access-Control-Allow-Credentials": "true"}
    return {}


def _format_validation_error(error: dict) -> str:
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    message = error.get("msg", "Invalid value")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return f"{'.'.join(loc)}: {message}" if loc else message


async def api_error_handler(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.code, exc.message))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "; ".join(_format_validation_error(e) for e in errors) or "Invalid request"
    return JSONResponse(status_code=400, content=error_body(ErrorCode.VALIDATION_ERROR, message))


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    fallback = ErrorCode.INTERNAL_ERROR if exc.status_code >= 500 else ErrorCode.VALIDATION_ERROR
    code = _STATUS_CODES.get(exc.status_code, fallback)
    message: Optional[str] = exc.detail if isinstance(exc.detail, str) else None
    if exc.status_code == 404 and (not message or message == "Not Found"):
        message = f"Endpoint '{request.url.path}' not found"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(code, message or "Request failed"),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    """Catch-all so unhandled exceptions still return the envelope and CORS headers."""
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content=error_body(ErrorCode.INTERNAL_ERROR, "An unexpected error occurred"),
        headers=_cors_headers(request),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
