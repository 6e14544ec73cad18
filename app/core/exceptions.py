"""
Application Exception Handling

Single AppException class tagged with an ErrorKind, plus the terminal
FastAPI handlers that turn every failure into a JSON error response.
"""

import logging
import traceback
from enum import Enum
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings


# Module logger
logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """
    Fixed error taxonomy.

    Each kind maps to a stable HTTP status code.
    """

    VALIDATION = "ValidationError"
    AUTHENTICATION = "AuthenticationError"
    NOT_FOUND = "NotFoundError"
    SERVER = "ServerError"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTHENTICATION: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.SERVER: 500,
}


class AppException(Exception):
    """
    Unified application exception for all error scenarios.

    Usage:
        raise AppException("Product not found", ErrorKind.NOT_FOUND)
        raise validation_failed(["Price must be a positive number"])

    Error Kinds:
        - VALIDATION (400): field/query validation, malformed body
        - AUTHENTICATION (401): missing or wrong API key
        - NOT_FOUND (404): unknown product id, unmatched route
        - SERVER (500): anything unclassified
    """

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.SERVER):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            kind: Error classification (default: SERVER)
        """
        self.message = message
        self.kind = kind
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def to_dict(self, stack: List[str] = None) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict: Dict[str, Any] = {
            "success": False,
            "message": self.message,
        }

        if stack is not None:
            error_dict["stack"] = stack

        return error_dict


# ============================================
# TERMINAL HANDLERS
# ============================================

def _include_details(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None) or get_settings()
    return settings.include_error_details


def _format_stack(exc: BaseException) -> List[str]:
    lines = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return [line.rstrip("\n") for line in lines]


def _error_response(request: Request, error: AppException, cause: BaseException) -> JSONResponse:
    """Log and serialize a classified error."""
    if error.kind is ErrorKind.SERVER:
        logger.error(
            f"{request.method} {request.url.path} -> {error.status_code}: {error.message}",
            exc_info=(type(cause), cause, cause.__traceback__),
        )
    else:
        logger.warning(
            f"{request.method} {request.url.path} -> {error.status_code} "
            f"{error.kind.value}: {error.message}"
        )

    stack = _format_stack(cause) if _include_details(request) else None
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_dict(stack)
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Converts AppException to the JSON error response."""
    return _error_response(request, exc, exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Maps FastAPI request parsing errors to ValidationError."""
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        error = validation_error("Invalid JSON format")
    else:
        messages = []
        for err in errors:
            location = ".".join(str(part) for part in err.get("loc", ()))
            messages.append(f"{location}: {err.get('msg')}")
        error = validation_failed(messages)
    return _error_response(request, error, exc)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Maps routing errors; unmatched routes become NotFoundError."""
    if exc.status_code in (404, 405):
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        error = route_not_found(target)
    elif exc.status_code == 401:
        error = AppException(str(exc.detail), ErrorKind.AUTHENTICATION)
    elif exc.status_code < 500:
        error = validation_error(str(exc.detail))
    else:
        error = internal_error()
    return _error_response(request, error, exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: anything unclassified is a ServerError."""
    return _error_response(request, internal_error(), exc)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def validation_error(message: str) -> AppException:
    """Create a single-message validation exception."""
    return AppException(message, ErrorKind.VALIDATION)


def validation_failed(violations: List[str]) -> AppException:
    """Aggregate field violations into one validation exception."""
    return AppException(
        f"Validation failed: {', '.join(violations)}",
        ErrorKind.VALIDATION
    )


def api_key_missing() -> AppException:
    """Create missing API key exception."""
    return AppException(
        "API key is required. Please include x-api-key in headers.",
        ErrorKind.AUTHENTICATION
    )


def api_key_invalid() -> AppException:
    """Create invalid API key exception."""
    return AppException("Invalid API key", ErrorKind.AUTHENTICATION)


def product_not_found() -> AppException:
    """Create product not found exception."""
    return AppException("Product not found", ErrorKind.NOT_FOUND)


def route_not_found(path: str) -> AppException:
    """Create unmatched route exception."""
    return AppException(f"Can't find {path} on this server!", ErrorKind.NOT_FOUND)


def internal_error(message: str = "Server Error") -> AppException:
    """Create internal server error exception."""
    return AppException(message, ErrorKind.SERVER)
