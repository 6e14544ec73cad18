"""
==============================================================================
Core Package
==============================================================================

Core utilities and infrastructure for the application.

This package provides:
- Error classification with consistent JSON error responses
- API key verification
- FastAPI dependencies forming the request pipeline

Modules:
--------
- exceptions: ErrorKind, AppException and error factory functions
- security: ApiKeyManager for the shared-secret gate
- dependencies: FastAPI dependency injection functions

Usage:
------
    from app.core import AppException, ErrorKind, require_api_key

    # Or use exception factory functions via module
    from app.core import exceptions
    raise exceptions.product_not_found()

==============================================================================
"""

from .exceptions import (
    AppException,
    ErrorKind,
    register_exception_handlers,
)
from .security import API_KEY_HEADER, ApiKeyManager
from .dependencies import (
    get_app_settings,
    get_catalog,
    get_product_query,
    require_api_key,
    validated_create,
    validated_update,
)

__all__ = [
    # Exceptions
    "AppException",
    "ErrorKind",
    "register_exception_handlers",
    # Security
    "API_KEY_HEADER",
    "ApiKeyManager",
    # Dependencies
    "get_app_settings",
    "get_catalog",
    "get_product_query",
    "require_api_key",
    "validated_create",
    "validated_update",
]
