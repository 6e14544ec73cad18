"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency injection for the request pipeline.

This module implements:
- Access to the per-application Settings and ProductCatalog
- The API key gate for mutations
- Query parameter validation producing an immutable ProductQuery
- Body validation producing an immutable, validated payload

Design Pattern: Dependency Injection
-----------------------------------
Each stage either returns a value consumed by the next stage or raises
an AppException that goes straight to the terminal handlers:

        ┌──────────────────┐
        │ require_api_key  │  (mutations only)
        └────────┬─────────┘
                 │
        ┌────────▼─────────┐      ┌───────────────────┐
        │  read_payload    │      │ get_product_query │  (listing)
        └────────┬─────────┘      └─────────┬─────────┘
                 │                          │
     ┌───────────▼───────────┐              │
     │ validated_create /    │              │
     │ validated_update      │              │
     └───────────┬───────────┘              │
                 └────────────┬─────────────┘
                     ┌────────▼────────┐
                     │ ProductCatalog  │
                     └─────────────────┘

Usage Examples:
--------------
    @router.post("", dependencies=[Depends(require_api_key)])
    def create(
        data: Mapping[str, Any] = Depends(validated_create),
        catalog: ProductCatalog = Depends(get_catalog),
    ):
        ...

==============================================================================
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from fastapi import Body, Depends, Query, Request, Security
from fastapi.security import APIKeyHeader

from app.catalog import ProductCatalog, ProductQuery
from app.config import Settings, get_settings
from app.core import exceptions
from app.core.security import API_KEY_HEADER, ApiKeyManager
from app.utils.validators import ProductValidator, QueryParamsValidator


# Module logger
logger = logging.getLogger(__name__)

# API key header scheme for Swagger UI
api_key_scheme = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)

SENSITIVE_FIELDS = ("password", "apiKey")


# =============================================================================
# APPLICATION STATE
# =============================================================================

def get_app_settings(request: Request) -> Settings:
    """Settings bound to the running application."""
    return getattr(request.app.state, "settings", None) or get_settings()


def get_catalog(request: Request) -> ProductCatalog:
    """
    The catalog owned by the running application.

    Raises:
        AppException: SERVER if the application has no catalog attached
    """
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise exceptions.internal_error("Product catalog not loaded")
    return catalog


# =============================================================================
# AUTHENTICATION
# =============================================================================

def require_api_key(
    api_key: Optional[str] = Security(api_key_scheme),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """
    FastAPI dependency guarding mutating endpoints.

    Raises:
        AppException: AUTHENTICATION if the key is missing or wrong
    """
    ApiKeyManager(settings).verify(api_key)


# =============================================================================
# QUERY PARAMETERS
# =============================================================================

def get_product_query(
    search: Optional[str] = Query(None, description="Text in name or description"),
    category: Optional[str] = Query(None, description="Category (case-insensitive)"),
    in_stock: Optional[str] = Query(None, alias="inStock", description="'true' or 'false'"),
    min_price: Optional[str] = Query(None, alias="minPrice", description="Inclusive lower price bound"),
    max_price: Optional[str] = Query(None, alias="maxPrice", description="Inclusive upper price bound"),
    page: Optional[str] = Query(None, description="Page number (1-indexed)"),
    limit: Optional[str] = Query(None, description="Items per page (1-100)"),
) -> ProductQuery:
    """
    FastAPI dependency turning raw listing parameters into a ProductQuery.

    Raises:
        AppException: VALIDATION with the first violated rule
    """
    is_valid, parsed, error = QueryParamsValidator().validate({
        "page": page,
        "limit": limit,
        "minPrice": min_price,
        "maxPrice": max_price,
    })
    if not is_valid:
        raise exceptions.validation_error(error)

    return ProductQuery(
        search=search or None,
        category=category or None,
        in_stock=None if in_stock is None else in_stock.lower() == "true",
        **parsed,
    )


# =============================================================================
# REQUEST BODY
# =============================================================================

def read_payload(payload: Any = Body(None)) -> Dict[str, Any]:
    """
    FastAPI dependency returning the JSON body as an object.

    Raises:
        AppException: VALIDATION if the body is not a JSON object
    """
    if not isinstance(payload, dict):
        raise exceptions.validation_error("Request body must be a JSON object")

    loggable = {k: v for k, v in payload.items() if k not in SENSITIVE_FIELDS}
    logger.debug(f"Request body: {loggable}")
    return payload


def validated_create(payload: Dict[str, Any] = Depends(read_payload)) -> Mapping[str, Any]:
    """
    Full validation for product creation.

    Raises:
        AppException: VALIDATION listing every violation
    """
    errors = ProductValidator().validate_full(payload)
    if errors:
        raise exceptions.validation_failed(errors)
    return MappingProxyType(dict(payload))


def validated_update(payload: Dict[str, Any] = Depends(read_payload)) -> Mapping[str, Any]:
    """
    Partial validation for product updates.

    Raises:
        AppException: VALIDATION listing every violation
    """
    errors = ProductValidator().validate_partial(payload)
    if errors:
        raise exceptions.validation_failed(errors)
    return MappingProxyType(dict(payload))
