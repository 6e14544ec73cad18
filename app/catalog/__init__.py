"""
==============================================================================
Catalog Package - Product Management
==============================================================================

In-memory product catalog engine.

Classes:
--------
- Product: Pydantic model for products
- ProductStore: Ordered, lock-protected record store
- ProductQuery / ProductQueryEngine: Filtering, search and pagination
- ProductCatalog: CRUD facade over the store

==============================================================================
"""

from .models import Pagination, Product, ProductPage
from .store import ProductStore
from .query import ProductQuery, ProductQueryEngine
from .stats import compute_stats
from .catalog import SAMPLE_PRODUCTS, ProductCatalog, build_catalog

__all__ = [
    "Pagination",
    "Product",
    "ProductPage",
    "ProductStore",
    "ProductQuery",
    "ProductQueryEngine",
    "compute_stats",
    "SAMPLE_PRODUCTS",
    "ProductCatalog",
    "build_catalog",
]
