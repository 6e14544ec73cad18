"""
==============================================================================
Utilities Package
==============================================================================

Utility classes and functions for the application.

Modules:
--------
- validators: Product payload and query parameter validation

==============================================================================
"""

from .validators import ProductValidator, QueryParamsValidator

__all__ = [
    "ProductValidator",
    "QueryParamsValidator",
]
