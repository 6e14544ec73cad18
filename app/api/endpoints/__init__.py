"""
==============================================================================
API Endpoints
==============================================================================

Routers:
--------
- products: Product catalog CRUD, search and statistics

==============================================================================
"""

from . import products

__all__ = ["products"]
