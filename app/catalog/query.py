"""
==============================================================================
Product Query Module
==============================================================================

Filtered, paginated views over a store snapshot. Nothing here mutates
the store.

Filters (all optional, combined with AND):
-----------------------------------------
- search: substring of name or description, case-insensitive
- category: equality, case-insensitive
- in_stock: equality
- min_price / max_price: inclusive bounds

==============================================================================
"""

from __future__ import annotations

import math
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import Pagination, Product, ProductPage
from .store import ProductStore


DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


Predicate = Callable[[Product], bool]


class ProductQuery(BaseModel):
    """Immutable set of listing filters and pagination parameters."""

    model_config = ConfigDict(frozen=True)

    search: Optional[str] = None
    category: Optional[str] = None
    in_stock: Optional[bool] = None
    min_price: Optional[float] = Field(default=None, ge=0)
    max_price: Optional[float] = Field(default=None, ge=0)
    page: int = Field(default=DEFAULT_PAGE, ge=1)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)


def build_predicates(query: ProductQuery) -> List[Predicate]:
    """Translate the active filters of a query into predicates."""
    predicates: List[Predicate] = []

    if query.search:
        term = query.search.lower()
        predicates.append(
            lambda p: term in p.name.lower() or term in p.description.lower()
        )

    if query.category:
        category = query.category.lower()
        predicates.append(lambda p: p.category.lower() == category)

    if query.in_stock is not None:
        in_stock = query.in_stock
        predicates.append(lambda p: p.in_stock == in_stock)

    if query.min_price is not None:
        min_price = query.min_price
        predicates.append(lambda p: p.price >= min_price)

    if query.max_price is not None:
        max_price = query.max_price
        predicates.append(lambda p: p.price <= max_price)

    return predicates


def filter_products(products: List[Product], query: ProductQuery) -> List[Product]:
    """Return the filtered sequence, preserving input order."""
    predicates = build_predicates(query)
    return [p for p in products if all(check(p) for check in predicates)]


def paginate(products: List[Product], page: int, limit: int) -> ProductPage:
    """
    Slice one page out of a filtered sequence.

    A page beyond the last one is empty but keeps accurate metadata.
    """
    total = len(products)
    start = (page - 1) * limit
    end = page * limit

    pagination = Pagination(
        current=page,
        pages=math.ceil(total / limit),
        total=total,
        limit=limit,
        next=page + 1 if end < total else None,
        prev=page - 1 if start > 0 else None,
    )
    return ProductPage(products=products[start:end], pagination=pagination)


def matches_term(product: Product, term: str) -> bool:
    """Case-insensitive substring match on name, description or category."""
    term = term.lower()
    return (
        term in product.name.lower()
        or term in product.description.lower()
        or term in product.category.lower()
    )


class ProductQueryEngine:
    """
    Read-only query operations over a ProductStore.

    Every call works on a single snapshot, so a concurrent mutation
    cannot change the result halfway through.
    """

    def __init__(self, store: ProductStore) -> None:
        self._store = store

    def list(self, query: ProductQuery) -> ProductPage:
        """Filter then paginate."""
        filtered = filter_products(self._store.snapshot(), query)
        return paginate(filtered, query.page, query.limit)

    def search(self, term: str) -> List[Product]:
        """Unpaginated full-text match."""
        return [p for p in self._store.snapshot() if matches_term(p, term)]
