"""
==============================================================================
Product Store Module
==============================================================================

Ordered in-memory record store, the sole owner of catalog state.

Features:
---------
- Insertion order preserved
- Linear id lookup (no secondary indexes)
- Copies handed out on every read, so callers never hold live records
- One re-entrant lock around every operation

==============================================================================
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Iterable, List, Optional

from .models import Product


# Module logger
logger = logging.getLogger(__name__)


class ProductStore:
    """
    Mutable, ordered collection of Product records.

    Each public method holds the store lock for its whole duration, so a
    reader never observes a half-applied write and concurrent appends
    cannot interleave.

    Example:
        >>> store = ProductStore()
        >>> store.append(product)
        >>> store.get(product.id)
        >>> store.replace(product.id, {"price": 9.5})
        >>> store.remove(product.id)
    """

    def __init__(self, products: Iterable[Product] = ()) -> None:
        self._lock = threading.RLock()
        self._products: List[Product] = [p.model_copy() for p in products]

    def __len__(self) -> int:
        with self._lock:
            return len(self._products)

    def _index_of(self, product_id: str) -> Optional[int]:
        for index, product in enumerate(self._products):
            if product.id == product_id:
                return index
        return None

    # =========================================================================
    # READS
    # =========================================================================

    def get(self, product_id: str) -> Optional[Product]:
        """Return a copy of the record with this id, or None."""
        with self._lock:
            index = self._index_of(product_id)
            if index is None:
                return None
            return self._products[index].model_copy()

    def snapshot(self) -> List[Product]:
        """Point-in-time copy of all records in insertion order."""
        with self._lock:
            return [product.model_copy() for product in self._products]

    # =========================================================================
    # WRITES
    # =========================================================================

    def append(self, product: Product) -> Product:
        """
        Insert a new record at the end of the collection.

        Raises:
            ValueError: If a record with the same id already exists
        """
        with self._lock:
            if self._index_of(product.id) is not None:
                raise ValueError(f"Duplicate product id: {product.id}")
            self._products.append(product.model_copy())
            return product.model_copy()

    def replace(self, product_id: str, changes: Dict[str, Any]) -> Optional[Product]:
        """
        Apply a partial update in place.

        Args:
            product_id: Target record id
            changes: Attribute name to new value; ``id`` is never touched

        Returns:
            Copy of the updated record, or None if no record matches
        """
        with self._lock:
            index = self._index_of(product_id)
            if index is None:
                return None

            updated = self._products[index].model_copy(deep=True)
            for field, value in changes.items():
                if field == "id":
                    continue
                setattr(updated, field, value)

            self._products[index] = updated
            return updated.model_copy()

    def remove(self, product_id: str) -> Optional[Product]:
        """Delete the record with this id and return it, or None."""
        with self._lock:
            index = self._index_of(product_id)
            if index is None:
                return None
            return self._products.pop(index)
