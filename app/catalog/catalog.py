"""
==============================================================================
Product Catalog Module
==============================================================================

Catalog facade: mutation operations over the ProductStore plus the
read paths of the query engine and statistics aggregator.

Features:
---------
- Create / update / delete with whitespace trimming
- Filtered, paginated listing and unpaginated search
- Aggregate statistics
- Seeding from the built-in sample or a JSON file

Seed File Structure:
-------------------
[
  {"id": "1", "name": "Laptop", "description": "...", "price": 1200,
   "category": "electronics", "inStock": true},
  ...
]

The "id" key is optional in seed files; missing ids are generated.

==============================================================================
"""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from app.config import Settings
from app.utils.validators import ProductValidator

from .models import Product, ProductPage
from .query import ProductQuery, ProductQueryEngine
from .stats import compute_stats
from .store import ProductStore


# Module logger
logger = logging.getLogger(__name__)


SAMPLE_PRODUCTS: List[Dict[str, Any]] = [
    {
        "id": "1",
        "name": "Laptop",
        "description": "High-performance laptop with 16GB RAM",
        "price": 1200,
        "category": "electronics",
        "inStock": True,
    },
    {
        "id": "2",
        "name": "Smartphone",
        "description": "Latest model with 128GB storage",
        "price": 800,
        "category": "electronics",
        "inStock": True,
    },
    {
        "id": "3",
        "name": "Coffee Maker",
        "description": "Programmable coffee maker with timer",
        "price": 50,
        "category": "kitchen",
        "inStock": False,
    },
]

# Public field name -> Product attribute
UPDATABLE_FIELDS = {
    "name": "name",
    "description": "description",
    "price": "price",
    "category": "category",
    "inStock": "in_stock",
}
TEXT_FIELDS = {"name", "description", "category"}


def _clean(field: str, value: Any) -> Any:
    if field in TEXT_FIELDS:
        return value.strip()
    return value


class ProductCatalog:
    """
    Product catalog with CRUD, query and statistics operations.

    Payloads passed to ``create`` and ``update`` must already have passed
    ProductValidator; the catalog only normalizes and applies them.
    A lookup miss is reported as None, never raised.

    Example:
        >>> catalog = ProductCatalog()
        >>> product = catalog.create({"name": "Desk", "description": "Oak desk",
        ...                           "price": 250, "category": "furniture"})
        >>> catalog.update(product.id, {"price": 199})
        >>> catalog.list(ProductQuery(category="FURNITURE")).count
        1
    """

    def __init__(self, store: Optional[ProductStore] = None) -> None:
        self._store = store if store is not None else ProductStore()
        self._query = ProductQueryEngine(self._store)

    def __len__(self) -> int:
        return len(self._store)

    # =========================================================================
    # READS
    # =========================================================================

    def get(self, product_id: str) -> Optional[Product]:
        """Find product by id."""
        return self._store.get(product_id)

    def all(self) -> List[Product]:
        """All products in insertion order."""
        return self._store.snapshot()

    def list(self, query: Optional[ProductQuery] = None) -> ProductPage:
        """Filtered, paginated listing."""
        return self._query.list(query or ProductQuery())

    def search(self, term: str) -> List[Product]:
        """Products whose name, description or category contains term."""
        return self._query.search(term)

    def stats(self) -> Dict[str, Any]:
        """Aggregate statistics over the current contents."""
        return compute_stats(self._store.snapshot())

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def create(self, data: Mapping[str, Any]) -> Product:
        """
        Create a product from a fully validated payload.

        Args:
            data: Payload with name, description, price, category and
                optionally inStock

        Returns:
            The stored product with its generated id
        """
        product = Product(
            id=str(uuid.uuid4()),
            name=data["name"].strip(),
            description=data["description"].strip(),
            price=data["price"],
            category=data["category"].strip(),
            in_stock=data.get("inStock", True),
        )
        created = self._store.append(product)
        logger.info(f"Product created: {created.id} ({created.name})")
        return created

    def update(self, product_id: str, data: Mapping[str, Any]) -> Optional[Product]:
        """
        Apply a partially validated payload to an existing product.

        Only known fields are applied; ``id`` and unknown keys are ignored.

        Returns:
            The updated product, or None if the id is unknown
        """
        changes = {
            attr: _clean(field, data[field])
            for field, attr in UPDATABLE_FIELDS.items()
            if field in data
        }
        updated = self._store.replace(product_id, changes)
        if updated is None:
            logger.debug(f"Update skipped, product not found: {product_id}")
            return None

        logger.info(f"Product updated: {product_id} fields={sorted(changes)}")
        return updated

    def delete(self, product_id: str) -> Optional[Product]:
        """
        Remove a product.

        Returns:
            The removed product, or None if the id is unknown
        """
        removed = self._store.remove(product_id)
        if removed is None:
            logger.debug(f"Delete skipped, product not found: {product_id}")
            return None

        logger.info(f"Product deleted: {product_id} ({removed.name})")
        return removed

    # =========================================================================
    # SEEDING
    # =========================================================================

    def seed(self, records: Iterable[Mapping[str, Any]]) -> int:
        """
        Bulk-insert records, keeping supplied ids.

        Each record passes full validation first.

        Raises:
            ValueError: If a record is invalid or an id repeats

        Returns:
            Number of inserted records
        """
        validator = ProductValidator()
        count = 0

        for position, record in enumerate(records):
            if not isinstance(record, Mapping):
                raise ValueError(f"Seed record {position} is not an object")

            errors = validator.validate_full(record)
            if errors:
                raise ValueError(f"Seed record {position} invalid: {', '.join(errors)}")

            product = Product(
                id=str(record.get("id") or uuid.uuid4()),
                name=record["name"].strip(),
                description=record["description"].strip(),
                price=record["price"],
                category=record["category"].strip(),
                in_stock=record.get("inStock", True),
            )
            self._store.append(product)
            count += 1

        return count

    def load_file(self, path: Path) -> int:
        """
        Seed from a JSON file holding a list of products.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the content is not a list of valid products
        """
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.error(f"Products file not found: {path}")
            raise
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in {path}: {e}")
            raise ValueError(f"Invalid JSON in {path}") from e

        if not isinstance(data, list):
            raise ValueError(f"{path} must contain a JSON list of products")

        count = self.seed(data)
        logger.info(f"Loaded {count} products from {path}")
        return count


def build_catalog(settings: Settings) -> ProductCatalog:
    """
    Create the catalog for one application instance.

    Args:
        settings: Settings deciding which seed data to load

    Returns:
        A new, seeded ProductCatalog
    """
    catalog = ProductCatalog()

    if settings.products_path is not None:
        catalog.load_file(settings.products_path)
    elif settings.seed_sample_data:
        catalog.seed(SAMPLE_PRODUCTS)
        logger.info(f"Seeded {len(catalog)} sample products")

    return catalog
