"""
==============================================================================
Product Catalog Endpoints
==============================================================================

CRUD, listing, search and statistics for the product catalog.

Reads are public; create, update and delete require the x-api-key header.

==============================================================================
"""

from typing import Any, Mapping, Optional

from fastapi import APIRouter, Depends, Query, status

from app.catalog import ProductCatalog, ProductQuery
from app.core import exceptions
from app.core.dependencies import (
    get_catalog,
    get_product_query,
    require_api_key,
    validated_create,
    validated_update,
)


router = APIRouter(prefix="/products", tags=["Products"])


class ProductController:
    """Controller for product catalog operations."""

    def __init__(self, catalog: ProductCatalog):
        self._catalog = catalog

    def list_products(self, query: ProductQuery) -> dict:
        """List products with filters and pagination."""
        page = self._catalog.list(query)
        return {
            "success": True,
            "count": page.count,
            "pagination": page.pagination.to_response(),
            "data": [p.to_response() for p in page.products],
        }

    def search(self, query: Optional[str]) -> dict:
        """Search products by name, description or category."""
        if not query:
            raise exceptions.validation_error(
                "Search query is required. Use ?q=searchTerm"
            )

        matched = self._catalog.search(query)
        return {
            "success": True,
            "query": query,
            "count": len(matched),
            "data": [p.to_response() for p in matched],
        }

    def get_stats(self) -> dict:
        """Get catalog statistics."""
        return {
            "success": True,
            "data": self._catalog.stats(),
        }

    def get(self, product_id: str) -> dict:
        """Get product by id."""
        product = self._catalog.get(product_id)
        if not product:
            raise exceptions.product_not_found()
        return {"success": True, "data": product.to_response()}

    def create(self, data: Mapping[str, Any]) -> dict:
        """Create product."""
        product = self._catalog.create(data)
        return {
            "success": True,
            "message": "Product created successfully",
            "data": product.to_response(),
        }

    def update(self, product_id: str, data: Mapping[str, Any]) -> dict:
        """Update product."""
        product = self._catalog.update(product_id, data)
        if not product:
            raise exceptions.product_not_found()
        return {
            "success": True,
            "message": "Product updated successfully",
            "data": product.to_response(),
        }

    def delete(self, product_id: str) -> dict:
        """Delete product."""
        product = self._catalog.delete(product_id)
        if not product:
            raise exceptions.product_not_found()
        return {
            "success": True,
            "message": "Product deleted successfully",
            "data": product.to_response(),
        }


@router.get("")
def list_products(
    query: ProductQuery = Depends(get_product_query),
    catalog: ProductCatalog = Depends(get_catalog),
):
    """List products with search, category, stock and price filters."""
    return ProductController(catalog).list_products(query)


@router.get("/search")
def search_products(
    q: Optional[str] = Query(None, description="Search term"),
    catalog: ProductCatalog = Depends(get_catalog),
):
    """Search products by name, description or category."""
    return ProductController(catalog).search(q)


@router.get("/stats")
def get_product_stats(catalog: ProductCatalog = Depends(get_catalog)):
    """Get catalog statistics."""
    return ProductController(catalog).get_stats()


@router.get("/{product_id}")
def get_product(product_id: str, catalog: ProductCatalog = Depends(get_catalog)):
    """Get a single product."""
    return ProductController(catalog).get(product_id)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_api_key)],
)
def create_product(
    data: Mapping[str, Any] = Depends(validated_create),
    catalog: ProductCatalog = Depends(get_catalog),
):
    """Create a product."""
    return ProductController(catalog).create(data)


@router.put("/{product_id}", dependencies=[Depends(require_api_key)])
def update_product(
    product_id: str,
    data: Mapping[str, Any] = Depends(validated_update),
    catalog: ProductCatalog = Depends(get_catalog),
):
    """Update the supplied fields of a product."""
    return ProductController(catalog).update(product_id, data)


@router.delete("/{product_id}", dependencies=[Depends(require_api_key)])
def delete_product(product_id: str, catalog: ProductCatalog = Depends(get_catalog)):
    """Delete a product."""
    return ProductController(catalog).delete(product_id)
