"""
==============================================================================
Catalog Engine Tests
==============================================================================

Unit tests for the record store, query engine, statistics and catalog
mutations.

==============================================================================
"""

import json
import math
import threading

import pytest

from app.catalog import (
    Product,
    ProductCatalog,
    ProductQuery,
    ProductStore,
    SAMPLE_PRODUCTS,
    build_catalog,
    compute_stats,
)
from app.catalog.query import filter_products, paginate
from app.config import Settings


def make_product(product_id: str, **overrides) -> Product:
    fields = {
        "id": product_id,
        "name": f"Item {product_id}",
        "description": "Plain item",
        "price": 1.0,
        "category": "misc",
        "in_stock": True,
    }
    fields.update(overrides)
    return Product(**fields)


class TestProductStore:
    """Tests for ProductStore."""

    def test_preserves_insertion_order(self):
        """Test snapshot keeps insertion order."""
        store = ProductStore()
        for product_id in ("b", "a", "c"):
            store.append(make_product(product_id))
        assert [p.id for p in store.snapshot()] == ["b", "a", "c"]

    def test_get_missing(self):
        """Test lookup miss returns None."""
        assert ProductStore().get("x") is None

    def test_duplicate_id_rejected(self):
        """Test ids stay unique."""
        store = ProductStore([make_product("a")])
        with pytest.raises(ValueError):
            store.append(make_product("a"))
        assert len(store) == 1

    def test_replace_partial(self):
        """Test replace touches only the given fields."""
        store = ProductStore([make_product("a", price=5.0)])
        updated = store.replace("a", {"price": 7.5, "id": "zzz"})
        assert updated.price == 7.5
        assert updated.id == "a"
        assert updated.name == "Item a"
        assert store.get("a").price == 7.5

    def test_replace_missing(self):
        """Test replace on unknown id."""
        assert ProductStore().replace("a", {"price": 1}) is None

    def test_replace_invalid_is_atomic(self):
        """Test a rejected change leaves the record untouched."""
        store = ProductStore([make_product("a", price=5.0)])
        with pytest.raises(ValueError):
            store.replace("a", {"name": "New", "price": -1})
        assert store.get("a").name == "Item a"
        assert store.get("a").price == 5.0

    def test_remove(self):
        """Test remove returns the removed record."""
        store = ProductStore([make_product("a"), make_product("b")])
        removed = store.remove("a")
        assert removed.id == "a"
        assert store.remove("a") is None
        assert [p.id for p in store.snapshot()] == ["b"]

    def test_reads_are_copies(self):
        """Test callers cannot mutate stored records."""
        store = ProductStore([make_product("a")])
        copy = store.get("a")
        copy.name = "Changed"
        store.snapshot()[0].price = 99
        assert store.get("a").name == "Item a"
        assert store.get("a").price == 1.0

    def test_concurrent_appends(self):
        """Test parallel appends never lose records."""
        store = ProductStore()

        def worker(offset: int):
            for i in range(100):
                store.append(make_product(f"{offset}-{i}"))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(store) == 800
        assert len({p.id for p in store.snapshot()}) == 800


class TestQueryEngine:
    """Tests for filtering and pagination."""

    def test_no_filters_pass_everything(self):
        """Test an empty query keeps every record once, in order."""
        products = [make_product(str(i)) for i in range(5)]
        assert filter_products(products, ProductQuery()) == products

    def test_search_name_and_description_only(self):
        """Test listing search skips the category."""
        products = [
            make_product("1", name="Blue Mug"),
            make_product("2", description="Holds blue ink"),
            make_product("3", category="blue"),
        ]
        result = filter_products(products, ProductQuery(search="BLUE"))
        assert [p.id for p in result] == ["1", "2"]

    def test_inverted_price_range_is_empty(self):
        """Test min above max yields nothing."""
        products = [make_product(str(i), price=float(i)) for i in range(10)]
        assert filter_products(products, ProductQuery(min_price=8, max_price=2)) == []

    def test_price_bounds_inclusive(self):
        """Test both bounds are inclusive."""
        products = [make_product(str(i), price=float(i)) for i in range(10)]
        result = filter_products(products, ProductQuery(min_price=2, max_price=4))
        assert [p.price for p in result] == [2.0, 3.0, 4.0]

    @pytest.mark.parametrize("total, limit", [(0, 10), (1, 1), (7, 3), (10, 5), (23, 10), (100, 100)])
    def test_pages_cover_total(self, total: int, limit: int):
        """Test pages partition the filtered sequence."""
        products = [make_product(str(i)) for i in range(total)]
        pages = math.ceil(total / limit)

        collected = []
        for page in range(1, pages + 1):
            result = paginate(products, page, limit)
            assert result.pagination.pages == pages
            assert result.pagination.total == total
            collected.extend(result.products)

        assert collected == products

        beyond = paginate(products, pages + 1, limit)
        assert beyond.products == []
        assert beyond.pagination.pages == pages

    def test_next_prev_presence(self):
        """Test next/prev only appear when such pages exist."""
        products = [make_product(str(i)) for i in range(5)]
        assert paginate(products, 1, 5).pagination.to_response() == {
            "current": 1, "pages": 1, "total": 5, "limit": 5,
        }
        middle = paginate(products, 2, 2).pagination
        assert (middle.next, middle.prev) == (3, 1)

    def test_query_rejects_bad_limit(self):
        """Test ProductQuery guards its own bounds."""
        with pytest.raises(ValueError):
            ProductQuery(limit=0)


class TestStatistics:
    """Tests for compute_stats."""

    def test_empty(self):
        """Test empty catalog stats are all zero."""
        stats = compute_stats([])
        assert stats == {
            "totalProducts": 0,
            "inStockProducts": 0,
            "outOfStockProducts": 0,
            "categoryBreakdown": {},
            "priceStatistics": {"min": 0, "max": 0, "average": 0},
        }

    def test_counts_sum_to_total(self):
        """Test in-stock plus out-of-stock equals total."""
        products = [make_product(str(i), in_stock=i % 3 == 0) for i in range(10)]
        stats = compute_stats(products)
        assert stats["inStockProducts"] + stats["outOfStockProducts"] == stats["totalProducts"]
        assert stats["inStockProducts"] == 4

    def test_rounding(self):
        """Test prices are rounded to 2 places."""
        products = [
            make_product("a", price=1.005, category="x"),
            make_product("b", price=2.0, category="x"),
            make_product("c", price=2.0, category="y"),
        ]
        stats = compute_stats(products)
        assert stats["priceStatistics"]["max"] == 2.0
        assert stats["priceStatistics"]["average"] == 1.67
        assert stats["categoryBreakdown"] == {"x": 2, "y": 1}


class TestProductCatalog:
    """Tests for catalog mutations."""

    def test_create_generates_unique_ids(self, empty_catalog: ProductCatalog, widget_data: dict):
        """Test every create gets a new id."""
        ids = {empty_catalog.create(widget_data).id for _ in range(50)}
        assert len(ids) == 50

    def test_create_trims_and_defaults(self, empty_catalog: ProductCatalog):
        """Test text trimming and inStock default."""
        product = empty_catalog.create({
            "name": "  Desk ",
            "description": "\tOak desk\n",
            "price": 250,
            "category": " furniture ",
        })
        assert (product.name, product.description, product.category) == ("Desk", "Oak desk", "furniture")
        assert product.in_stock is True

    def test_update_only_supplied_fields(self, catalog: ProductCatalog):
        """Test update leaves other fields alone."""
        updated = catalog.update("3", {"inStock": True, "category": " appliances "})
        assert updated.in_stock is True
        assert updated.category == "appliances"
        assert updated.name == "Coffee Maker"

    def test_update_empty_payload(self, catalog: ProductCatalog):
        """Test empty update is a no-op."""
        before = catalog.get("1")
        assert catalog.update("1", {}) == before

    def test_update_missing(self, catalog: ProductCatalog):
        """Test update of unknown id."""
        assert catalog.update("missing", {"price": 1}) is None

    def test_delete_missing_keeps_size(self, catalog: ProductCatalog):
        """Test deleting unknown id changes nothing."""
        assert catalog.delete("missing") is None
        assert len(catalog) == 3

    def test_search_sample(self, catalog: ProductCatalog):
        """Test search over the sample catalog."""
        assert [p.name for p in catalog.search("coffee")] == ["Coffee Maker"]
        assert len(catalog.search("E")) == 3

    def test_list_category(self, catalog: ProductCatalog):
        """Test category listing ignores case."""
        page = catalog.list(ProductQuery(category="Kitchen"))
        assert [p.id for p in page.products] == ["3"]


class TestSeeding:
    """Tests for catalog seeding."""

    def test_sample_seed(self, catalog: ProductCatalog):
        """Test the sample products are loaded with their ids."""
        assert [p.id for p in catalog.all()] == [p["id"] for p in SAMPLE_PRODUCTS]

    def test_seed_disabled(self):
        """Test seeding can be turned off."""
        settings = Settings(_env_file=None, seed_sample_data=False, products_file=None)
        assert len(build_catalog(settings)) == 0

    def test_load_file(self, tmp_path):
        """Test seeding from a JSON file."""
        path = tmp_path / "products.json"
        path.write_text(json.dumps([
            {"name": "Chair", "description": "Wooden chair", "price": 40, "category": "furniture"},
            {"id": "t1", "name": "Table", "description": "Round table", "price": 90,
             "category": "furniture", "inStock": False},
        ]))
        settings = Settings(_env_file=None, products_file=str(path))
        catalog = build_catalog(settings)
        products = catalog.all()
        assert len(products) == 2
        assert products[1].id == "t1"
        assert products[1].in_stock is False

    def test_load_file_invalid_record(self, tmp_path):
        """Test an invalid seed record aborts loading."""
        path = tmp_path / "products.json"
        path.write_text(json.dumps([{"name": "C", "price": -1}]))
        with pytest.raises(ValueError, match="Seed record 0 invalid"):
            ProductCatalog().load_file(path)

    def test_load_file_not_a_list(self, tmp_path):
        """Test the seed file must hold a list."""
        path = tmp_path / "products.json"
        path.write_text(json.dumps({"name": "Chair"}))
        with pytest.raises(ValueError):
            ProductCatalog().load_file(path)

    def test_load_file_missing(self, tmp_path):
        """Test a missing seed file raises."""
        with pytest.raises(FileNotFoundError):
            ProductCatalog().load_file(tmp_path / "absent.json")
