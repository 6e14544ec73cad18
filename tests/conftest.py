"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides isolated settings, catalog, client and API key fixtures. Every
test gets its own catalog, so mutations never leak between tests.

==============================================================================
"""

import pytest
from typing import Dict, Generator
from fastapi.testclient import TestClient

from app.catalog import ProductCatalog, SAMPLE_PRODUCTS, build_catalog
from app.config import Settings
from app.main import Application


TEST_API_KEY = "test-api-key-123"


# ============================================================================
# SETTINGS FIXTURES
# ============================================================================

@pytest.fixture
def settings() -> Settings:
    """Development settings with a known API key."""
    return Settings(
        _env_file=None,
        app_env="development",
        api_key=TEST_API_KEY,
        seed_sample_data=True,
        products_file=None,
    )


@pytest.fixture
def production_settings() -> Settings:
    """Production settings (no stack traces in errors)."""
    return Settings(
        _env_file=None,
        app_env="production",
        api_key=TEST_API_KEY,
        seed_sample_data=True,
        products_file=None,
    )


# ============================================================================
# CATALOG FIXTURES
# ============================================================================

@pytest.fixture
def catalog(settings: Settings) -> ProductCatalog:
    """Fresh catalog seeded with the sample products."""
    return build_catalog(settings)


@pytest.fixture
def empty_catalog() -> ProductCatalog:
    """Fresh catalog with no products."""
    return ProductCatalog()


@pytest.fixture
def widget_data() -> Dict:
    """Valid creation payload."""
    return {
        "name": "Widget",
        "description": "A widget",
        "price": 10,
        "category": "misc",
    }


# ============================================================================
# CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def application(settings: Settings, catalog: ProductCatalog) -> Application:
    """Application bound to the test settings and catalog."""
    return Application(settings=settings, catalog=catalog)


@pytest.fixture
def client(application: Application) -> Generator[TestClient, None, None]:
    """Test client for the sample catalog."""
    with TestClient(application.app) as test_client:
        yield test_client


# ============================================================================
# HEADER FIXTURES
# ============================================================================

@pytest.fixture
def api_headers() -> Dict[str, str]:
    """Headers carrying the valid API key."""
    return {"x-api-key": TEST_API_KEY}


@pytest.fixture
def bad_api_headers() -> Dict[str, str]:
    """Headers carrying a wrong API key."""
    return {"x-api-key": "not-the-key"}


@pytest.fixture
def sample_ids():
    """Ids of the seeded sample products in insertion order."""
    return [p["id"] for p in SAMPLE_PRODUCTS]
