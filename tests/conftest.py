"""
Pytest configuration and shared fixtures for the storefront tests.
"""
import os
import sys
import time
from typing import Callable, List, Optional
from unittest.mock import patch

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

# Test credentials (real values from the environment or .env take precedence)
TEST_JWT_SECRET = "test-jwt-secret-with-at-least-32-bytes!"
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", TEST_JWT_SECRET)
os.environ.setdefault("ENVIRONMENT", "development")

# Load environment variables
from dotenv import load_dotenv
load_dotenv(os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env"))

from fake_supabase import FakeSupabase


# ============================================================================
# Fixtures: Test Data Factories
# ============================================================================

def make_product(product_id: str, name: str, **fields) -> dict:
    """A products-table row with sensible defaults."""
    row = {
        "id": product_id,
        "product_name": name,
        "category": "Electronics",
        "discounted_price": "₹999",
        "actual_price": "₹1,999",
        "discount_percentage": "50%",
        "rating": 4.0,
        "rating_count": "100",
        "about_product": f"About {name}",
        "img_link": f"https://img.example.com/{product_id}.jpg",
        "product_link": f"https://shop.example.com/{product_id}",
    }
    row.update(fields)
    return row


SAMPLE_PRODUCTS = [
    make_product("P001", "Wireless Bluetooth Headphones", category="Electronics|Audio|Headphones",
                 discounted_price="₹1,299", actual_price="₹2,999", rating=4.2),
    make_product("P002", "USB-C Charging Cable 2m", category="Computers&Accessories|Cables",
                 discounted_price="₹199", actual_price="₹499", rating=4.0),
    make_product("P003", "Noise Cancelling Earbuds", category="Electronics|Audio|Earbuds",
                 discounted_price="₹3,499", actual_price="₹5,999", rating=4.5),
    make_product("P004", "Smart Watch Fitness Tracker", category="Electronics|Wearables",
                 discounted_price="₹2,499", actual_price="₹4,999", rating=None),
    make_product("P005", "Stainless Steel Water Bottle", category="Home&Kitchen|Kitchen",
                 discounted_price="₹499", actual_price="₹799", rating=3.8),
    make_product("P006", "Bluetooth Speaker 100% Waterproof", category="Electronics|Audio|Speakers",
                 discounted_price="₹1,299", actual_price="₹1,999", rating=4.2),
    make_product("P007", "Laptop Stand_Adjustable", category="Computers&Accessories|Stands",
                 discounted_price="", actual_price="₹1,499", rating=3.1),
    make_product("P008", "HDMI Cable 4K", category="Computers&Accessories|Cables",
                 discounted_price="₹349", actual_price="₹899", rating="3.9"),
]


@pytest.fixture
def sample_products() -> List[dict]:
    """Catalog rows as the store returns them."""
    return [dict(p) for p in SAMPLE_PRODUCTS]


@pytest.fixture
def product_models(sample_products):
    """Sample rows validated into Product models, keyed by id."""
    from catalog.models import Product
    return {row["id"]: Product.model_validate(row) for row in sample_products}


# ============================================================================
# Fixtures: Mock Services
# ============================================================================

@pytest.fixture
def fake_db(sample_products) -> FakeSupabase:
    """In-memory Supabase client seeded with the sample catalog."""
    return FakeSupabase({"products": sample_products})


@pytest.fixture
def catalog_store(fake_db):
    from catalog.store import CatalogStore
    return CatalogStore(fake_db)


class StubRanker:
    """Semantic client double: returns a fixed result and records calls."""

    def __init__(self, result):
        self.result = result
        self.calls = []

    def search(self, query: str, n_results: int = 100):
        self.calls.append((query, n_results))
        return self.result


@pytest.fixture
def make_ranker() -> Callable[..., StubRanker]:
    """
    Build a StubRanker from ranked ids, or a failure reason.

    Usage:
        ranker = make_ranker(["P003", "P001"])
        ranker = make_ranker(error="timed out")
    """
    from catalog.semantic_client import SemanticCandidate, SemanticSearchResult

    def _make(ids: Optional[List[str]] = None, error: Optional[str] = None) -> StubRanker:
        if error is not None:
            return StubRanker(SemanticSearchResult.failure(error))
        candidates = [
            SemanticCandidate(product_id=pid, score=1.0 - i * 0.01, metadata={"id": pid, "score": 1.0 - i * 0.01})
            for i, pid in enumerate(ids or [])
        ]
        return StubRanker(SemanticSearchResult.success(candidates))

    return _make


@pytest.fixture
def store_logs(monkeypatch):
    """
    Structured events emitted by the store query helper.

    Loggers are cached on first use, so a fresh one is swapped in for the
    duration of the capture.
    """
    import structlog
    from structlog.testing import capture_logs
    from config import database

    monkeypatch.setattr(database, "logger", structlog.get_logger("config.database"))
    with capture_logs() as logs:
        yield logs


@pytest.fixture
def test_settings():
    """Settings instance independent of the environment."""
    from config.settings import get_settings_for_testing
    return get_settings_for_testing()


# ============================================================================
# Fixtures: FastAPI Test Client
# ============================================================================

@pytest.fixture
def app():
    """Get the FastAPI application."""
    from api.app import create_app
    return create_app()


# ============================================================================
# Markers auto-use
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "supabase: marks tests that require Supabase")


# ============================================================================
# JWT Token Generation
# ============================================================================

def generate_test_jwt(user_id: str = "test-user-001", exp_hours: int = 24, **claims) -> str:
    """
    Generate a Supabase-style access token signed with the configured secret.

    Args:
        user_id: The user ID to include in the token
        exp_hours: Hours until token expires (negative for an expired token)
        **claims: Extra or overriding claims
    """
    import jwt
    from config.settings import get_settings

    now = int(time.time())
    payload = {
        "sub": user_id,
        "aud": "authenticated",
        "role": "authenticated",
        "email": f"{user_id}@test.com",
        "exp": now + (exp_hours * 3600),
        "iat": now,
    }
    payload.update(claims)
    return jwt.encode(payload, get_settings().supabase_jwt_secret, algorithm="HS256")


@pytest.fixture
def test_jwt_token() -> str:
    """Fixture providing a valid test JWT token."""
    return generate_test_jwt()


@pytest.fixture
def auth_headers(test_jwt_token: str) -> dict:
    """Fixture providing auth headers with Bearer token."""
    return {"Authorization": f"Bearer {test_jwt_token}"}


@pytest.fixture
def mock_requests_post():
    """Patch the HTTP call made by the semantic search client."""
    with patch("catalog.semantic_client.requests.post") as mock_post:
        yield mock_post


# ============================================================================
# Skip conditions
# ============================================================================

def pytest_collection_modifyitems(config, items):
    """Auto-skip integration tests if no server URL is configured."""
    skip_integration = pytest.mark.skip(reason="Integration tests require running server")
    skip_supabase = pytest.mark.skip(reason="Supabase tests require credentials")

    server_url = os.getenv("TEST_SERVER_URL")
    supabase_configured = os.getenv("SUPABASE_URL", "") != "https://test.supabase.co"

    for item in items:
        if "integration" in item.keywords and not server_url:
            item.add_marker(skip_integration)
        if "supabase" in item.keywords and not supabase_configured:
            item.add_marker(skip_supabase)
