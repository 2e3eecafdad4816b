"""
Tests for configuration management.
"""

import pytest


class TestSettings:
    """Tests for Settings class."""

    def test_settings_from_testing_helper(self):
        """get_settings_for_testing fills required values."""
        from config.settings import get_settings_for_testing

        settings = get_settings_for_testing()

        assert settings.supabase_url == "https://test.supabase.co"
        assert settings.supabase_service_key == "test-key"
        assert settings.environment == "testing"

    def test_settings_overrides(self):
        from config.settings import get_settings_for_testing

        settings = get_settings_for_testing(
            port=9000,
            default_page_size=10,
            semantic_candidate_count=50,
        )

        assert settings.port == 9000
        assert settings.default_page_size == 10
        assert settings.semantic_candidate_count == 50

    def test_catalog_defaults(self):
        """Page sizes and ranking limits have sensible defaults."""
        from config.settings import get_settings_for_testing

        settings = get_settings_for_testing()

        assert settings.default_page_size == 20
        assert settings.max_page_size == 100
        assert settings.semantic_candidate_count == 100
        assert settings.semantic_search_timeout_seconds == 5.0

    def test_is_development(self):
        from config.settings import get_settings_for_testing

        assert get_settings_for_testing(environment="development").is_development
        assert get_settings_for_testing(environment="local").is_development
        assert not get_settings_for_testing(environment="production").is_development

    def test_docs_enabled_independent_of_environment(self):
        from config.settings import get_settings_for_testing

        assert get_settings_for_testing(environment="production").docs_enabled
        assert not get_settings_for_testing(environment="development", docs_enabled=False).docs_enabled

    def test_is_production(self):
        from config.settings import get_settings_for_testing

        assert get_settings_for_testing(environment="production").is_production
        assert get_settings_for_testing(environment="prod").is_production
        assert not get_settings_for_testing(environment="development").is_production

    def test_cors_origins_from_comma_string(self):
        """A comma-separated CORS_ORIGINS value is split into a list."""
        from config.settings import get_settings_for_testing

        settings = get_settings_for_testing(cors_origins="https://a.example.com, https://b.example.com,")

        assert settings.cors_origins == ["https://a.example.com", "https://b.example.com"]

    def test_cors_origins_from_env(self, monkeypatch):
        from config.settings import Settings

        monkeypatch.setenv("CORS_ORIGINS", "https://shop.example.com,https://admin.example.com")

        settings = Settings(supabase_url="https://x.supabase.co", supabase_service_key="k", _env_file=None)

        assert settings.cors_origins == ["https://shop.example.com", "https://admin.example.com"]

    def test_semantic_search_configured(self):
        """Semantic search needs both the switch and an endpoint."""
        from config.settings import get_settings_for_testing

        assert get_settings_for_testing().semantic_search_configured
        assert not get_settings_for_testing(semantic_search_url="").semantic_search_configured
        assert not get_settings_for_testing(semantic_search_enabled=False).semantic_search_configured

    def test_invalid_page_size_rejected(self):
        from pydantic import ValidationError
        from config.settings import get_settings_for_testing

        with pytest.raises(ValidationError):
            get_settings_for_testing(default_page_size=0)

    def test_missing_supabase_url_rejected(self, monkeypatch):
        from pydantic import ValidationError
        from config.settings import Settings

        monkeypatch.delenv("SUPABASE_URL", raising=False)

        with pytest.raises(ValidationError):
            Settings(supabase_service_key="k", _env_file=None)

    def test_get_settings_is_cached(self):
        from config.settings import get_settings

        assert get_settings() is get_settings()


class TestConstants:
    """Tests for application constants."""

    def test_table_names(self):
        from config.constants import TABLES

        assert TABLES.PRODUCTS == "products"
        assert TABLES.CART_ITEMS == "cart_items"
        assert TABLES.WISHLIST_ITEMS == "wishlist_items"
        assert TABLES.ORDERS == "orders"
        assert TABLES.ORDER_ITEMS == "order_items"

    def test_tables_are_frozen(self):
        from dataclasses import FrozenInstanceError
        from config.constants import TABLES

        with pytest.raises(FrozenInstanceError):
            TABLES.PRODUCTS = "items"

    def test_catalog_config(self):
        from config.constants import DEFAULT_CATALOG_CONFIG

        assert DEFAULT_CATALOG_CONFIG.CATEGORY_DELIMITER == "|"
        assert DEFAULT_CATALOG_CONFIG.STORE_PAGE_SIZE == 1000
        assert DEFAULT_CATALOG_CONFIG.ID_FETCH_CHUNK_SIZE > 0

    def test_sort_aliases_map_to_canonical_values(self):
        """Every alias resolves to a SortBy value."""
        from catalog.models import SortBy
        from config.constants import SORT_KEY_ALIASES

        canonical = {s.value for s in SortBy}
        assert set(SORT_KEY_ALIASES.values()) <= canonical
        assert SORT_KEY_ALIASES["price_asc"] == "price-low"
        assert SORT_KEY_ALIASES["rating"] == "rating-high"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
