"""
Application constants.

These are values that don't change based on environment but are
referenced across the codebase.
"""

from dataclasses import dataclass
from typing import Dict


# =============================================================================
# Store Tables
# =============================================================================

@dataclass(frozen=True)
class Tables:
    """Supabase table names."""

    PRODUCTS: str = "products"
    CART_ITEMS: str = "cart_items"
    WISHLIST_ITEMS: str = "wishlist_items"
    ORDERS: str = "orders"
    ORDER_ITEMS: str = "order_items"


TABLES = Tables()


# Stored generated column holding the normalized discounted price
PRICE_VALUE_COLUMN = "discounted_price_value"


# =============================================================================
# Catalog Configuration
# =============================================================================

@dataclass(frozen=True)
class CatalogConfig:
    """Limits used by the catalog query engine."""

    # Separator between levels of a category path ("Electronics|Audio|Headphones")
    CATEGORY_DELIMITER: str = "|"

    # PostgREST caps responses at 1000 rows; scans page through at this size
    STORE_PAGE_SIZE: int = 1000

    # Identifier lists are split so the `in` filter stays within URL limits
    ID_FETCH_CHUNK_SIZE: int = 200


DEFAULT_CATALOG_CONFIG = CatalogConfig()


# =============================================================================
# Sort Keys
# =============================================================================

# Wire values accepted for sortBy, mapped onto the canonical SortBy values.
SORT_KEY_ALIASES: Dict[str, str] = {
    "relevance": "relevance",
    "price-low": "price-low",
    "price_asc": "price-low",
    "price-high": "price-high",
    "price_desc": "price-high",
    "rating": "rating-high",
    "rating-high": "rating-high",
    "rating-low": "rating-low",
    "newest": "newest",
}


# =============================================================================
# Orders
# =============================================================================

ORDER_STATUS_COMPLETED = "completed"
