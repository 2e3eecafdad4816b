"""
Pydantic models for the catalog API.

Store rows arrive in snake_case (PostgREST column names); responses are
serialized in camelCase to keep the storefront's wire format.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from catalog.normalize import parse_rating
from config.constants import SORT_KEY_ALIASES


class CamelModel(BaseModel):
    """Accepts snake_case or camelCase input, serializes camelCase."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ============================================================================
# Enums
# ============================================================================

class SortBy(str, Enum):
    """Catalog sort orders."""
    RELEVANCE = "relevance"      # semantic rank, or default order without a query
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    RATING_HIGH = "rating-high"
    RATING_LOW = "rating-low"
    NEWEST = "newest"            # identifier descending

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["SortBy"]:
        """Map a sortBy wire value (including legacy aliases) to a SortBy.

        Unknown or blank values return None, meaning "default order".
        """
        if not raw:
            return None
        canonical = SORT_KEY_ALIASES.get(raw.strip().lower())
        return cls(canonical) if canonical else None


# ============================================================================
# Product
# ============================================================================

class Product(CamelModel):
    """A catalog product as stored in the `products` table."""
    id: str
    product_name: str
    category: str = ""
    discounted_price: str = ""
    actual_price: str = ""
    discount_percentage: Optional[str] = None
    rating: Optional[float] = None
    rating_count: Optional[str] = None
    about_product: Optional[str] = None
    img_link: Optional[str] = None
    product_link: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v) if v is not None else v

    @field_validator("category", "discounted_price", "actual_price", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else str(v)

    @field_validator("rating", mode="before")
    @classmethod
    def normalize_rating(cls, v):
        return parse_rating(v)

    @field_validator("rating_count", mode="before")
    @classmethod
    def coerce_rating_count(cls, v):
        if v is None or v == "":
            return None
        return str(v)


# ============================================================================
# Responses
# ============================================================================

class PaginationInfo(CamelModel):
    """Pagination metadata for a catalog page."""
    page: int
    limit: int
    total: int
    total_pages: int = Field(..., description="ceil(total / limit); 0 when nothing matched")


class ProductListResponse(CamelModel):
    """Response from the catalog listing query."""
    products: List[Product]
    pagination: PaginationInfo


class ProductsByIdsResponse(CamelModel):
    """Response from fetch-by-identifiers (callers paginate themselves)."""
    products: List[Product]


class SemanticSearchRequest(BaseModel):
    """Request body for the semantic search passthrough."""
    query: str = Field(..., min_length=1, max_length=500, description="Natural-language query")
    n_results: int = Field(20, ge=1, le=500, description="Number of ranked candidates to return")


class SemanticSearchResponse(BaseModel):
    """Ranked items exactly as the ranking service described them."""
    products: List[Dict[str, Any]]
