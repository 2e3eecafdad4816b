"""
Catalog Module: product listing engine + semantic search overlay.

Provides:
- ProductFilters / build_predicate: filter criteria compiled for the store or memory
- SortBy / sort_products: sort strategies
- CatalogStore: filtered, ordered, paginated reads over the products table
- SemanticSearchClient: remote ranking service adapter
- CatalogSearchService: hybrid merger tying the above together
"""

from catalog.filters import FilterPredicate, ProductFilters, build_predicate
from catalog.hybrid_search import (
    CatalogSearchService,
    ProductPage,
    ProductQuery,
    get_catalog_service,
)
from catalog.models import PaginationInfo, Product, SortBy
from catalog.normalize import parse_bound, parse_price, parse_rating
from catalog.semantic_client import SemanticSearchClient, SemanticSearchResult
from catalog.sorting import sort_products
from catalog.store import CatalogStore, CatalogStoreError

__all__ = [
    "FilterPredicate",
    "ProductFilters",
    "build_predicate",
    "CatalogSearchService",
    "ProductPage",
    "ProductQuery",
    "get_catalog_service",
    "PaginationInfo",
    "Product",
    "SortBy",
    "parse_bound",
    "parse_price",
    "parse_rating",
    "SemanticSearchClient",
    "SemanticSearchResult",
    "sort_products",
    "CatalogStore",
    "CatalogStoreError",
]
