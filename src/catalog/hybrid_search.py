"""
Catalog Search Service: store listing + semantic ranking overlay.

Pipeline for a listing request:
1. No search text -> filter/sort/paginate inside the store (direct path)
2. Search text -> ask the ranking service for a candidate pool
3. Ranking failed or returned nothing -> direct path, search text as a
   product-name substring filter
4. Otherwise fetch the candidates by id, put them back in rank order,
   apply the structural filters in memory, re-sort only if an explicit
   sort was requested, then paginate

The semantic total counts the filtered candidate pool, not the whole
catalog: broad queries can report fewer pages than truly exist.
"""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from catalog.filters import ProductFilters, build_predicate
from catalog.models import PaginationInfo, Product, SortBy
from catalog.pagination import build_pagination, paginate
from catalog.semantic_client import SemanticSearchClient, SemanticSearchResult
from catalog.sorting import sort_products
from catalog.store import CatalogStore
from config.database import get_supabase_client
from config.settings import get_settings
from core.logging import get_logger

logger = get_logger(__name__)


# Search modes reported in logs
MODE_DIRECT = "direct"
MODE_SEMANTIC = "semantic"
MODE_FALLBACK = "substring_fallback"


@dataclass(frozen=True)
class ProductQuery:
    """A full listing request."""
    filters: ProductFilters = field(default_factory=ProductFilters)
    sort_by: Optional[SortBy] = None
    page: int = 1
    limit: int = 20


@dataclass
class ProductPage:
    """One page of results with its pagination envelope."""
    products: List[Product]
    pagination: PaginationInfo
    mode: str = MODE_DIRECT


def order_by_rank(ranked_ids: List[str], products: List[Product]) -> List[Product]:
    """
    Arrange fetched products in ranking order.

    Ids the store did not return (deleted, never imported) are dropped.
    """
    by_id: Dict[str, Product] = {p.id: p for p in products}
    return [by_id[pid] for pid in ranked_ids if pid in by_id]


class CatalogSearchService:
    """
    Product listing with an optional semantic-ranking overlay.
    """

    def __init__(
        self,
        store: CatalogStore,
        semantic_client: Optional[SemanticSearchClient] = None,
        candidate_count: int = 100,
    ):
        self.store = store
        self.semantic_client = semantic_client
        self.candidate_count = candidate_count

    # =========================================================================
    # Listing
    # =========================================================================

    def list_products(self, query: ProductQuery) -> ProductPage:
        """Execute a listing request."""
        t_start = time.time()
        search = query.filters.search

        if not search or self.semantic_client is None:
            page = self._list_direct(query, mode=MODE_DIRECT)
        else:
            ranking = self.semantic_client.search(search, n_results=self.candidate_count)
            if not ranking.ok or ranking.is_empty:
                logger.warning(
                    "Falling back to substring search",
                    query=search,
                    reason=ranking.error or "no candidates",
                )
                page = self._list_direct(query, mode=MODE_FALLBACK)
            else:
                page = self._merge_ranked(query, ranking)

        logger.info(
            "Catalog listing",
            mode=page.mode,
            search=search,
            sort_by=query.sort_by.value if query.sort_by else None,
            page=query.page,
            limit=query.limit,
            total=page.pagination.total,
            returned=len(page.products),
            latency_ms=int((time.time() - t_start) * 1000),
        )
        return page

    def _list_direct(self, query: ProductQuery, mode: str) -> ProductPage:
        predicate = build_predicate(query.filters)
        result = self.store.query_products(predicate, query.sort_by, query.page, query.limit)
        return ProductPage(
            products=result.rows,
            pagination=build_pagination(query.page, query.limit, result.total),
            mode=mode,
        )

    def _merge_ranked(self, query: ProductQuery, ranking: SemanticSearchResult) -> ProductPage:
        ranked_ids = ranking.product_ids
        fetched = self.store.fetch_by_ids(ranked_ids)
        ranked = order_by_rank(ranked_ids, fetched)

        predicate = build_predicate(query.filters, include_search=False)
        matched = sort_products(predicate.filter(ranked), query.sort_by)

        total = len(matched)
        return ProductPage(
            products=paginate(matched, query.page, query.limit),
            pagination=build_pagination(query.page, query.limit, total),
            mode=MODE_SEMANTIC,
        )

    # =========================================================================
    # Lookups
    # =========================================================================

    def products_by_ids(
        self,
        product_ids: List[str],
        filters: Optional[ProductFilters] = None,
        sort_by: Optional[SortBy] = None,
    ) -> List[Product]:
        """
        Fetch products by id, then filter and sort in memory.

        Without an explicit sort the input id order is kept. No pagination.
        """
        if not product_ids:
            return []
        ranked = order_by_rank(product_ids, self.store.fetch_by_ids(product_ids))
        predicate = build_predicate((filters or ProductFilters()).without_search())
        return sort_products(predicate.filter(ranked), sort_by)

    def get_product(self, product_id: str) -> Optional[Product]:
        return self.store.get_product(product_id)

    def categories(self) -> List[str]:
        return self.store.distinct_categories()

    def semantic_search(self, query: str, n_results: int) -> SemanticSearchResult:
        """Raw ranking passthrough (no catalog lookup)."""
        if self.semantic_client is None:
            return SemanticSearchResult.failure("semantic search is not configured")
        return self.semantic_client.search(query, n_results=n_results)


def get_catalog_service() -> CatalogSearchService:
    """
    Build a CatalogSearchService for the current request.

    The Supabase client and settings are process-wide singletons; the
    service itself carries no state between requests.
    """
    settings = get_settings()
    semantic_client = (
        SemanticSearchClient.from_settings(settings)
        if settings.semantic_search_configured
        else None
    )
    return CatalogSearchService(
        store=CatalogStore(get_supabase_client()),
        semantic_client=semantic_client,
        candidate_count=settings.semantic_candidate_count,
    )
