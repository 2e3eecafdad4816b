"""
Local catalog query engine over the Supabase `products` table.

Operations:
- query_products: predicate + sort + page window, with an exact total
- fetch_by_ids: every row for an arbitrary identifier set (no paging)
- get_product: one row by identifier
- distinct_categories: flattened, sorted, de-duplicated category segments

No retries happen here; a failing store surfaces as CatalogStoreError.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from catalog.filters import FilterPredicate
from catalog.models import Product, SortBy
from catalog.pagination import page_window
from catalog.sorting import apply_store_order
from config.constants import DEFAULT_CATALOG_CONFIG, TABLES, CatalogConfig
from config.database import StoreError, execute_query
from core.logging import get_logger
from core.utils import chunk_list, unique_in_order

logger = get_logger(__name__)

# PostgREST answers 416 / PGRST103 when the requested offset is past the
# last matching row and an exact count was requested.
_RANGE_NOT_SATISFIABLE = "PGRST103"


class CatalogStoreError(StoreError):
    """Raised when the catalog cannot be read."""


@dataclass
class CatalogPage:
    """Rows for one page plus the total number of matching rows."""
    rows: List[Product] = field(default_factory=list)
    total: int = 0


def to_products(rows: Iterable[Dict[str, Any]]) -> List[Product]:
    """Validate raw rows at the store boundary, skipping malformed ones."""
    products: List[Product] = []
    for row in rows:
        try:
            products.append(Product.model_validate(row))
        except ValidationError as e:
            logger.warning(
                "Skipping malformed product row",
                product_id=row.get("id"),
                errors=e.error_count(),
            )
    return products


class CatalogStore:
    """Read-only access to the product catalog."""

    def __init__(self, client: Any, config: CatalogConfig = DEFAULT_CATALOG_CONFIG):
        self._client = client
        self._config = config

    def _products(self):
        return self._client.table(TABLES.PRODUCTS)

    def _execute(self, query: Any, operation: str) -> Any:
        try:
            return execute_query(query, operation)
        except StoreError as e:
            raise CatalogStoreError(str(e), code=e.code) from e

    # =========================================================================
    # Listing
    # =========================================================================

    def query_products(
        self,
        predicate: FilterPredicate,
        sort_by: Optional[SortBy],
        page: int,
        limit: int,
    ) -> CatalogPage:
        """
        Run a filtered, ordered, paginated listing.

        Page/limit are not validated: page < 1 reads as page 1 and a
        non-positive limit returns no rows (total is still computed).
        """
        start, stop = page_window(page, limit)
        if stop <= start:
            return CatalogPage(rows=[], total=self.count_products(predicate))

        query = predicate.apply(self._products().select("*", count="exact"))
        query = apply_store_order(query, sort_by)
        query = query.range(start, stop - 1)

        try:
            result = execute_query(query, "list_products", expected_codes=(_RANGE_NOT_SATISFIABLE,))
        except StoreError as e:
            if e.code == _RANGE_NOT_SATISFIABLE:
                return CatalogPage(rows=[], total=self.count_products(predicate))
            raise CatalogStoreError(str(e), code=e.code) from e

        rows = to_products(result.data or [])
        total = result.count if result.count is not None else start + len(rows)

        logger.debug(
            "Catalog page fetched",
            predicate=predicate.clause_names,
            sort_by=sort_by.value if sort_by else None,
            page=page,
            limit=limit,
            returned=len(rows),
            total=total,
        )
        return CatalogPage(rows=rows, total=total)

    def count_products(self, predicate: FilterPredicate) -> int:
        """Number of products matching the predicate."""
        query = predicate.apply(self._products().select("id", count="exact")).limit(1)
        result = self._execute(query, "count_products")
        return result.count or 0

    # =========================================================================
    # Lookups
    # =========================================================================

    def fetch_by_ids(self, product_ids: Iterable[str]) -> List[Product]:
        """
        Fetch every product whose id is in the set.

        Unknown ids are simply absent from the result; order is whatever
        the store returns.
        """
        ids = unique_in_order(str(pid) for pid in product_ids)
        if not ids:
            return []

        products: List[Product] = []
        for chunk in chunk_list(ids, self._config.ID_FETCH_CHUNK_SIZE):
            query = self._products().select("*").in_("id", chunk)
            result = self._execute(query, "fetch_products_by_ids")
            products.extend(to_products(result.data or []))
        return products

    def get_product(self, product_id: str) -> Optional[Product]:
        query = self._products().select("*").eq("id", product_id).limit(1)
        result = self._execute(query, "get_product")
        products = to_products(result.data or [])
        return products[0] if products else None

    # =========================================================================
    # Categories
    # =========================================================================

    def distinct_categories(self) -> List[str]:
        """
        Every category segment used by any product, sorted.

        "Electronics|Audio|Headphones" contributes "Electronics", "Audio"
        and "Headphones".
        """
        segments = set()
        batch_size = self._config.STORE_PAGE_SIZE
        delimiter = self._config.CATEGORY_DELIMITER
        offset = 0

        while True:
            query = (
                self._products()
                .select("category")
                .order("id")
                .range(offset, offset + batch_size - 1)
            )
            rows = self._execute(query, "list_categories").data or []
            for row in rows:
                for segment in (row.get("category") or "").split(delimiter):
                    segment = segment.strip()
                    if segment:
                        segments.add(segment)
            if len(rows) < batch_size:
                break
            offset += batch_size

        return sorted(segments)
