"""
Catalog API Routes.

Product listing (with the semantic overlay when a search text is given),
fetch-by-ids, product detail, categories and the raw semantic-search
passthrough.

All catalog endpoints require JWT authentication.

NOTE: Routes use `def` (not `async def`) because the Supabase client and
the ranking-service client are synchronous; FastAPI runs them in its
thread pool.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_catalog_service
from api.errors import http_errors
from catalog.filters import ProductFilters
from catalog.hybrid_search import CatalogSearchService, ProductQuery
from catalog.models import (
    Product,
    ProductListResponse,
    ProductsByIdsResponse,
    SemanticSearchRequest,
    SemanticSearchResponse,
    SortBy,
)
from config.settings import get_settings
from core.auth import ShopperUser, require_auth
from core.utils import split_csv_param

router = APIRouter(prefix="/api", tags=["Catalog"])


# =============================================================================
# Listing
# =============================================================================

@router.get(
    "/products",
    response_model=ProductListResponse,
    summary="List products (filters, sort, pagination, semantic search)",
)
def list_products(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: Optional[int] = Query(None, ge=1, description="Products per page"),
    search: Optional[str] = Query(None, description="Free-text search (semantic when available)"),
    category: Optional[str] = Query(None, description="Category substring"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="relevance | price-low | price-high | rating-high | rating-low | newest"),
    price_min: Optional[str] = Query(None, alias="priceMin"),
    price_max: Optional[str] = Query(None, alias="priceMax"),
    rating: Optional[str] = Query(None, description="Minimum rating"),
    user: ShopperUser = Depends(require_auth),
    service: CatalogSearchService = Depends(get_catalog_service),
) -> ProductListResponse:
    """
    Browse the catalog.

    - Without `search`: filtering, ordering and paging run in the store.
    - With `search`: the ranking service picks up to N candidates, which
      are filtered in memory and kept in relevance order unless `sortBy`
      asks otherwise. `total` then counts matching candidates only.
    - If the ranking service fails, `search` becomes a product-name
      substring filter.
    """
    settings = get_settings()
    if limit is None:
        limit = settings.default_page_size
    if limit > settings.max_page_size:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"limit must be at most {settings.max_page_size}",
        )

    query = ProductQuery(
        filters=ProductFilters.from_params(
            search=search,
            category=category,
            price_min=price_min,
            price_max=price_max,
            rating=rating,
        ),
        sort_by=SortBy.parse(sort_by),
        page=page,
        limit=limit,
    )

    with http_errors("Failed to fetch products"):
        result = service.list_products(query)

    return ProductListResponse(products=result.products, pagination=result.pagination)


@router.get(
    "/products/by-ids",
    response_model=ProductsByIdsResponse,
    summary="Fetch products by identifier",
)
def get_products_by_ids(
    ids: str = Query(..., description="Comma-separated product ids"),
    category: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    price_min: Optional[str] = Query(None, alias="priceMin"),
    price_max: Optional[str] = Query(None, alias="priceMax"),
    rating: Optional[str] = Query(None),
    user: ShopperUser = Depends(require_auth),
    service: CatalogSearchService = Depends(get_catalog_service),
) -> ProductsByIdsResponse:
    """
    Resolve a list of ids (e.g. from an external ranking) to products.

    Input order is kept unless `sortBy` is given. No pagination.
    """
    product_ids = split_csv_param(ids)
    if not product_ids:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="ids is required")

    filters = ProductFilters.from_params(
        category=category,
        price_min=price_min,
        price_max=price_max,
        rating=rating,
    )

    with http_errors("Failed to fetch products"):
        products = service.products_by_ids(product_ids, filters, SortBy.parse(sort_by))

    return ProductsByIdsResponse(products=products)


@router.get("/products/{product_id}", response_model=Product, summary="Product detail")
def get_product(
    product_id: str,
    user: ShopperUser = Depends(require_auth),
    service: CatalogSearchService = Depends(get_catalog_service),
) -> Product:
    with http_errors("Failed to fetch product"):
        product = service.get_product(product_id)

    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


# =============================================================================
# Categories
# =============================================================================

@router.get("/categories", response_model=List[str], summary="List category segments")
def list_categories(
    user: ShopperUser = Depends(require_auth),
    service: CatalogSearchService = Depends(get_catalog_service),
) -> List[str]:
    """Every category level used by any product, sorted."""
    with http_errors("Failed to fetch categories"):
        return service.categories()


# =============================================================================
# Semantic Search Passthrough
# =============================================================================

@router.post(
    "/semantic-search",
    response_model=SemanticSearchResponse,
    summary="Raw semantic ranking",
)
def semantic_search(
    request: SemanticSearchRequest,
    user: ShopperUser = Depends(require_auth),
    service: CatalogSearchService = Depends(get_catalog_service),
) -> SemanticSearchResponse:
    """
    Ranked items from the ranking service, unmodified and in rank order.
    """
    result = service.semantic_search(request.query, request.n_results)
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Semantic search failed")

    return SemanticSearchResponse(products=[c.metadata for c in result.candidates])
