"""
Sort strategies.

Each SortBy value has two renderings: an ORDER BY pushed to the store for
the direct path, and a stable in-memory sort for the semantic path. Both
compare normalized prices/ratings and both treat a missing rating as the
lowest possible value.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple

from catalog.models import Product, SortBy
from catalog.normalize import parse_price
from config.constants import PRICE_VALUE_COLUMN


def _price_key(product: Product) -> float:
    return parse_price(product.discounted_price)


def _rating_key(product: Product) -> float:
    return product.rating if product.rating is not None else float("-inf")


def _id_key(product: Product) -> str:
    return product.id


# sort key -> (key function, descending)
_IN_MEMORY: Dict[SortBy, Tuple[Callable[[Product], Any], bool]] = {
    SortBy.PRICE_LOW: (_price_key, False),
    SortBy.PRICE_HIGH: (_price_key, True),
    SortBy.RATING_HIGH: (_rating_key, True),
    SortBy.RATING_LOW: (_rating_key, False),
    SortBy.NEWEST: (_id_key, True),
}


def is_explicit_sort(sort_by: Optional[SortBy]) -> bool:
    """True when the caller asked for an order other than relevance."""
    return sort_by is not None and sort_by != SortBy.RELEVANCE


def sort_products(products: List[Product], sort_by: Optional[SortBy]) -> List[Product]:
    """
    Stable in-memory sort.

    Products with equal keys keep their incoming order in both directions
    (`sorted(..., reverse=True)` is stable). Relevance or no sort key
    returns the input order unchanged.
    """
    if not is_explicit_sort(sort_by):
        return list(products)
    key, descending = _IN_MEMORY[sort_by]
    return sorted(products, key=key, reverse=descending)


def apply_store_order(query: Any, sort_by: Optional[SortBy]) -> Any:
    """
    Add ORDER BY clauses to a PostgREST query.

    The identifier-descending order is both the default ("newest" proxy)
    and the tie-breaker, so repeated page requests see the same sequence.
    """
    if sort_by == SortBy.PRICE_LOW:
        query = query.order(PRICE_VALUE_COLUMN)
    elif sort_by == SortBy.PRICE_HIGH:
        query = query.order(PRICE_VALUE_COLUMN, desc=True)
    elif sort_by == SortBy.RATING_HIGH:
        query = query.order("rating", desc=True, nullsfirst=False)
    elif sort_by == SortBy.RATING_LOW:
        query = query.order("rating", nullsfirst=True)

    return query.order("id", desc=True)
