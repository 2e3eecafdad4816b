"""
Filter predicate builder.

A listing request carries up to five independent criteria (free-text,
category, price bounds, rating floor). They are compiled into one
FilterPredicate that can either be pushed into a PostgREST query or be
evaluated in memory over already-fetched products. Both forms use the
same normalization, so the direct and semantic paths agree on what
matches.
"""

from dataclasses import dataclass, replace
from typing import Any, Callable, List, Optional, Tuple

from catalog.models import Product
from catalog.normalize import parse_bound, parse_price
from config.constants import PRICE_VALUE_COLUMN


# ============================================================================
# Criteria
# ============================================================================

def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class ProductFilters:
    """Request-scoped filter criteria. Every field is optional."""
    search: Optional[str] = None
    category: Optional[str] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    rating_min: Optional[float] = None

    @classmethod
    def from_params(
        cls,
        search: Optional[str] = None,
        category: Optional[str] = None,
        price_min: Optional[str] = None,
        price_max: Optional[str] = None,
        rating: Optional[str] = None,
    ) -> "ProductFilters":
        """Build criteria from raw query-string values."""
        return cls(
            search=_blank_to_none(search),
            category=_blank_to_none(category),
            price_min=parse_bound(price_min),
            price_max=parse_bound(price_max),
            rating_min=parse_bound(rating),
        )

    def without_search(self) -> "ProductFilters":
        """Structural criteria only (semantic relevance already covers the text)."""
        return replace(self, search=None)

    @property
    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (self.search, self.category, self.price_min, self.price_max, self.rating_min)
        )


# ============================================================================
# Predicate
# ============================================================================

def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user text is matched literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass(frozen=True)
class Clause:
    """One conjunct, in both executable forms."""
    name: str
    matches: Callable[[Product], bool]
    apply: Callable[[Any], Any]


class FilterPredicate:
    """
    Conjunction of clauses. An empty predicate matches everything.

    Usage:
        predicate = build_predicate(filters)
        query = predicate.apply(client.table("products").select("*"))
        kept = [p for p in products if predicate.matches(p)]
    """

    def __init__(self, clauses: Optional[List[Clause]] = None):
        self._clauses: Tuple[Clause, ...] = tuple(clauses or ())

    @property
    def clause_names(self) -> List[str]:
        return [clause.name for clause in self._clauses]

    @property
    def is_universal(self) -> bool:
        return not self._clauses

    def matches(self, product: Product) -> bool:
        return all(clause.matches(product) for clause in self._clauses)

    def filter(self, products: List[Product]) -> List[Product]:
        """Keep matching products, preserving order."""
        if self.is_universal:
            return list(products)
        return [product for product in products if self.matches(product)]

    def apply(self, query: Any) -> Any:
        """Push every clause onto a PostgREST filter builder."""
        for clause in self._clauses:
            query = clause.apply(query)
        return query

    def __repr__(self) -> str:
        return f"FilterPredicate({', '.join(self.clause_names) or 'all'})"


def _contains_clause(name: str, column: str, needle: str, getter: Callable[[Product], str]) -> Clause:
    lowered = needle.lower()
    pattern = f"%{escape_like(needle)}%"
    return Clause(
        name=name,
        matches=lambda p: lowered in (getter(p) or "").lower(),
        apply=lambda q: q.ilike(column, pattern),
    )


def build_predicate(filters: ProductFilters, include_search: bool = True) -> FilterPredicate:
    """
    Compile filter criteria into a FilterPredicate.

    - search: case-insensitive substring of the product name
    - category: case-insensitive substring of the category path, so
      "Electronics" matches "Electronics|Audio|Headphones"
    - price_min / price_max: inclusive bounds on the normalized discounted price
    - rating_min: normalized rating >= floor; unrated products never pass

    Args:
        filters: Request criteria
        include_search: False on the semantic path, where ranking replaces
            the text match
    """
    clauses: List[Clause] = []

    if include_search and filters.search:
        clauses.append(_contains_clause("search", "product_name", filters.search, lambda p: p.product_name))

    if filters.category:
        clauses.append(_contains_clause("category", "category", filters.category, lambda p: p.category))

    if filters.price_min is not None:
        price_min = filters.price_min
        clauses.append(Clause(
            name="price_min",
            matches=lambda p: parse_price(p.discounted_price) >= price_min,
            apply=lambda q: q.gte(PRICE_VALUE_COLUMN, price_min),
        ))

    if filters.price_max is not None:
        price_max = filters.price_max
        clauses.append(Clause(
            name="price_max",
            matches=lambda p: parse_price(p.discounted_price) <= price_max,
            apply=lambda q: q.lte(PRICE_VALUE_COLUMN, price_max),
        ))

    if filters.rating_min is not None:
        rating_min = filters.rating_min
        clauses.append(Clause(
            name="rating_min",
            matches=lambda p: p.rating is not None and p.rating >= rating_min,
            apply=lambda q: q.gte("rating", rating_min),
        ))

    return FilterPredicate(clauses)
