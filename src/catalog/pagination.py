"""
Pagination contract shared by the direct and semantic paths.

Pages are 1-based. Out-of-range pages are not an error: they come back
empty while total/totalPages still describe the full match set.
"""

import math
from typing import List, Sequence, Tuple, TypeVar

from catalog.models import PaginationInfo

T = TypeVar("T")


def page_window(page: int, limit: int) -> Tuple[int, int]:
    """
    Half-open [start, stop) row window for a page.

    Page numbers below 1 are read as page 1; a non-positive limit gives an
    empty window.
    """
    if limit <= 0:
        return 0, 0
    start = (max(page, 1) - 1) * limit
    return start, start + limit


def total_pages(total: int, limit: int) -> int:
    """ceil(total / limit), with 0 for an empty result (or a non-positive limit)."""
    if total <= 0 or limit <= 0:
        return 0
    return math.ceil(total / limit)


def paginate(items: Sequence[T], page: int, limit: int) -> List[T]:
    """Slice one page out of an already filtered and ordered sequence."""
    start, stop = page_window(page, limit)
    return list(items[start:min(stop, len(items))])


def build_pagination(page: int, limit: int, total: int) -> PaginationInfo:
    return PaginationInfo(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages(total, limit),
    )
