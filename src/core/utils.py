"""
Core Utility Functions.

Small helpers shared by the catalog and commerce services.
"""

from typing import Any, Dict, Iterable, List, Optional


def chunk_list(items: List[Any], chunk_size: int) -> List[List[Any]]:
    """
    Split a list into chunks of specified size.

    Args:
        items: List to chunk
        chunk_size: Size of each chunk

    Returns:
        List of chunks
    """
    return [items[i:i + chunk_size] for i in range(0, len(items), chunk_size)]


def unique_in_order(values: Iterable[str]) -> List[str]:
    """Drop blanks and repeats, keeping first occurrence order."""
    seen = set()
    result: List[str] = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


def split_csv_param(raw: Optional[str]) -> List[str]:
    """
    Parse a comma-separated query parameter ("a, b,,c") into ["a", "b", "c"].
    """
    if not raw:
        return []
    return unique_in_order(raw.split(","))


def first_row(data: Optional[List[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
    """Return the first row of a PostgREST result payload, if any."""
    if data:
        return data[0]
    return None
