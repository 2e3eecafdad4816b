"""
Core module for cross-cutting concerns.

This module provides:
- Structured logging configuration
- Request tracing middleware
- Authentication utilities
- Common utilities
"""

from core.logging import configure_logging, get_logger
from core.auth import require_auth, get_current_user, ShopperUser
from core.utils import chunk_list, split_csv_param, unique_in_order

__all__ = [
    "configure_logging",
    "get_logger",
    "require_auth",
    "get_current_user",
    "ShopperUser",
    "chunk_list",
    "split_csv_param",
    "unique_in_order",
]
