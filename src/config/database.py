"""
Database client singletons.

The storefront keeps its catalog, carts, wishlists and orders in Supabase
(PostgreSQL behind PostgREST). One client is created per process and
shared by every request; it holds no request state.
"""

from functools import lru_cache
from typing import Any, Collection, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from config.settings import get_settings
from core.logging import get_logger


logger = get_logger(__name__)


class SupabaseClientError(Exception):
    """Raised when Supabase client cannot be created."""
    pass


class StoreError(Exception):
    """Raised when a store query fails (PostgREST error or transport failure)."""

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.code = code


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """
    Get the singleton Supabase client instance.

    Returns:
        Client: The Supabase client instance

    Raises:
        SupabaseClientError: If client cannot be created
    """
    try:
        settings = get_settings()
        return create_client(settings.supabase_url, settings.supabase_service_key)
    except Exception as e:
        raise SupabaseClientError(f"Failed to create Supabase client: {e}") from e


def get_supabase_client_optional() -> Optional[Client]:
    """
    Get the Supabase client, returning None if it cannot be created.

    Used by health checks to report an unconfigured store instead of failing.
    """
    try:
        return get_supabase_client()
    except SupabaseClientError:
        return None


def execute_query(query: Any, operation: str, expected_codes: Collection[str] = ()) -> Any:
    """
    Execute a PostgREST request builder, converting failures to StoreError.

    Args:
        query: Any supabase/postgrest request builder
        operation: Short name for logs ("list_products", "add_to_cart", ...)
        expected_codes: PostgREST codes the caller handles itself; these are
            still raised but not logged as failures

    Raises:
        StoreError: On PostgREST API errors or transport failures
    """
    try:
        return query.execute()
    except APIError as e:
        if e.code not in expected_codes:
            logger.error("Store query failed", operation=operation, code=e.code, error=e.message)
        raise StoreError(f"{operation} failed: {e.message}", code=e.code) from e
    except httpx.HTTPError as e:
        logger.error("Store unreachable", operation=operation, error=str(e))
        raise StoreError(f"{operation} failed: {e}") from e
