"""
Service providers for FastAPI `Depends`.

Each request gets fresh, stateless service objects over the shared
Supabase client. Tests replace these with `app.dependency_overrides`.
"""

from catalog.hybrid_search import CatalogSearchService, get_catalog_service
from commerce.cart import CartService
from commerce.orders import OrderService
from commerce.wishlist import WishlistService
from config.database import get_supabase_client


def get_cart_service() -> CartService:
    return CartService(get_supabase_client())


def get_wishlist_service() -> WishlistService:
    return WishlistService(get_supabase_client())


def get_order_service() -> OrderService:
    return OrderService(get_supabase_client())


__all__ = [
    "CatalogSearchService",
    "get_catalog_service",
    "get_cart_service",
    "get_wishlist_service",
    "get_order_service",
]
