"""
Commerce Module: cart, wishlist, checkout and order history.
"""

from commerce.cart import CartService
from commerce.errors import (
    CartItemNotFoundError,
    CommerceStoreError,
    EmptyCartError,
    OrderAccessDeniedError,
    OrderNotFoundError,
    ProductNotFoundError,
)
from commerce.orders import OrderService
from commerce.wishlist import WishlistService

__all__ = [
    "CartService",
    "WishlistService",
    "OrderService",
    "CartItemNotFoundError",
    "CommerceStoreError",
    "EmptyCartError",
    "OrderAccessDeniedError",
    "OrderNotFoundError",
    "ProductNotFoundError",
]
