"""
Commerce exceptions and the shared query runner.
"""

from typing import Any, Collection

from config.database import StoreError, execute_query


class CommerceStoreError(StoreError):
    """Raised when a cart/wishlist/order query fails."""


class ProductNotFoundError(Exception):
    """The referenced product is not in the catalog."""

    def __init__(self, product_id: str):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class CartItemNotFoundError(Exception):
    """The user's cart has no line for the product."""

    def __init__(self, product_id: str):
        super().__init__(f"Cart item not found: {product_id}")
        self.product_id = product_id


class EmptyCartError(Exception):
    """Checkout was requested with nothing in the cart."""

    def __init__(self):
        super().__init__("Cart is empty")


class OrderNotFoundError(Exception):
    def __init__(self, order_id: str):
        super().__init__(f"Order not found: {order_id}")
        self.order_id = order_id


class OrderAccessDeniedError(Exception):
    """The order exists but belongs to another user."""

    def __init__(self, order_id: str):
        super().__init__(f"Order {order_id} belongs to another user")
        self.order_id = order_id


def run_query(query: Any, operation: str, expected_codes: Collection[str] = ()) -> Any:
    """execute_query, re-raised as CommerceStoreError."""
    try:
        return execute_query(query, operation, expected_codes=expected_codes)
    except StoreError as e:
        raise CommerceStoreError(str(e), code=e.code) from e
