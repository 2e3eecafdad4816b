"""
Shopping cart service.

One row per (user, product) in `cart_items`; adding a product that is
already in the cart merges the quantities.
"""

from typing import Any, List, Optional

from commerce.errors import ProductNotFoundError, run_query
from commerce.models import CartItem
from config.constants import TABLES
from core.logging import get_logger
from core.utils import first_row

logger = get_logger(__name__)

# PostgREST embed: each cart line with its product row
CART_WITH_PRODUCT = "*, product:products(*)"


class CartService:
    """Cart operations for one Supabase client."""

    def __init__(self, client: Any):
        self._client = client

    def _table(self):
        return self._client.table(TABLES.CART_ITEMS)

    def _line(self, user_id: str, product_id: str) -> Optional[dict]:
        query = (
            self._table()
            .select("*")
            .eq("user_id", user_id)
            .eq("product_id", product_id)
            .limit(1)
        )
        return first_row(run_query(query, "get_cart_line").data)

    def _ensure_product(self, product_id: str) -> None:
        query = self._client.table(TABLES.PRODUCTS).select("id").eq("id", product_id).limit(1)
        if not run_query(query, "check_product").data:
            raise ProductNotFoundError(product_id)

    def list_items(self, user_id: str) -> List[CartItem]:
        """Cart lines with their products, oldest first."""
        query = (
            self._table()
            .select(CART_WITH_PRODUCT)
            .eq("user_id", user_id)
            .order("created_at")
        )
        rows = run_query(query, "list_cart").data or []
        # Lines whose product has been removed from the catalog are hidden
        return [CartItem.model_validate(row) for row in rows if row.get("product")]

    def add_item(self, user_id: str, product_id: str, quantity: int = 1) -> CartItem:
        """
        Add units of a product, merging into an existing line.

        Raises:
            ProductNotFoundError: If the product is not in the catalog
        """
        self._ensure_product(product_id)
        existing = self._line(user_id, product_id)

        if existing:
            new_quantity = int(existing["quantity"]) + quantity
            query = (
                self._table()
                .update({"quantity": new_quantity})
                .eq("user_id", user_id)
                .eq("product_id", product_id)
            )
            row = first_row(run_query(query, "update_cart_line").data)
        else:
            query = self._table().insert({
                "user_id": user_id,
                "product_id": product_id,
                "quantity": quantity,
            })
            row = first_row(run_query(query, "insert_cart_line").data)

        logger.info("Cart item added", product_id=product_id, quantity=quantity, merged=bool(existing))
        return CartItem.model_validate(row)

    def update_quantity(self, user_id: str, product_id: str, quantity: int) -> Optional[CartItem]:
        """
        Set a line's quantity. A quantity of 0 or less removes the line and
        returns None; a missing line also returns None.
        """
        if quantity <= 0:
            self.remove_item(user_id, product_id)
            return None

        query = (
            self._table()
            .update({"quantity": quantity})
            .eq("user_id", user_id)
            .eq("product_id", product_id)
        )
        row = first_row(run_query(query, "update_cart_line").data)
        return CartItem.model_validate(row) if row else None

    def remove_item(self, user_id: str, product_id: str) -> None:
        query = self._table().delete().eq("user_id", user_id).eq("product_id", product_id)
        run_query(query, "remove_cart_line")

    def clear(self, user_id: str) -> None:
        run_query(self._table().delete().eq("user_id", user_id), "clear_cart")
