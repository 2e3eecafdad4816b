"""
Wishlist service. Adding is idempotent: a product is saved at most once.
"""

from typing import Any, List, Optional

from commerce.errors import ProductNotFoundError, run_query
from commerce.models import WishlistItem
from config.constants import TABLES
from core.utils import first_row


class WishlistService:

    def __init__(self, client: Any):
        self._client = client

    def _table(self):
        return self._client.table(TABLES.WISHLIST_ITEMS)

    def _find(self, user_id: str, product_id: str) -> Optional[dict]:
        query = (
            self._table()
            .select("*")
            .eq("user_id", user_id)
            .eq("product_id", product_id)
            .limit(1)
        )
        return first_row(run_query(query, "get_wishlist_item").data)

    def list_items(self, user_id: str) -> List[WishlistItem]:
        """Saved products, most recently saved first."""
        query = (
            self._table()
            .select("*, product:products(*)")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
        )
        rows = run_query(query, "list_wishlist").data or []
        return [WishlistItem.model_validate(row) for row in rows if row.get("product")]

    def add_item(self, user_id: str, product_id: str) -> WishlistItem:
        """
        Save a product. Returns the existing entry if it is already saved.

        Raises:
            ProductNotFoundError: If the product is not in the catalog
        """
        existing = self._find(user_id, product_id)
        if existing:
            return WishlistItem.model_validate(existing)

        product_query = self._client.table(TABLES.PRODUCTS).select("id").eq("id", product_id).limit(1)
        if not run_query(product_query, "check_product").data:
            raise ProductNotFoundError(product_id)

        query = self._table().insert({"user_id": user_id, "product_id": product_id})
        return WishlistItem.model_validate(first_row(run_query(query, "insert_wishlist_item").data))

    def remove_item(self, user_id: str, product_id: str) -> None:
        query = self._table().delete().eq("user_id", user_id).eq("product_id", product_id)
        run_query(query, "remove_wishlist_item")

    def contains(self, user_id: str, product_id: str) -> bool:
        return self._find(user_id, product_id) is not None
