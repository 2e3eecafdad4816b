"""
Checkout and order history.

Checkout turns the user's cart into an order:
1. Load cart lines (with products); an empty cart is rejected
2. Line total = normalized unit price x quantity, order total = sum,
   both rounded to 2 decimals
3. Insert the order (status "completed") and its lines
4. Clear the cart

PostgREST gives no multi-statement transaction here. If step 3 or 4 fails
the error surfaces to the caller; a failed cart clear leaves the order in
place and the lines still in the cart.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, List, Optional

from catalog.normalize import parse_price_decimal
from commerce.cart import CartService
from commerce.errors import (
    CommerceStoreError,
    EmptyCartError,
    OrderAccessDeniedError,
    OrderNotFoundError,
    run_query,
)
from commerce.models import CartItem, Order
from config.constants import ORDER_STATUS_COMPLETED, TABLES
from core.logging import get_logger
from core.utils import first_row

logger = get_logger(__name__)

_CENTS = Decimal("0.01")

# Postgres rejects a malformed uuid literal with 22P02
_INVALID_TEXT_REPRESENTATION = "22P02"

# Orders with their lines, each line with its product
ORDER_WITH_ITEMS = "*, items:order_items(*, product:products(*))"


def format_amount(value: Decimal) -> str:
    """Two-decimal money string ("1234.50")."""
    return str(value.quantize(_CENTS, rounding=ROUND_HALF_UP))


def line_total(item: CartItem) -> Decimal:
    price = item.product.discounted_price if item.product else ""
    return parse_price_decimal(price) * item.quantity


def build_order_lines(items: List[CartItem]) -> List[dict]:
    """Snapshot cart lines into order_items rows (order_id added later)."""
    return [
        {
            "product_id": item.product_id,
            "product_name": item.product.product_name if item.product else "",
            "price": item.product.discounted_price if item.product else "",
            "quantity": item.quantity,
            "total_price": format_amount(line_total(item)),
        }
        for item in items
    ]


class OrderService:

    def __init__(self, client: Any, cart: Optional[CartService] = None):
        self._client = client
        self._cart = cart or CartService(client)

    def _orders(self):
        return self._client.table(TABLES.ORDERS)

    def checkout(self, user_id: str) -> Order:
        """
        Place an order for everything in the cart.

        Raises:
            EmptyCartError: If the cart has no lines
        """
        items = self._cart.list_items(user_id)
        if not items:
            raise EmptyCartError()

        total = sum((line_total(item) for item in items), Decimal("0"))
        lines = build_order_lines(items)

        order_query = self._orders().insert({
            "user_id": user_id,
            "total_amount": format_amount(total),
            "status": ORDER_STATUS_COMPLETED,
        })
        order_row = first_row(run_query(order_query, "create_order").data)
        order_id = order_row["id"]

        lines_query = self._client.table(TABLES.ORDER_ITEMS).insert(
            [dict(line, order_id=order_id) for line in lines]
        )
        line_rows = run_query(lines_query, "create_order_items").data or []

        self._cart.clear(user_id)

        logger.info(
            "Order placed",
            order_id=order_id,
            lines=len(lines),
            total_amount=order_row["total_amount"],
        )
        return Order.model_validate(dict(order_row, items=line_rows or lines))

    def list_orders(self, user_id: str) -> List[Order]:
        """The user's orders, newest first, with their lines."""
        query = (
            self._orders()
            .select(ORDER_WITH_ITEMS)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
        )
        rows = run_query(query, "list_orders").data or []
        return [Order.model_validate(row) for row in rows]

    def get_order(self, order_id: str, user_id: str) -> Order:
        """
        Raises:
            OrderNotFoundError: If no such order exists
            OrderAccessDeniedError: If it belongs to someone else
        """
        query = self._orders().select(ORDER_WITH_ITEMS).eq("id", order_id).limit(1)
        try:
            row = first_row(run_query(query, "get_order", expected_codes=(_INVALID_TEXT_REPRESENTATION,)).data)
        except CommerceStoreError as e:
            if e.code != _INVALID_TEXT_REPRESENTATION:
                raise
            row = None
        if row is None:
            raise OrderNotFoundError(order_id)
        if str(row["user_id"]) != str(user_id):
            raise OrderAccessDeniedError(order_id)
        return Order.model_validate(row)

    def attach_invoice(self, order_id: str, user_id: str, invoice_url: str) -> Order:
        """Record where the rendered invoice for an order lives."""
        order = self.get_order(order_id, user_id)
        query = self._orders().update({"invoice_url": invoice_url}).eq("id", order_id)
        run_query(query, "attach_invoice")
        logger.info("Invoice attached", order_id=order_id)
        return order.model_copy(update={"invoice_url": invoice_url})
