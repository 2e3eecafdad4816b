"""
Checkout and Order API Routes.
"""

from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_order_service
from api.errors import http_errors
from commerce.models import CheckoutResponse, InvoiceRequest, Order, SuccessResponse
from commerce.orders import OrderService
from core.auth import ShopperUser, require_auth

router = APIRouter(prefix="/api", tags=["Orders"])


@router.post("/checkout", response_model=CheckoutResponse)
def checkout(
    user: ShopperUser = Depends(require_auth),
    orders: OrderService = Depends(get_order_service),
) -> CheckoutResponse:
    """Turn the cart into a completed order and empty the cart."""
    with http_errors("Failed to process checkout"):
        order = orders.checkout(user.id)
    return CheckoutResponse(order=order)


@router.get("/orders", response_model=List[Order])
def list_orders(
    user: ShopperUser = Depends(require_auth),
    orders: OrderService = Depends(get_order_service),
) -> List[Order]:
    with http_errors("Failed to fetch orders"):
        return orders.list_orders(user.id)


@router.get("/orders/{order_id}", response_model=Order)
def get_order(
    order_id: str,
    user: ShopperUser = Depends(require_auth),
    orders: OrderService = Depends(get_order_service),
) -> Order:
    with http_errors("Failed to fetch order"):
        return orders.get_order(order_id, user.id)


@router.post("/orders/{order_id}/invoice", response_model=SuccessResponse)
def attach_invoice(
    order_id: str,
    request: InvoiceRequest,
    user: ShopperUser = Depends(require_auth),
    orders: OrderService = Depends(get_order_service),
) -> SuccessResponse:
    """Store the URL of an invoice rendered for this order."""
    with http_errors("Failed to update invoice URL"):
        orders.attach_invoice(order_id, user.id, request.invoice_url)
    return SuccessResponse()
