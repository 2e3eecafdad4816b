"""
Cart API Routes.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from api.dependencies import get_cart_service
from api.errors import http_errors
from commerce.cart import CartService
from commerce.errors import CartItemNotFoundError
from commerce.models import (
    AddCartItemRequest,
    CartItem,
    SuccessResponse,
    UpdateCartItemRequest,
)
from core.auth import ShopperUser, require_auth

router = APIRouter(prefix="/api/cart", tags=["Cart"])


@router.get("", response_model=List[CartItem])
def get_cart(
    user: ShopperUser = Depends(require_auth),
    cart: CartService = Depends(get_cart_service),
) -> List[CartItem]:
    with http_errors("Failed to fetch cart"):
        return cart.list_items(user.id)


@router.post("", response_model=CartItem)
def add_to_cart(
    request: AddCartItemRequest,
    user: ShopperUser = Depends(require_auth),
    cart: CartService = Depends(get_cart_service),
) -> CartItem:
    """Add units of a product; an existing line has its quantity increased."""
    with http_errors("Failed to add to cart"):
        return cart.add_item(user.id, request.product_id, request.quantity)


@router.put("/{product_id}", response_model=Optional[CartItem])
def update_cart_item(
    product_id: str,
    request: UpdateCartItemRequest,
    user: ShopperUser = Depends(require_auth),
    cart: CartService = Depends(get_cart_service),
) -> Optional[CartItem]:
    """Set a line's quantity. Quantity 0 removes the line and returns null."""
    with http_errors("Failed to update cart item"):
        item = cart.update_quantity(user.id, product_id, request.quantity)
        if item is None and request.quantity > 0:
            raise CartItemNotFoundError(product_id)
        return item


@router.delete("/{product_id}", response_model=SuccessResponse)
def remove_from_cart(
    product_id: str,
    user: ShopperUser = Depends(require_auth),
    cart: CartService = Depends(get_cart_service),
) -> SuccessResponse:
    with http_errors("Failed to remove from cart"):
        cart.remove_item(user.id, product_id)
    return SuccessResponse()


@router.delete("", response_model=SuccessResponse)
def clear_cart(
    user: ShopperUser = Depends(require_auth),
    cart: CartService = Depends(get_cart_service),
) -> SuccessResponse:
    with http_errors("Failed to clear cart"):
        cart.clear(user.id)
    return SuccessResponse()
