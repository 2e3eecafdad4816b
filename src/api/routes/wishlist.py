"""
Wishlist API Routes.
"""

from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_wishlist_service
from api.errors import http_errors
from commerce.models import (
    AddWishlistItemRequest,
    SuccessResponse,
    WishlistItem,
    WishlistStatus,
)
from commerce.wishlist import WishlistService
from core.auth import ShopperUser, require_auth

router = APIRouter(prefix="/api/wishlist", tags=["Wishlist"])


@router.get("", response_model=List[WishlistItem])
def get_wishlist(
    user: ShopperUser = Depends(require_auth),
    wishlist: WishlistService = Depends(get_wishlist_service),
) -> List[WishlistItem]:
    with http_errors("Failed to fetch wishlist"):
        return wishlist.list_items(user.id)


@router.post("", response_model=WishlistItem)
def add_to_wishlist(
    request: AddWishlistItemRequest,
    user: ShopperUser = Depends(require_auth),
    wishlist: WishlistService = Depends(get_wishlist_service),
) -> WishlistItem:
    with http_errors("Failed to add to wishlist"):
        return wishlist.add_item(user.id, request.product_id)


@router.delete("/{product_id}", response_model=SuccessResponse)
def remove_from_wishlist(
    product_id: str,
    user: ShopperUser = Depends(require_auth),
    wishlist: WishlistService = Depends(get_wishlist_service),
) -> SuccessResponse:
    with http_errors("Failed to remove from wishlist"):
        wishlist.remove_item(user.id, product_id)
    return SuccessResponse()


@router.get("/check/{product_id}", response_model=WishlistStatus)
def check_wishlist(
    product_id: str,
    user: ShopperUser = Depends(require_auth),
    wishlist: WishlistService = Depends(get_wishlist_service),
) -> WishlistStatus:
    with http_errors("Failed to check wishlist status"):
        return WishlistStatus(is_in_wishlist=wishlist.contains(user.id, product_id))
