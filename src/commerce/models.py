"""
Pydantic models for cart, wishlist and order endpoints.
"""

from typing import List, Optional

from pydantic import Field, field_validator

from catalog.models import CamelModel, Product


# ============================================================================
# Cart
# ============================================================================

class CartItem(CamelModel):
    """A cart line, with the product embedded when listed."""
    id: str
    user_id: str
    product_id: str
    quantity: int
    created_at: Optional[str] = None
    product: Optional[Product] = None

    @field_validator("id", "user_id", "product_id", mode="before")
    @classmethod
    def coerce_str(cls, v):
        return str(v) if v is not None else v


class AddCartItemRequest(CamelModel):
    """Request body for adding a product to the cart."""
    product_id: str = Field(..., min_length=1, description="Product to add")
    quantity: int = Field(1, ge=1, le=999, description="Units to add (merged into an existing line)")


class UpdateCartItemRequest(CamelModel):
    """Request body for setting a cart line's quantity. 0 removes the line."""
    quantity: int = Field(..., ge=0, le=999)


# ============================================================================
# Wishlist
# ============================================================================

class WishlistItem(CamelModel):
    """A saved product."""
    id: str
    user_id: str
    product_id: str
    created_at: Optional[str] = None
    product: Optional[Product] = None

    @field_validator("id", "user_id", "product_id", mode="before")
    @classmethod
    def coerce_str(cls, v):
        return str(v) if v is not None else v


class AddWishlistItemRequest(CamelModel):
    product_id: str = Field(..., min_length=1)


class WishlistStatus(CamelModel):
    is_in_wishlist: bool


# ============================================================================
# Orders
# ============================================================================

class OrderItem(CamelModel):
    """
    A purchased line. Name and price are copied at checkout so the order
    still reads correctly if the catalog row changes later.
    """
    id: Optional[str] = None
    order_id: Optional[str] = None
    product_id: str
    product_name: str
    price: str
    quantity: int
    total_price: str
    product: Optional[Product] = None

    @field_validator("id", "order_id", "product_id", mode="before")
    @classmethod
    def coerce_str(cls, v):
        return str(v) if v is not None else v


class Order(CamelModel):
    """An order with its line items."""
    id: str
    user_id: str
    total_amount: str
    status: str
    invoice_url: Optional[str] = None
    created_at: Optional[str] = None
    items: List[OrderItem] = Field(default_factory=list)

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def coerce_str(cls, v):
        return str(v) if v is not None else v

    @field_validator("items", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return v or []


class CheckoutResponse(CamelModel):
    order: Order
    message: str = "Order placed successfully"


class InvoiceRequest(CamelModel):
    """Request body for attaching a rendered invoice to an order."""
    invoice_url: str = Field(..., min_length=1, max_length=2048)


class SuccessResponse(CamelModel):
    success: bool = True
