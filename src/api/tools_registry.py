"""
MCP-compatible tool registry for the storefront.

Agents discover tools with GET /tools (TOOLS_METADATA) and call them with
POST /tools/execute {"tool_name", "parameters"}. Every tool runs as the
authenticated user and returns a plain JSON-serializable dict.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from catalog.filters import ProductFilters
from catalog.hybrid_search import CatalogSearchService, ProductQuery
from catalog.models import SortBy
from commerce.cart import CartService
from commerce.errors import ProductNotFoundError
from commerce.models import Order, WishlistItem
from commerce.orders import OrderService
from commerce.wishlist import WishlistService
from core.auth import ShopperUser


class UnknownToolError(KeyError):
    """No tool is registered under the requested name."""


@dataclass
class ToolContext:
    """Everything a tool may touch for one call."""
    user: ShopperUser
    catalog: CatalogSearchService
    cart: CartService
    wishlist: WishlistService
    orders: OrderService


# =============================================================================
# Parameter Models
# =============================================================================

class SearchProductsParams(BaseModel):
    query: Optional[str] = None
    category: Optional[str] = None
    price_min: Optional[str] = None
    price_max: Optional[str] = None
    rating_min: Optional[str] = None
    sort_by: Optional[str] = None
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)


class ProductIdParams(BaseModel):
    product_id: str = Field(..., min_length=1)


class AddToCartParams(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1, le=999)


# =============================================================================
# Summaries (shared with the legacy agent endpoints)
# =============================================================================

def wishlist_summary(item: WishlistItem) -> Dict[str, Any]:
    product = item.product
    return {
        "id": item.product_id,
        "name": product.product_name if product else None,
        "price": product.discounted_price if product else None,
        "originalPrice": product.actual_price if product else None,
        "category": product.category if product else None,
        "addedAt": item.created_at,
    }


def order_summary(order: Order) -> Dict[str, Any]:
    return {
        "orderId": order.id,
        "totalAmount": order.total_amount,
        "status": order.status,
        "createdAt": order.created_at,
        "items": [
            {
                "productId": item.product_id,
                "productName": item.product_name,
                "price": item.price,
                "quantity": item.quantity,
                "totalPrice": item.total_price,
            }
            for item in order.items
        ],
    }


# =============================================================================
# Tools
# =============================================================================

def list_categories(ctx: ToolContext, params: Dict[str, Any]) -> Dict[str, Any]:
    return {"categories": ctx.catalog.categories()}


def search_products(ctx: ToolContext, params: Dict[str, Any]) -> Dict[str, Any]:
    p = SearchProductsParams(**params)
    page = ctx.catalog.list_products(ProductQuery(
        filters=ProductFilters.from_params(
            search=p.query,
            category=p.category,
            price_min=p.price_min,
            price_max=p.price_max,
            rating=p.rating_min,
        ),
        sort_by=SortBy.parse(p.sort_by),
        page=p.page,
        limit=p.limit,
    ))
    return {
        "products": [product.model_dump(mode="json", by_alias=True) for product in page.products],
        "pagination": page.pagination.model_dump(mode="json", by_alias=True),
    }


def get_product(ctx: ToolContext, params: Dict[str, Any]) -> Dict[str, Any]:
    p = ProductIdParams(**params)
    product = ctx.catalog.get_product(p.product_id)
    if product is None:
        raise ProductNotFoundError(p.product_id)
    return {"product": product.model_dump(mode="json", by_alias=True)}


def list_wishlist(ctx: ToolContext, params: Dict[str, Any]) -> Dict[str, Any]:
    return {"products": [wishlist_summary(item) for item in ctx.wishlist.list_items(ctx.user.id)]}


def add_to_cart(ctx: ToolContext, params: Dict[str, Any]) -> Dict[str, Any]:
    p = AddToCartParams(**params)
    product = ctx.catalog.get_product(p.product_id)
    if product is None:
        raise ProductNotFoundError(p.product_id)
    item = ctx.cart.add_item(ctx.user.id, p.product_id, p.quantity)
    return {
        "message": "Product added to cart",
        "cartItem": {
            "productId": item.product_id,
            "quantity": item.quantity,
            "product": product.model_dump(mode="json", by_alias=True),
        },
    }


def remove_from_cart(ctx: ToolContext, params: Dict[str, Any]) -> Dict[str, Any]:
    p = ProductIdParams(**params)
    ctx.cart.remove_item(ctx.user.id, p.product_id)
    return {"message": "Product removed from cart"}


def list_orders(ctx: ToolContext, params: Dict[str, Any]) -> Dict[str, Any]:
    return {"orders": [order_summary(order) for order in ctx.orders.list_orders(ctx.user.id)]}


def complete_order(ctx: ToolContext, params: Dict[str, Any]) -> Dict[str, Any]:
    order = ctx.orders.checkout(ctx.user.id)
    return {"message": "Order completed successfully", "order": order_summary(order)}


TOOL_HANDLERS: Dict[str, Callable[[ToolContext, Dict[str, Any]], Dict[str, Any]]] = {
    "list_categories": list_categories,
    "search_products": search_products,
    "get_product": get_product,
    "list_wishlist": list_wishlist,
    "add_to_cart": add_to_cart,
    "remove_from_cart": remove_from_cart,
    "list_orders": list_orders,
    "complete_order": complete_order,
}


def execute_tool(tool_name: str, parameters: Dict[str, Any], ctx: ToolContext) -> Dict[str, Any]:
    """
    Run a registered tool.

    Raises:
        UnknownToolError: If tool_name is not registered
        pydantic.ValidationError: If parameters do not fit the tool
    """
    handler = TOOL_HANDLERS.get(tool_name)
    if handler is None:
        raise UnknownToolError(tool_name)
    return handler(ctx, parameters or {})


# Registry Metadata for LLM discovery
TOOLS_METADATA: List[Dict[str, Any]] = [
    {
        "name": "list_categories",
        "description": "List every product category level in the catalog.",
        "parameters": {"type": "object", "properties": {}, "required": []},
    },
    {
        "name": "search_products",
        "description": "Search and browse products. A free-text query is ranked semantically when the ranking service is available.",
        "parameters": {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Natural-language search text."},
                "category": {"type": "string", "description": "Category substring, e.g. 'Headphones'."},
                "price_min": {"type": "string", "description": "Minimum discounted price."},
                "price_max": {"type": "string", "description": "Maximum discounted price."},
                "rating_min": {"type": "string", "description": "Minimum rating (0-5)."},
                "sort_by": {
                    "type": "string",
                    "enum": [s.value for s in SortBy],
                    "description": "Result order; relevance keeps the semantic ranking.",
                },
                "page": {"type": "integer", "minimum": 1, "default": 1},
                "limit": {"type": "integer", "minimum": 1, "maximum": 100, "default": 20},
            },
            "required": [],
        },
    },
    {
        "name": "get_product",
        "description": "Get full details for one product by id.",
        "parameters": {
            "type": "object",
            "properties": {"product_id": {"type": "string", "description": "Product id."}},
            "required": ["product_id"],
        },
    },
    {
        "name": "list_wishlist",
        "description": "List the products saved in the user's wishlist, newest first.",
        "parameters": {"type": "object", "properties": {}, "required": []},
    },
    {
        "name": "add_to_cart",
        "description": "Add a product to the user's cart (quantities merge).",
        "parameters": {
            "type": "object",
            "properties": {
                "product_id": {"type": "string", "description": "Product id."},
                "quantity": {"type": "integer", "minimum": 1, "default": 1},
            },
            "required": ["product_id"],
        },
    },
    {
        "name": "remove_from_cart",
        "description": "Remove a product from the user's cart.",
        "parameters": {
            "type": "object",
            "properties": {"product_id": {"type": "string", "description": "Product id."}},
            "required": ["product_id"],
        },
    },
    {
        "name": "list_orders",
        "description": "List the user's orders, newest first, with their items.",
        "parameters": {"type": "object", "properties": {}, "required": []},
    },
    {
        "name": "complete_order",
        "description": "Check out: turn the cart into a completed order and empty the cart.",
        "parameters": {"type": "object", "properties": {}, "required": []},
    },
]
