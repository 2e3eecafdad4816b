"""
Agent-facing endpoints.

- GET  /tools          tool discovery (name, description, JSON-schema parameters)
- POST /tools/execute  run one tool as the authenticated user

The older agent REST endpoints are kept with their {"success": ...}
envelope and map onto the same tools.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from api.dependencies import (
    get_cart_service,
    get_catalog_service,
    get_order_service,
    get_wishlist_service,
)
from api.errors import http_errors
from api.tools_registry import (
    TOOLS_METADATA,
    ToolContext,
    UnknownToolError,
    execute_tool,
)
from catalog.hybrid_search import CatalogSearchService
from commerce.cart import CartService
from commerce.errors import EmptyCartError, ProductNotFoundError
from commerce.orders import OrderService
from commerce.wishlist import WishlistService
from config.database import StoreError
from core.auth import ShopperUser, require_auth
from core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Agent Tools"])


class ToolExecutionRequest(BaseModel):
    tool_name: str
    parameters: Dict[str, Any] = Field(default_factory=dict)


class QuantityBody(BaseModel):
    quantity: int = Field(1, ge=1, le=999)


def get_tool_context(
    user: ShopperUser = Depends(require_auth),
    catalog: CatalogSearchService = Depends(get_catalog_service),
    cart: CartService = Depends(get_cart_service),
    wishlist: WishlistService = Depends(get_wishlist_service),
    orders: OrderService = Depends(get_order_service),
) -> ToolContext:
    return ToolContext(user=user, catalog=catalog, cart=cart, wishlist=wishlist, orders=orders)


# =============================================================================
# Discovery + Execution
# =============================================================================

@router.get("/tools")
def list_tools() -> Dict[str, Any]:
    """List all available tools in canonical format."""
    return {
        "tools": TOOLS_METADATA,
        "total_count": len(TOOLS_METADATA),
    }


@router.post("/tools/execute")
def run_tool(
    request: ToolExecutionRequest,
    ctx: ToolContext = Depends(get_tool_context),
) -> Dict[str, Any]:
    """Execute a named tool with the given parameters."""
    logger.info("Executing tool", tool_name=request.tool_name)
    try:
        with http_errors(f"Tool '{request.tool_name}' failed"):
            result = execute_tool(request.tool_name, request.parameters, ctx)
    except UnknownToolError:
        available = ", ".join(t["name"] for t in TOOLS_METADATA)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tool '{request.tool_name}' not found. Available tools: {available}",
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Tool execution error: {e.error_count()} invalid parameter(s)",
        )

    return {"tool_name": request.tool_name, "success": True, "result": result}


# =============================================================================
# Legacy agent endpoints
# =============================================================================

def _failure(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def _run_legacy(tool_name: str, parameters: Dict[str, Any], ctx: ToolContext, failure: str) -> Any:
    try:
        result = execute_tool(tool_name, parameters, ctx)
    except ProductNotFoundError:
        return _failure(status.HTTP_404_NOT_FOUND, "Product not found")
    except EmptyCartError:
        return _failure(status.HTTP_400_BAD_REQUEST, "Cart is empty")
    except StoreError as e:
        logger.error(failure, error=str(e), code=e.code)
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, failure)
    return {"success": True, **result}


@router.get("/filters/listCategories")
def legacy_list_categories(ctx: ToolContext = Depends(get_tool_context)) -> Any:
    return _run_legacy("list_categories", {}, ctx, "Failed to fetch categories")


@router.get("/wishlist/listProducts")
def legacy_list_wishlist(ctx: ToolContext = Depends(get_tool_context)) -> Any:
    return _run_legacy("list_wishlist", {}, ctx, "Failed to fetch wishlist products")


@router.post("/cart/add/{product_id}")
def legacy_add_to_cart(
    product_id: str,
    body: Optional[QuantityBody] = Body(None),
    ctx: ToolContext = Depends(get_tool_context),
) -> Any:
    quantity = body.quantity if body else 1
    return _run_legacy(
        "add_to_cart",
        {"product_id": product_id, "quantity": quantity},
        ctx,
        "Failed to add product to cart",
    )


@router.delete("/cart/remove/{product_id}")
def legacy_remove_from_cart(product_id: str, ctx: ToolContext = Depends(get_tool_context)) -> Any:
    return _run_legacy("remove_from_cart", {"product_id": product_id}, ctx, "Failed to remove product from cart")


@router.get("/orders/myorders")
def legacy_list_orders(ctx: ToolContext = Depends(get_tool_context)) -> Any:
    return _run_legacy("list_orders", {}, ctx, "Failed to fetch orders")


@router.post("/orders/completeOrder")
def legacy_complete_order(ctx: ToolContext = Depends(get_tool_context)) -> Any:
    return _run_legacy("complete_order", {}, ctx, "Failed to complete order")
