"""
Translation of service exceptions into HTTP errors.

Services raise domain exceptions; routers wrap their calls in
`http_errors(...)` so every endpoint maps them the same way. Store
failures are logged with their detail and answered with a generic
message.
"""

from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException, status

from commerce.errors import (
    CartItemNotFoundError,
    EmptyCartError,
    OrderAccessDeniedError,
    OrderNotFoundError,
    ProductNotFoundError,
)
from config.database import StoreError
from core.logging import get_logger

logger = get_logger(__name__)


@contextmanager
def http_errors(failure_detail: str) -> Iterator[None]:
    """
    Usage:
        with http_errors("Failed to fetch cart"):
            return cart.list_items(user.id)
    """
    try:
        yield
    except ProductNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    except CartItemNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cart item not found")
    except OrderNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    except OrderAccessDeniedError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized")
    except EmptyCartError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cart is empty")
    except StoreError as e:
        logger.error(failure_detail, error=str(e), code=e.code)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=failure_detail)
