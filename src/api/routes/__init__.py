"""
Route modules for the API.

Each module exports a FastAPI APIRouter with endpoints
for a specific domain/feature.
"""

from api.routes import cart
from api.routes import health
from api.routes import orders
from api.routes import products
from api.routes import tools
from api.routes import wishlist

__all__ = ["cart", "health", "orders", "products", "tools", "wishlist"]
