"""API routes package."""

from .feed_routes import router as feed_router, get_engine, get_lookup_cache, get_visibility_trigger
from .health_routes import router as health_router
from .product_routes import router as product_router

__all__ = [
    "feed_router",
    "health_router",
    "product_router",
    "get_engine",
    "get_lookup_cache",
    "get_visibility_trigger",
]
