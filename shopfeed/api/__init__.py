"""API 엔드포인트 패키지 - export only."""

from .routes import feed_router, health_router, product_router, get_engine, get_lookup_cache

__all__ = ["feed_router", "health_router", "product_router", "get_engine", "get_lookup_cache"]
