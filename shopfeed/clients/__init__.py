"""원격 API 클라이언트 - export only."""

from .product_api import ProductApiClient, get_shared_product_api, shutdown_shared_product_api

__all__ = ["ProductApiClient", "get_shared_product_api", "shutdown_shared_product_api"]
