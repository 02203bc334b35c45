"""비즈니스 로직 서비스 - export only."""

from .product_detail_service import ProductDetailLoader

__all__ = ["ProductDetailLoader"]
