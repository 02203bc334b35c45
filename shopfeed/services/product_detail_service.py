"""상품 상세 조회 서비스 - 화면 단위 로더"""

from __future__ import annotations

from typing import Optional

from shopfeed.core.exceptions import ShopFeedException
from shopfeed.core.logging import logger
from shopfeed.engine.lookup_cache import ProductLookupCache
from shopfeed.schemas.product_schema import Product


class ProductDetailLoader:
    """상세 화면 하나에 대응하는 로더

    조회는 공유 캐시(ProductLookupCache)로 중복 제거하고,
    close() 이후 도착한 결과는 적용하지 않습니다.
    """

    def __init__(self, cache: ProductLookupCache, product_id: int):
        self.cache = cache
        self.product_id = product_id
        self.product: Optional[Product] = None
        self.error: Optional[str] = None
        self.loading = True
        self.alive = True

    async def load(self) -> Optional[Product]:
        """조회 후 살아 있으면 결과 적용"""
        if self.alive:
            self.loading = True
            self.error = None
        try:
            product = await self.cache.get(self.product_id)
        except ShopFeedException as e:
            if self.alive:
                logger.error(f"[DETAIL] error fetching product {self.product_id}: {e}")
                self.error = e.message
            return None
        finally:
            if self.alive:
                self.loading = False

        if not self.alive:
            logger.debug(f"[DETAIL] view closed, ignoring response for product {self.product_id}")
            return None
        self.product = product
        return product

    def close(self) -> None:
        self.alive = False
