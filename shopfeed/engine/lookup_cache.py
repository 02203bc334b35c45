"""Product Lookup Cache - 상품 단건 조회 중복 제거

- 같은 ID에 대해 진행 중인 조회는 최대 1개
- 동시에 요청한 호출자들은 같은 결과(또는 같은 예외)를 받음
- 조회가 끝난 뒤 유예 시간(기본 1초) 동안 엔트리를 유지해서
  화면 재마운트 같은 빠른 재요청은 다시 조회하지 않음

호출자가 사라진 뒤 결과를 적용하지 않는 책임은 호출자에게 있습니다
(ProductDetailLoader의 alive 플래그 참고).
"""

from __future__ import annotations

import asyncio
from functools import partial
from typing import Dict, Optional, Set

from shopfeed.core.config import settings
from shopfeed.core.logging import logger
from shopfeed.schemas.product_schema import Product

from .clock import Clock, LoopClock


class ProductLookupCache:
    """상품 단건 조회 dedup 캐시"""

    def __init__(
        self,
        gateway,
        clock: Optional[Clock] = None,
        grace_period_s: Optional[float] = None,
    ):
        """
        Args:
            gateway: get_product(id)를 구현한 게이트웨이
            clock: 유예 시간 대기용 시계 (테스트에서 주입)
            grace_period_s: 완료 후 엔트리 유지 시간 (초)
        """
        if gateway is None:
            raise ValueError("gateway must not be None")
        self.gateway = gateway
        self._clock = clock or LoopClock()
        self.grace_period_s = (
            grace_period_s if grace_period_s is not None else settings.detail_cache_grace_s
        )
        self._entries: Dict[int, asyncio.Task] = {}
        self._evictions: Set[asyncio.Task] = set()
        self._closed = False

    def __contains__(self, product_id: int) -> bool:
        return product_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, product_id: int) -> Product:
        """상품 조회 (진행 중/유예 중인 조회가 있으면 공유)

        Raises:
            TransportError: 공유된 조회가 실패한 경우 (모든 호출자에게 동일)
        """
        task = self._entries.get(product_id)
        if task is None:
            logger.debug(f"[LOOKUP] creating new request for product {product_id}")
            task = asyncio.ensure_future(self.gateway.get_product(product_id))
            self._entries[product_id] = task
            task.add_done_callback(partial(self._schedule_eviction, product_id))
        else:
            logger.debug(f"[LOOKUP] using shared request for product {product_id}")

        # 한 호출자가 취소돼도 공유 조회는 계속
        return await asyncio.shield(task)

    def invalidate(self, product_id: int) -> bool:
        """특정 ID 엔트리 제거 (진행 중인 조회는 취소하지 않음)"""
        logger.info(f"[LOOKUP] clearing cache for product {product_id}")
        return self._entries.pop(product_id, None) is not None

    def clear(self) -> None:
        logger.info("[LOOKUP] clearing product cache")
        self._entries.clear()

    async def close(self) -> None:
        """대기 중인 만료 태스크 정리 (이후 완료되는 조회는 만료 예약 없음)"""
        self._closed = True
        evictions = list(self._evictions)
        for evictor in evictions:
            evictor.cancel()
        if evictions:
            await asyncio.gather(*evictions, return_exceptions=True)
        self._evictions.clear()
        self._entries.clear()

    def _schedule_eviction(self, product_id: int, task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.info(f"[LOOKUP] product {product_id} lookup failed: {task.exception()}")
        if self._closed:
            return
        evictor = asyncio.ensure_future(self._evict_later(product_id, task))
        self._evictions.add(evictor)
        evictor.add_done_callback(self._evictions.discard)

    async def _evict_later(self, product_id: int, task: asyncio.Task) -> None:
        await self._clock.sleep(self.grace_period_s)
        # 그 사이 invalidate 후 새로 만든 엔트리는 건드리지 않음
        if self._entries.get(product_id) is task:
            del self._entries[product_id]
            logger.debug(f"[LOOKUP] evicted product {product_id}")
