"""Visibility Trigger - '목록 끝 노출' 신호 → load_more 1회

노출 감지 자체(IntersectionObserver 등)는 렌더링 계층의 몫이고,
여기서는 신호를 받아 가드만 적용합니다.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from shopfeed.core.logging import logger
from shopfeed.schemas.product_schema import Product

from .result import SyncResult, SyncStatus

if TYPE_CHECKING:
    from .sync_engine import ProductSyncEngine


class VisibilityTrigger:
    """마지막 항목 노출 어댑터

    - 로딩 중이거나 has_more가 False면 신호 무시
    - 감시 대상(마지막 렌더링 항목)이 바뀔 때마다 재무장
    - 한 번 무장한 대상에 대해서는 load_more를 1회만 호출
    """

    def __init__(self, engine: "ProductSyncEngine") -> None:
        self._engine = engine
        self._watched_key: Optional[int] = None
        self._fired = False
        self._in_flight = False

    @property
    def watched_key(self) -> Optional[int]:
        return self._watched_key

    @property
    def armed(self) -> bool:
        return self._watched_key is not None and not self._fired

    def arm(self, key: Optional[int]) -> None:
        if key == self._watched_key:
            return
        self._watched_key = key
        self._fired = False
        logger.debug(f"[VISIBILITY] watching element {key}")

    def rearm_from(self, products: Sequence[Product]) -> None:
        self.arm(products[-1].id if products else None)

    async def notify_visible(self, key: int) -> Optional[SyncResult]:
        """노출 신호 처리

        Returns:
            load_more 결과, 신호를 무시했으면 None
        """
        self.rearm_from(self._engine.state.products)

        if self._watched_key is None or key != self._watched_key:
            return None
        if self._engine.is_busy or not self._engine.state.has_more:
            return None
        if self._in_flight or self._fired:
            return None

        self._fired = True
        self._in_flight = True
        try:
            result = await self._engine.load_more()
        finally:
            self._in_flight = False

        if result.status == SyncStatus.FAILED:
            # 같은 대상의 다음 신호로 재시도 가능
            self._fired = False
        self.rearm_from(self._engine.state.products)
        return result
