"""Auto Refresh Timer - 주기 새로고침 스케줄

APScheduler(AsyncIOScheduler)에 interval 잡 하나를 등록합니다.
start()/stop() 으로만 생명주기를 관리하며, 재시작 시 스케줄러를 새로 만들어
이전 잡이 남지 않습니다.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from shopfeed.core.config import settings
from shopfeed.core.logging import logger

from .result import SyncResult

if TYPE_CHECKING:
    from .sync_engine import ProductSyncEngine


JOB_ID = "shopfeed-auto-refresh"


class AutoRefreshTimer:
    """자동 새로고침 타이머

    interval_s 마다 엔진의 refresh()를 호출합니다.
    새로고침이 비활성화된 상태(limit 상한 도달)의 틱은 아무것도 하지 않습니다.
    """

    def __init__(self, engine: "ProductSyncEngine", interval_s: Optional[float] = None) -> None:
        self._engine = engine
        self.interval_s = interval_s if interval_s is not None else settings.auto_refresh_interval_s
        if self.interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self.scheduler: Optional[AsyncIOScheduler] = None
        self.tick_count = 0
        self.skipped_ticks = 0

    @property
    def running(self) -> bool:
        return self.scheduler is not None and self.scheduler.running

    @property
    def job(self):
        """등록된 interval 잡 (미실행 시 None)"""
        if self.scheduler is None:
            return None
        return self.scheduler.get_job(JOB_ID)

    def start(self) -> None:
        if self.running:
            return
        scheduler = AsyncIOScheduler(event_loop=asyncio.get_running_loop())
        scheduler.add_job(
            self._scheduled_tick,
            trigger=IntervalTrigger(seconds=self.interval_s),
            id=JOB_ID,
            name="Feed Auto Refresh",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self.scheduler = scheduler
        logger.info(f"[TIMER] auto refresh scheduled (every {self.interval_s}s)")

    async def stop(self) -> None:
        scheduler, self.scheduler = self.scheduler, None
        if scheduler is None or not scheduler.running:
            return
        scheduler.shutdown(wait=False)
        logger.info("[TIMER] auto refresh stopped")

    async def tick(self) -> SyncResult:
        """틱 1회 처리"""
        self.tick_count += 1
        if self._engine.refresh_disabled:
            self.skipped_ticks += 1
            logger.debug("[TIMER] tick skipped: refresh disabled")
            return SyncResult.skipped("refresh disabled")
        return await self._engine.refresh()

    async def _scheduled_tick(self) -> None:
        try:
            await self.tick()
        except Exception as e:
            logger.error(f"[TIMER] tick failed: {type(e).__name__}: {e}", exc_info=True)
