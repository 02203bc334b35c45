"""Clock - 대기/현재시각 추상화

유예 시간 만료와 자동 새로고침 주기를 이 인터페이스로만 기다리게 해서
테스트에서 수동 시계를 주입할 수 있게 합니다.
"""

from __future__ import annotations

import asyncio
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float:
        ...

    async def sleep(self, seconds: float) -> None:
        ...


class LoopClock:
    """이벤트 루프 시계 (기본 구현)"""

    def now(self) -> float:
        return asyncio.get_running_loop().time()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
