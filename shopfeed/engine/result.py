"""Sync Result - 엔진 동작 결과 표준 포맷

원격 호출 실패는 예외로 올리지 않고 FAILED 결과 + state.error로 표면화합니다.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SyncStatus(str, Enum):
    """동기화 동작 결과 상태"""

    REPLACED = "replaced"  # 목록 전체 교체
    APPENDED = "appended"  # 목록 뒤에 추가
    SKIPPED = "skipped"  # 가드에 걸려 아무것도 하지 않음
    FAILED = "failed"  # 표시용 조회 실패 (기존 목록 유지)


@dataclass
class SyncResult:
    """동기화 결과

    Attributes:
        status: 결과 상태
        requested_limit: 요청한 limit
        received: 받은 상품 수
        reason: SKIPPED 사유 또는 FAILED 오류 메시지
    """

    status: SyncStatus
    requested_limit: Optional[int] = None
    received: int = 0
    reason: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status in (SyncStatus.REPLACED, SyncStatus.APPENDED)

    @classmethod
    def replaced(cls, requested_limit: int, received: int) -> "SyncResult":
        return cls(status=SyncStatus.REPLACED, requested_limit=requested_limit, received=received)

    @classmethod
    def appended(cls, requested_limit: int, received: int) -> "SyncResult":
        return cls(status=SyncStatus.APPENDED, requested_limit=requested_limit, received=received)

    @classmethod
    def skipped(cls, reason: str) -> "SyncResult":
        return cls(status=SyncStatus.SKIPPED, reason=reason)

    @classmethod
    def failed(cls, requested_limit: int, error: str) -> "SyncResult":
        return cls(status=SyncStatus.FAILED, requested_limit=requested_limit, reason=error)
