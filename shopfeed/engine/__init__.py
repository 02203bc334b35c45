"""Engine Layer - 피드 동기화 코어

- ProductSyncEngine: 목록 상태 머신 (초기 로드/새로고침/스크롤/검색 리셋)
- AutoRefreshTimer: 주기 새로고침 태스크
- ProductLookupCache: 상품 단건 조회 dedup 캐시
- VisibilityTrigger: 목록 끝 노출 신호 어댑터
- SyncPolicy: limit 증가 정책
- SyncResult: 표준 결과 포맷
"""

from .auto_refresh import AutoRefreshTimer
from .clock import Clock, LoopClock
from .lookup_cache import ProductLookupCache
from .policy import SyncPolicy
from .result import SyncResult, SyncStatus
from .state import FetchCycleCounters, ListState, SyncPhase, filter_products, matches_query
from .sync_engine import ProductSyncEngine
from .visibility import VisibilityTrigger

__all__ = [
    "ProductSyncEngine",
    "AutoRefreshTimer",
    "ProductLookupCache",
    "VisibilityTrigger",
    "SyncPolicy",
    "SyncResult",
    "SyncStatus",
    "SyncPhase",
    "ListState",
    "FetchCycleCounters",
    "filter_products",
    "matches_query",
    "Clock",
    "LoopClock",
]
