"""List State - 피드 목록 상태와 파생 필터"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional

from shopfeed.schemas.product_schema import Product


class SyncPhase(str, Enum):
    """엔진 진행 단계"""

    IDLE = "idle"
    INITIAL_LOADING = "initial_loading"
    LOADING = "loading"  # 전체 재조회 (검색 리셋, 양 플랫폼 수집)
    LOADING_MORE = "loading_more"  # 스크롤 추가 조회
    REFRESH_IN_FLIGHT = "refresh_in_flight"


@dataclass
class FetchCycleCounters:
    """마지막 리셋 이후 증가 횟수"""

    scroll_count: int = 0
    refresh_count: int = 0
    # 진행 중인 새로고침까지 포함한 최대 회차 (동시 트리거마다 한 단계씩)
    refresh_reserved: int = 0

    def reset(self) -> None:
        self.scroll_count = 0
        self.refresh_count = 0
        self.refresh_reserved = 0

    def reserve_refresh(self) -> int:
        step = max(self.refresh_reserved, self.refresh_count) + 1
        self.refresh_reserved = step
        return step

    def settle_refresh(self, step: int, succeeded: bool) -> None:
        if succeeded:
            self.refresh_count = max(self.refresh_count, step)
        elif self.refresh_reserved == step:
            # 실패한 최상위 예약은 반납: 다음 시도가 같은 목표 limit을 재사용
            self.refresh_reserved = step - 1


@dataclass
class ListState:
    """피드 목록 상태 (서버 순서 유지, 교체 또는 추가로만 변경)"""

    products: List[Product] = field(default_factory=list)
    current_page: int = 1
    current_limit: int = 15
    has_more: bool = True
    search_query: str = ""
    last_updated: Optional[datetime] = None
    error: Optional[str] = None

    def replace(
        self,
        products: Iterable[Product],
        page: int,
        limit: int,
        requested: Optional[int] = None,
    ) -> None:
        """전체 교체. requested는 실제 요청 개수가 limit과 다를 때만 지정"""
        self.products = list(products)
        self._settle(page, limit, len(self.products), requested or limit)

    def append(self, products: Iterable[Product], page: int, limit: int) -> None:
        batch = list(products)
        self.products = [*self.products, *batch]
        self._settle(page, limit, len(batch), limit)

    def _settle(self, page: int, limit: int, received: int, requested: int) -> None:
        # 요청보다 적게 오면 끝
        self.has_more = received >= requested
        self.current_page = page
        self.current_limit = limit
        self.last_updated = datetime.now()
        self.error = None

    @property
    def filtered_products(self) -> List[Product]:
        return filter_products(self.products, self.search_query)


def matches_query(product: Product, query: str) -> bool:
    """제목/가격/ID 부분 문자열 매칭 (대소문자 무시)"""
    q = query.lower()
    return (
        q in product.title.lower()
        or q in product.price_text.lower()
        or q in str(product.id)
    )


def filter_products(products: Iterable[Product], query: str) -> List[Product]:
    if not query:
        return list(products)
    return [p for p in products if matches_query(p, query)]
