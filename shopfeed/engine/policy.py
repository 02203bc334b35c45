"""Sync Policy - 페이지 크기 증가 정책

limit 증가 구조:
- 최초 로드/검색 리셋: default_limit (15)
- 스크롤 1회: current_limit + growth_increment
- 새로고침 N회차: default_limit + N * growth_increment
- current_limit >= refresh_ceiling (100): 새로고침 비활성화
"""

from dataclasses import dataclass

from shopfeed.core.config import settings


@dataclass(frozen=True)
class SyncPolicy:
    """페이지네이션/새로고침 정책 설정"""

    default_limit: int = 15
    growth_increment: int = 5
    refresh_ceiling: int = 100

    def __post_init__(self):
        """설정 검증"""
        if self.default_limit <= 0 or self.growth_increment <= 0:
            raise ValueError("default_limit and growth_increment must be positive")
        if self.refresh_ceiling < self.default_limit:
            raise ValueError(
                f"refresh_ceiling ({self.refresh_ceiling}) must be >= default_limit ({self.default_limit})"
            )

    @classmethod
    def from_settings(cls) -> "SyncPolicy":
        return cls(
            default_limit=settings.feed_default_limit,
            growth_increment=settings.feed_growth_increment,
            refresh_ceiling=settings.feed_refresh_ceiling,
        )

    def refresh_limit(self, refresh_count: int) -> int:
        """refresh_count 회차 새로고침의 요청 개수"""
        return self.default_limit + refresh_count * self.growth_increment

    def next_scroll_limit(self, current_limit: int) -> int:
        return current_limit + self.growth_increment

    def refresh_disabled(self, current_limit: int) -> bool:
        return current_limit >= self.refresh_ceiling
