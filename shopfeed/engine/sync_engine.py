"""Product Sync Engine - 피드 목록 상태 머신

초기 로드 / 수동·주기 새로고침 / 스크롤 추가 조회 / 검색 리셋을
하나의 목록 상태(ListState)로 조정합니다.

- 모든 상태 변경은 단일 이벤트 루프의 await 이후 continuation에서만 발생 (락 없음)
- 교체(replace)와 추가(append)는 모두 all-or-nothing: 실패 시 기존 목록 유지
- 겹친 응답은 마지막에 도착한 것이 이김 (last-write-wins)
"""

from __future__ import annotations

from typing import Optional

from shopfeed.core.config import settings
from shopfeed.core.exceptions import ShopFeedException
from shopfeed.core.logging import logger, sanitize_for_log
from shopfeed.schemas.product_schema import FeedSnapshot

from .auto_refresh import AutoRefreshTimer
from .policy import SyncPolicy
from .result import SyncResult
from .state import FetchCycleCounters, ListState, SyncPhase


class ProductSyncEngine:
    """피드 동기화 엔진

    Usage:
        engine = ProductSyncEngine(ProductApiClient())
        await engine.start()          # 초기 로드 + 자동 새로고침 타이머 시작

        await engine.load_more()      # 스크롤
        await engine.refresh()        # 새로고침
        await engine.set_search_query("iphone")

        await engine.stop()           # 타이머 정리
    """

    def __init__(
        self,
        gateway,
        policy: Optional[SyncPolicy] = None,
        *,
        auto_refresh_interval_s: Optional[float] = None,
        auto_refresh_enabled: Optional[bool] = None,
    ):
        """
        Args:
            gateway: 상품 API 게이트웨이 (list_products/trigger_ingest_both 구현)
            policy: limit 증가 정책 (기본값: settings)
            auto_refresh_interval_s: 자동 새로고침 주기 (기본: 30초)
            auto_refresh_enabled: False면 start()에서 타이머를 띄우지 않음
        """
        if gateway is None:
            raise ValueError("gateway must not be None")

        self.gateway = gateway
        self.policy = policy or SyncPolicy.from_settings()
        self.state = ListState(current_limit=self.policy.default_limit)
        self.counters = FetchCycleCounters()
        self.auto_refresh_enabled = (
            settings.auto_refresh_enabled if auto_refresh_enabled is None else auto_refresh_enabled
        )
        self.timer = AutoRefreshTimer(self, interval_s=auto_refresh_interval_s)

        self._initialized = False
        self._initial_loading = False
        self._reloads_in_flight = 0
        self._refreshes_in_flight = 0
        self._loading_more = False
        # 교체가 적용될 때마다 증가 (append와의 경합 감지용)
        self._replace_generation = 0

    # ------------------------------------------------------------------
    # 상태 조회
    # ------------------------------------------------------------------

    @property
    def phase(self) -> SyncPhase:
        if self._initial_loading:
            return SyncPhase.INITIAL_LOADING
        if self._refreshes_in_flight:
            return SyncPhase.REFRESH_IN_FLIGHT
        if self._reloads_in_flight:
            return SyncPhase.LOADING
        if self._loading_more:
            return SyncPhase.LOADING_MORE
        return SyncPhase.IDLE

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def loading(self) -> bool:
        """전체 교체 계열 조회가 진행 중인가?"""
        return self._initial_loading or bool(self._reloads_in_flight) or bool(self._refreshes_in_flight)

    @property
    def loading_more(self) -> bool:
        return self._loading_more

    @property
    def is_busy(self) -> bool:
        return self.loading or self._loading_more

    @property
    def refresh_disabled(self) -> bool:
        return self.policy.refresh_disabled(self.state.current_limit)

    @property
    def filtered_products(self):
        return self.state.filtered_products

    def snapshot(self) -> FeedSnapshot:
        return FeedSnapshot(
            phase=self.phase.value,
            products=list(self.state.products),
            filtered_products=self.state.filtered_products,
            current_page=self.state.current_page,
            current_limit=self.state.current_limit,
            has_more=self.state.has_more,
            loading=self.loading,
            loading_more=self._loading_more,
            refresh_disabled=self.refresh_disabled,
            search_query=self.state.search_query,
            scroll_count=self.counters.scroll_count,
            refresh_count=self.counters.refresh_count,
            last_updated=self.state.last_updated,
            error=self.state.error,
        )

    # ------------------------------------------------------------------
    # 생명주기
    # ------------------------------------------------------------------

    async def start(self) -> SyncResult:
        """초기 로드 후 자동 새로고침 타이머 시작"""
        result = await self.initial_load()
        if self.auto_refresh_enabled:
            self.timer.start()
        return result

    async def stop(self) -> None:
        await self.timer.stop()

    # ------------------------------------------------------------------
    # 트리거
    # ------------------------------------------------------------------

    async def initial_load(self) -> SyncResult:
        """최초 로드 (세션당 1회)"""
        if self._initialized:
            logger.debug("[INIT] already initialized, skipping")
            return SyncResult.skipped("already initialized")

        self._initialized = True
        self._initial_loading = True
        try:
            return await self._replace_first_page(self.policy.default_limit, "[INIT]")
        finally:
            self._initial_loading = False

    async def refresh(self) -> SyncResult:
        """수동/주기 새로고침

        refresh_count 회차마다 limit = default + count * increment 로 키우고,
        수집 트리거(힌트)를 먼저 보낸 뒤 1페이지를 전체 교체합니다.
        """
        if self.refresh_disabled:
            logger.info(
                f"[REFRESH] skipped: limit {self.state.current_limit} >= ceiling {self.policy.refresh_ceiling}"
            )
            return SyncResult.skipped("refresh ceiling reached")

        # 회차는 await 전에 예약하고, 표시 조회가 성공해야 확정
        step = self.counters.reserve_refresh()
        refresh_limit = self.policy.refresh_limit(step)
        logger.info(f"[REFRESH] Starting refresh #{step} with limit: {refresh_limit}")

        self._refreshes_in_flight += 1
        try:
            await self._hint_ingest(refresh_limit)
            result = await self._replace_first_page(refresh_limit, "[REFRESH]")
        finally:
            self._refreshes_in_flight -= 1

        self.counters.settle_refresh(step, result.is_success)
        return result

    async def load_more(self) -> SyncResult:
        """스크롤 추가 조회 (다음 페이지, limit + increment, 추가)"""
        if self._loading_more:
            return SyncResult.skipped("already loading more")
        if not self.state.has_more:
            return SyncResult.skipped("no more data")

        next_page = self.state.current_page + 1
        next_limit = self.policy.next_scroll_limit(self.state.current_limit)
        logger.info(
            f"[SCROLL] Scroll #{self.counters.scroll_count + 1}: fetching page {next_page} "
            f"with limit {next_limit} (increased from {self.state.current_limit})"
        )

        generation = self._replace_generation
        self._loading_more = True
        self.state.error = None
        try:
            response = await self.gateway.list_products(next_page, next_limit)
        except ShopFeedException as e:
            self.state.error = e.message
            logger.warning(f"[SCROLL] page {next_page} failed: {e}")
            return SyncResult.failed(next_limit, e.message)
        finally:
            self._loading_more = False

        if generation != self._replace_generation:
            # 알려진 경합: 교체 이후 도착한 append는 교체된 목록 뒤에 붙음 (중복 가능)
            logger.warning(
                f"[SCROLL] page {next_page} landed after a wholesale replace; list may contain duplicates"
            )

        items = response.items
        self.state.append(items, page=next_page, limit=next_limit)
        self.counters.scroll_count += 1
        return SyncResult.appended(next_limit, len(items))

    async def set_search_query(self, query: str) -> SyncResult:
        """검색어 변경 → 카운터/페이지네이션 리셋 후 기본 limit으로 재조회"""
        query = query or ""
        if query == self.state.search_query:
            return SyncResult.skipped("query unchanged")

        self.state.search_query = query
        logger.info(f"[SEARCH] query changed: '{sanitize_for_log(query)}'")

        if not self._initialized:
            # 초기 로드가 기본 limit으로 가져오고, 필터는 파생으로 적용됨
            return SyncResult.skipped("not initialized")

        self.counters.reset()
        self.state.current_page = 1
        self.state.current_limit = self.policy.default_limit
        self.state.has_more = True

        self._reloads_in_flight += 1
        try:
            return await self._replace_first_page(self.policy.default_limit, "[SEARCH]")
        finally:
            self._reloads_in_flight -= 1

    def reset_pagination(self) -> None:
        """사용자 리셋: 목록 비우고 카운터/페이지네이션 초기화"""
        self.state.products = []
        self.state.current_page = 1
        self.state.current_limit = self.policy.default_limit
        self.state.has_more = True
        self.counters.reset()
        logger.info("[RESET] pagination reset")

    async def fetch_both_platforms(
        self,
        amazon_limit: Optional[int] = None,
        jumia_limit: Optional[int] = None,
    ) -> SyncResult:
        """양 플랫폼 수집 후 수집 결과(amazon + jumia)로 목록 전체 교체"""
        amazon_limit = amazon_limit or settings.ingest_default_limit
        jumia_limit = jumia_limit or settings.ingest_default_limit
        requested = amazon_limit + jumia_limit

        self._reloads_in_flight += 1
        self.state.error = None
        try:
            response = await self.gateway.trigger_ingest_both(amazon_limit, jumia_limit)
        except ShopFeedException as e:
            self.state.error = e.message
            logger.error(f"[FETCH_BOTH] failed: {e}")
            return SyncResult.failed(requested, e.message)
        finally:
            self._reloads_in_flight -= 1

        items = response.combined_items
        logger.info(
            f"[FETCH_BOTH] Combined {response.amazon_count} Amazon + {response.jumia_count} Jumia "
            f"= {len(items)} products"
        )
        self.state.replace(items, page=1, limit=self.policy.default_limit, requested=requested)
        self._replace_generation += 1
        return SyncResult.replaced(requested, len(items))

    # ------------------------------------------------------------------
    # 내부
    # ------------------------------------------------------------------

    async def _hint_ingest(self, limit: int) -> None:
        """수집 트리거 (결과는 표시에 쓰지 않음, 실패는 로그만)"""
        try:
            response = await self.gateway.trigger_ingest_both(limit, limit)
            logger.debug(f"[REFRESH] ingest hint accepted: total_count={response.total_count}")
        except ShopFeedException as e:
            logger.warning(f"[REFRESH] ingest hint failed, continuing with display fetch: {e}")

    async def _replace_first_page(self, limit: int, tag: str) -> SyncResult:
        self.state.error = None
        try:
            response = await self.gateway.list_products(1, limit)
        except ShopFeedException as e:
            self.state.error = e.message
            logger.error(f"{tag} display fetch failed (limit={limit}): {e}")
            return SyncResult.failed(limit, e.message)

        items = response.items
        self.state.replace(items, page=1, limit=limit)
        self._replace_generation += 1
        logger.info(f"{tag} products replaced: {len(items)} items, limit={limit}")
        return SyncResult.replaced(limit, len(items))
