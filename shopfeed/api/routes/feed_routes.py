"""Feed Routes - 엔진 트리거를 HTTP로 노출

HTTP Layer는 Engine Layer로 위임만 하는 Translator 역할입니다.
"""

from fastapi import APIRouter, Depends, Request

from shopfeed.core.logging import logger, sanitize_for_log
from shopfeed.engine import ProductLookupCache, ProductSyncEngine, SyncResult, VisibilityTrigger
from shopfeed.schemas.product_schema import (
    FeedSnapshot,
    FetchBothRequest,
    SearchQueryRequest,
    SyncResultResponse,
    VisibilitySignal,
)

router = APIRouter(prefix="/api/v1/feed", tags=["feed"])


def get_engine(request: Request) -> ProductSyncEngine:
    """앱 생명주기에 묶인 엔진"""
    return request.app.state.engine


def get_visibility_trigger(request: Request) -> VisibilityTrigger:
    return request.app.state.visibility


def get_lookup_cache(request: Request) -> ProductLookupCache:
    return request.app.state.lookup_cache


def _to_response(result: SyncResult, engine: ProductSyncEngine) -> SyncResultResponse:
    return SyncResultResponse(
        status=result.status.value,
        requested_limit=result.requested_limit,
        received=result.received,
        message=result.reason,
        feed=engine.snapshot(),
    )


@router.get("", response_model=FeedSnapshot)
async def get_feed(engine: ProductSyncEngine = Depends(get_engine)):
    """현재 피드 (검색 필터 적용 목록 포함)"""
    return engine.snapshot()


@router.post("/refresh", response_model=SyncResultResponse)
async def refresh_feed(engine: ProductSyncEngine = Depends(get_engine)):
    """수동 새로고침"""
    result = await engine.refresh()
    return _to_response(result, engine)


@router.post("/load-more", response_model=SyncResultResponse)
async def load_more(engine: ProductSyncEngine = Depends(get_engine)):
    """다음 페이지 추가 조회"""
    result = await engine.load_more()
    return _to_response(result, engine)


@router.put("/search", response_model=SyncResultResponse)
async def set_search(
    request: SearchQueryRequest,
    engine: ProductSyncEngine = Depends(get_engine),
):
    """검색어 변경"""
    logger.info(f"[API] search request: '{sanitize_for_log(request.query)}'")
    result = await engine.set_search_query(request.query)
    return _to_response(result, engine)


@router.post("/reset", response_model=FeedSnapshot)
async def reset_feed(engine: ProductSyncEngine = Depends(get_engine)):
    """페이지네이션 리셋 (목록 비움)"""
    engine.reset_pagination()
    return engine.snapshot()


@router.post("/fetch-both", response_model=SyncResultResponse)
async def fetch_both(
    request: FetchBothRequest,
    engine: ProductSyncEngine = Depends(get_engine),
):
    """양 플랫폼 수집 후 목록 교체"""
    result = await engine.fetch_both_platforms(request.amazon_limit, request.jumia_limit)
    return _to_response(result, engine)


@router.post("/visible", response_model=SyncResultResponse)
async def element_visible(
    signal: VisibilitySignal,
    engine: ProductSyncEngine = Depends(get_engine),
    trigger: VisibilityTrigger = Depends(get_visibility_trigger),
):
    """마지막 항목 노출 신호"""
    result = await trigger.notify_visible(signal.element_key)
    if result is None:
        return SyncResultResponse(status="ignored", feed=engine.snapshot())
    return _to_response(result, engine)
