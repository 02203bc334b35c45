"""헬스 체크 엔드포인트"""
from datetime import datetime

from fastapi import APIRouter, Depends

from shopfeed import __version__
from shopfeed.api.routes.feed_routes import get_engine
from shopfeed.engine import ProductSyncEngine
from shopfeed.schemas.product_schema import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(engine: ProductSyncEngine = Depends(get_engine)):
    """
    헬스 체크 엔드포인트

    - 초기 로드 여부 / 마지막 오류
    - 자동 새로고침 타이머 동작 여부
    """
    if not engine.initialized:
        status = "starting"
    elif engine.state.error:
        status = "degraded"
    else:
        status = "ok"

    return HealthResponse(
        status=status,
        timestamp=datetime.now(),
        version=__version__,
        products=len(engine.state.products),
        timer_running=engine.timer.running,
    )


@router.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "service": "상품 피드 동기화 서비스",
        "version": __version__,
        "docs": "/docs"
    }
