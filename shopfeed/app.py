"""FastAPI 앱 팩토리"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shopfeed.core.config import settings
from shopfeed.core.logging import logger
from shopfeed.api import feed_router, health_router, product_router
from shopfeed.clients import get_shared_product_api, shutdown_shared_product_api
from shopfeed.engine import Clock, ProductLookupCache, ProductSyncEngine, VisibilityTrigger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기 (초기 로드 + 타이머 시작 / 타이머 정리 + 세션 종료)"""
    logger.info("Starting application...")
    engine: ProductSyncEngine = app.state.engine
    await engine.start()
    logger.info(f"Application started: {len(engine.state.products)} products loaded")
    yield
    logger.info("Shutting down application...")
    await engine.stop()
    await app.state.lookup_cache.close()
    if app.state.shared_gateway:
        await shutdown_shared_product_api()
    else:
        close = getattr(app.state.gateway, "close", None)
        if close is not None:
            await close()


def create_app(gateway=None, clock: Optional[Clock] = None) -> FastAPI:
    """
    FastAPI 앱 생성 (Factory Pattern)

    Args:
        gateway: 상품 API 게이트웨이 (기본: 공유 ProductApiClient)
        clock: 상세 캐시 유예 시간용 시계

    Returns:
        FastAPI 앱 인스턴스
    """
    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.shared_gateway = gateway is None
    gateway = gateway or get_shared_product_api()
    engine = ProductSyncEngine(gateway)
    app.state.gateway = gateway
    app.state.engine = engine
    app.state.lookup_cache = ProductLookupCache(gateway, clock=clock)
    app.state.visibility = VisibilityTrigger(engine)

    # 라우터 등록
    app.include_router(health_router)
    app.include_router(feed_router)
    app.include_router(product_router)

    return app

# 앱 인스턴스 생성 (uvicorn이 로드할 수 있도록)
app = create_app()


def run() -> None:
    """개발 서버 실행 (shopfeed-serve)"""
    import uvicorn

    uvicorn.run("shopfeed.app:app", host="0.0.0.0", port=8080, log_level=settings.log_level.lower())
