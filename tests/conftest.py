"""전역 테스트 설정

역할:
- 테스트 환경 구성
- 공통 Fake 주입 (인메모리 게이트웨이, 수동 시계)
"""

from __future__ import annotations

import asyncio
import math
import os
from typing import Any, Optional

import pytest

from shopfeed.schemas.product_schema import (
    BothIngestResponse,
    PageMeta,
    PlatformBatch,
    Product,
    ProductListResponse,
)


@pytest.fixture(scope="session", autouse=True)
def test_env() -> None:
    """테스트 환경 변수 설정 (세션 전역)"""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["LOG_LEVEL"] = "INFO"


def make_product(pid: int, title: Optional[str] = None, price: float = 0.0, platform: Optional[str] = None) -> Product:
    return Product(
        id=pid,
        title=title or f"Product {pid}",
        price=price or 10.0 + pid,
        image_url=f"https://images.example.com/{pid}.jpg",
        platform=platform or ("amazon" if pid % 2 else "jumia"),
        created_at="2026-10-01T00:00:00Z",
        updated_at="2026-10-01T00:00:00Z",
    )


async def settle(rounds: int = 10) -> None:
    """대기 중인 continuation들이 진행되도록 루프를 몇 번 양보"""
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakeGateway:
    """인메모리 상품 API

    - catalog를 서버 저장소처럼 page/per_page로 잘라 반환
    - errors[method]에 예외를 넣으면 다음 호출에서 하나씩 꺼내 발생
    - gates[(method, key)]에 Event를 넣으면 set될 때까지 응답 보류
      (list_products는 page 또는 (page, limit) 키 모두 사용 가능)
    """

    def __init__(self, total: int = 200, catalog: Optional[list[Product]] = None):
        self.catalog = catalog if catalog is not None else [make_product(i) for i in range(1, total + 1)]
        self.calls: list[tuple[Any, ...]] = []
        self.errors: dict[str, list[Exception]] = {}
        self.gates: dict[tuple[str, Any], asyncio.Event] = {}

    def count(self, method: str) -> int:
        return sum(1 for call in self.calls if call[0] == method)

    def fail_next(self, method: str, error: Exception) -> None:
        self.errors.setdefault(method, []).append(error)

    def gate(self, method: str, key: Any) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[(method, key)] = event
        return event

    async def _checkpoint(self, method: str, *keys: Any) -> None:
        for key in keys:
            event = self.gates.get((method, key))
            if event is not None:
                await event.wait()
        pending = self.errors.get(method)
        if pending:
            raise pending.pop(0)

    async def list_products(self, page: int = 1, limit: int = 15, platform: Optional[str] = None) -> ProductListResponse:
        self.calls.append(("list_products", page, limit))
        await self._checkpoint("list_products", page, (page, limit))
        start = (page - 1) * limit
        items = self.catalog[start:start + limit]
        return ProductListResponse(
            success=True,
            data=items,
            meta=PageMeta(
                current_page=page,
                last_page=max(1, math.ceil(len(self.catalog) / limit)),
                per_page=limit,
                total=len(self.catalog),
            ),
        )

    async def get_product(self, product_id: int) -> Product:
        self.calls.append(("get_product", product_id))
        await self._checkpoint("get_product", product_id)
        for product in self.catalog:
            if product.id == product_id:
                return product
        from shopfeed.core.exceptions import ProductNotFoundException
        raise ProductNotFoundException(product_id)

    async def trigger_ingest_both(self, amazon_limit: int, jumia_limit: int) -> BothIngestResponse:
        self.calls.append(("trigger_ingest_both", amazon_limit, jumia_limit))
        await self._checkpoint("trigger_ingest_both", None)
        amazon = [p for p in self.catalog if p.platform == "amazon"][:amazon_limit]
        jumia = [p for p in self.catalog if p.platform == "jumia"][:jumia_limit]
        return BothIngestResponse(
            success=True,
            message="ok",
            amazon=PlatformBatch(count=len(amazon), data=amazon),
            jumia=PlatformBatch(count=len(jumia), data=jumia),
            total_count=len(amazon) + len(jumia),
        )


class ManualClock:
    """수동 시계: advance() 호출 시에만 sleep이 깨어남"""

    def __init__(self) -> None:
        self._now = 0.0
        self._sleepers: list[tuple[float, asyncio.Future]] = []

    def now(self) -> float:
        return self._now

    @property
    def sleepers(self) -> int:
        return sum(1 for _, fut in self._sleepers if not fut.done())

    async def sleep(self, seconds: float) -> None:
        fut = asyncio.get_running_loop().create_future()
        self._sleepers.append((self._now + seconds, fut))
        await fut

    async def advance(self, seconds: float) -> None:
        await settle()
        self._now += seconds
        due = [s for s in self._sleepers if s[0] <= self._now]
        self._sleepers = [s for s in self._sleepers if s[0] > self._now]
        for _, fut in due:
            if not fut.done():
                fut.set_result(None)
        await settle()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def gateway_factory():
    return FakeGateway


@pytest.fixture
def product_factory():
    return make_product


@pytest.fixture
def api_payloads() -> dict:
    """원격 API 응답 샘플 (테스트마다 새 사본)"""
    import copy
    from fixtures import API_PAYLOADS
    return copy.deepcopy(API_PAYLOADS)


@pytest.fixture
def product_payloads() -> dict:
    import copy
    from fixtures import PRODUCTS
    return copy.deepcopy(PRODUCTS)


@pytest.fixture
def settle_loop():
    return settle
