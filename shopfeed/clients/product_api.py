"""원격 상품 API 클라이언트 (httpx)

- 상태 없는 타입 경계: 호출 1회 = 네트워크 왕복 1회, 재시도/캐시 없음
- 세션(httpx.AsyncClient)은 커넥션 재사용을 위해 프로세스 단위로 공유하고
  앱 종료 시 close()로 정리합니다.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from shopfeed.core.config import settings
from shopfeed.core.exceptions import (
    InvalidPaginationException,
    MalformedResponseError,
    ProductNotFoundException,
    TransportError,
)
from shopfeed.core.logging import logger, sanitize_for_log
from shopfeed.schemas.product_schema import (
    BothIngestResponse,
    IngestResponse,
    Platform,
    Product,
    ProductListResponse,
    SingleProductResponse,
)

ResponseT = TypeVar("ResponseT", bound=BaseModel)

_INGEST_PATHS: Dict[Platform, str] = {
    Platform.AMAZON: "/api/products/fetch-apify",
    Platform.JUMIA: "/api/products/fetch-jumia-apify",
}


def _require_positive(field: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise InvalidPaginationException(field, value)
    return value


class ProductApiClient:
    """원격 상품 API 게이트웨이

    Args:
        base_url: API 베이스 URL (기본: settings.api_base_url)
        timeout_s: httpx 요청 타임아웃 (초)
        transport: 테스트용 httpx 트랜스포트 (MockTransport 등)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout_s: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout_s = timeout_s if timeout_s is not None else settings.api_timeout_s
        self._transport = transport
        self._lock = asyncio.Lock()
        self._client: Optional[httpx.AsyncClient] = None

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._lock:
            if self._client is not None:
                return self._client
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self.default_headers(),
                timeout=self.timeout_s,
                transport=self._transport,
            )
            return self._client

    def default_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        client = await self._ensure_client()
        try:
            resp = await client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.info(f"[GATEWAY] GET {path} failed: {type(e).__name__}: {e!r}")
            raise TransportError(None, str(e)) from e

        if not resp.is_success:
            body = resp.text
            logger.warning(
                f"[GATEWAY] GET {path} -> {resp.status_code}: {sanitize_for_log(body, 200)}"
            )
            raise TransportError(resp.status_code, body)

        try:
            payload = resp.json()
        except ValueError as e:
            raise MalformedResponseError("body is not valid JSON", resp.status_code, resp.text) from e

        if not isinstance(payload, dict) or payload.get("success") is not True:
            raise MalformedResponseError("missing success: true", resp.status_code, resp.text)
        return payload

    def _parse(self, model: Type[ResponseT], payload: Dict[str, Any], path: str) -> ResponseT:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"[GATEWAY] {path} response failed validation: {e.error_count()} error(s)")
            raise MalformedResponseError(
                f"{model.__name__} validation failed",
                details={"path": path, "errors": e.errors(include_url=False)},
            ) from e

    async def list_products(
        self,
        page: int = 1,
        limit: int = 15,
        platform: Optional[Platform | str] = None,
    ) -> ProductListResponse:
        """표시용 목록 조회 (GET /api/products)"""
        params: Dict[str, Any] = {
            "page": _require_positive("page", page),
            "per_page": _require_positive("limit", limit),
        }
        if platform:
            params["platform"] = Platform(platform).value
        path = "/api/products"
        return self._parse(ProductListResponse, await self._get_json(path, params), path)

    async def list_products_by_platform(
        self,
        platform: Platform | str,
        page: int = 1,
        limit: int = 15,
    ) -> ProductListResponse:
        """플랫폼 전용 목록 조회 (GET /api/products/platform/{platform})"""
        params = {
            "page": _require_positive("page", page),
            "per_page": _require_positive("limit", limit),
        }
        path = f"/api/products/platform/{Platform(platform).value}"
        return self._parse(ProductListResponse, await self._get_json(path, params), path)

    async def get_product(self, product_id: int) -> Product:
        """단건 조회 (GET /api/products/{id})"""
        path = f"/api/products/{product_id}"
        try:
            payload = await self._get_json(path)
        except TransportError as e:
            if e.status == 404 and not isinstance(e, MalformedResponseError):
                raise ProductNotFoundException(product_id, e.body) from e
            raise
        return self._parse(SingleProductResponse, payload, path).data

    async def trigger_ingest(self, platform: Platform | str, limit: int) -> IngestResponse:
        """단일 플랫폼 수집 트리거"""
        path = _INGEST_PATHS[Platform(platform)]
        params = {"limit": _require_positive("limit", limit)}
        return self._parse(IngestResponse, await self._get_json(path, params), path)

    async def trigger_ingest_both(self, amazon_limit: int, jumia_limit: int) -> BothIngestResponse:
        """양 플랫폼 수집 트리거 (GET /api/products/fetch-both-apis)"""
        path = "/api/products/fetch-both-apis"
        params = {
            "amazon_limit": _require_positive("amazon_limit", amazon_limit),
            "jumia_limit": _require_positive("jumia_limit", jumia_limit),
        }
        return self._parse(BothIngestResponse, await self._get_json(path, params), path)

    async def close(self) -> None:
        async with self._lock:
            if self._client is None:
                return
            try:
                await self._client.aclose()
            except httpx.HTTPError as e:
                logger.info(f"[GATEWAY] close failed: {type(e).__name__}")
            self._client = None


_shared_product_api: Optional[ProductApiClient] = None


def get_shared_product_api() -> ProductApiClient:
    global _shared_product_api
    if _shared_product_api is None:
        _shared_product_api = ProductApiClient()
    return _shared_product_api


async def shutdown_shared_product_api() -> None:
    global _shared_product_api
    if _shared_product_api is None:
        return
    await _shared_product_api.close()
    _shared_product_api = None
