"""Pydantic 스키마 정의 (원격 상품 API 응답 계약 + 피드 조회 모델)

원격 API의 각 엔드포인트는 하나의 응답 스키마로만 검증합니다.
응답 모양이 다르면 키를 더듬어 찾지 않고 검증 실패로 처리합니다.
"""
from enum import Enum
from typing import Literal, Optional, List
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Platform(str, Enum):
    """상품 출처 플랫폼"""

    AMAZON = "amazon"
    JUMIA = "jumia"


class Product(BaseModel):
    """스크랩된 상품 (가져온 뒤에는 변경하지 않음)"""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="상품 ID (고유, 불변)")
    title: str = Field(..., description="상품명")
    price: float = Field(..., description="가격 원값 (통화 단위 보장 없음)")
    image_url: str = Field("", description="이미지 URL (유효하지 않을 수 있음)")
    platform: Platform = Field(..., description="amazon | jumia")
    source_url: Optional[str] = Field(None, description="원본 상품 페이지")
    created_at: str = Field(..., description="생성 시각 (ISO-8601)")
    updated_at: str = Field(..., description="수정 시각 (ISO-8601)")

    @field_validator("image_url", mode="before")
    @classmethod
    def coerce_image_url(cls, v):
        return v if isinstance(v, str) else ""

    @property
    def price_text(self) -> str:
        """검색 매칭용 가격 문자열 (정수 값은 소수점 없이)"""
        if float(self.price).is_integer():
            return str(int(self.price))
        return str(self.price)

    def image_or(self, placeholder: str) -> str:
        """이미지 URL이 유효하지 않으면 placeholder 반환"""
        if self.image_url.startswith(("http://", "https://")):
            return self.image_url
        return placeholder


class PageMeta(BaseModel):
    """목록 응답 페이지 정보"""
    current_page: int = Field(..., ge=1)
    last_page: int = Field(..., ge=0)
    per_page: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    platform_filter: Optional[str] = None

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.last_page


class ProductListResponse(BaseModel):
    """GET /api/products 응답"""
    success: Literal[True]
    data: List[Product]
    meta: PageMeta

    @property
    def items(self) -> List[Product]:
        return self.data


class SingleProductResponse(BaseModel):
    """GET /api/products/{id} 응답"""
    success: Literal[True]
    data: Product


class IngestResponse(BaseModel):
    """단일 플랫폼 수집 트리거 응답 (fetch-apify / fetch-jumia-apify)"""
    success: Literal[True]
    message: str = ""
    count: int = Field(..., ge=0)
    data: List[Product] = Field(default_factory=list)

    @property
    def items(self) -> List[Product]:
        return self.data


class PlatformBatch(BaseModel):
    """양 플랫폼 수집 응답의 플랫폼별 묶음"""
    count: int = Field(..., ge=0)
    data: List[Product] = Field(default_factory=list)


class BothIngestResponse(BaseModel):
    """GET /api/products/fetch-both-apis 응답"""
    success: Literal[True]
    message: str = ""
    amazon: PlatformBatch
    jumia: PlatformBatch
    total_count: int = Field(..., ge=0)

    @property
    def amazon_count(self) -> int:
        return self.amazon.count

    @property
    def amazon_items(self) -> List[Product]:
        return self.amazon.data

    @property
    def jumia_count(self) -> int:
        return self.jumia.count

    @property
    def jumia_items(self) -> List[Product]:
        return self.jumia.data

    @property
    def combined_items(self) -> List[Product]:
        """amazon → jumia 순서로 합친 목록"""
        return [*self.amazon.data, *self.jumia.data]


class FeedSnapshot(BaseModel):
    """피드 상태 읽기 모델 (소비자/HTTP 응답용)"""
    phase: str
    products: List[Product]
    filtered_products: List[Product]
    current_page: int
    current_limit: int
    has_more: bool
    loading: bool
    loading_more: bool
    refresh_disabled: bool
    search_query: str
    scroll_count: int
    refresh_count: int
    last_updated: Optional[datetime] = None
    error: Optional[str] = None


class SearchQueryRequest(BaseModel):
    """검색어 변경 요청"""
    query: str = Field("", max_length=200, description="검색어 (빈 문자열 = 필터 없음)")


class FetchBothRequest(BaseModel):
    """양 플랫폼 수집 요청"""
    amazon_limit: Optional[int] = Field(None, ge=1, le=100)
    jumia_limit: Optional[int] = Field(None, ge=1, le=100)


class VisibilitySignal(BaseModel):
    """마지막 항목 노출 신호"""
    element_key: int = Field(..., description="노출된 항목의 상품 ID")


class SyncResultResponse(BaseModel):
    """엔진 동작 결과 + 현재 피드"""
    status: str
    requested_limit: Optional[int] = None
    received: int = 0
    message: Optional[str] = None
    feed: FeedSnapshot


class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    status: str
    timestamp: datetime
    version: str
    products: int
    timer_running: bool
