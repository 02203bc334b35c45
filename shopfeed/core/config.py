"""설정 관리 - 환경 변수 로드 및 검증"""
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 원격 상품 API
    api_base_url: str = "http://127.0.0.1:8000"
    # httpx 기본 타임아웃과 동일 (엔진 자체 데드라인은 없음)
    api_timeout_s: float = 5.0

    # 피드 페이지네이션 정책
    # - feed_default_limit: 최초 로드/검색 리셋 시 요청 개수
    # - feed_growth_increment: 스크롤/새로고침 1회당 limit 증가폭
    # - feed_refresh_ceiling: 이 limit 이상이면 새로고침 비활성화
    feed_default_limit: int = 15
    feed_growth_increment: int = 5
    feed_refresh_ceiling: int = 100

    # 자동 새로고침
    auto_refresh_enabled: bool = True
    auto_refresh_interval_s: float = 30.0

    # 상세 조회 중복 제거 캐시: 완료 후 엔트리 유지 시간
    detail_cache_grace_s: float = 1.0

    # 양 플랫폼 수집 트리거 기본 개수
    ingest_default_limit: int = 5

    # API
    api_title: str = "상품 피드 동기화 서비스"
    api_version: str = "1.0.0"
    api_description: str = "스크랩된 상품 목록을 페이지네이션/자동 새로고침으로 동기화합니다."

    # 실행 환경 (production이면 DEBUG 로그 차단, 간결한 포맷)
    environment: str = "development"

    # 로깅
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator(
        "feed_default_limit",
        "feed_growth_increment",
        "feed_refresh_ceiling",
        "ingest_default_limit",
    )
    @classmethod
    def validate_feed_limits(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("feed limits must be positive")
        return v

    @field_validator("api_timeout_s", "auto_refresh_interval_s")
    @classmethod
    def validate_intervals(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts and intervals must be positive")
        return v

    @field_validator("detail_cache_grace_s")
    @classmethod
    def validate_grace(cls, v: float) -> float:
        if v < 0:
            raise ValueError("detail_cache_grace_s must be >= 0")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
