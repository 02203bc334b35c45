"""커스텀 예외 정의 (Structured Exception Hierarchy)"""
from typing import Any, Optional


class ShopFeedException(Exception):
    """기본 예외 클래스 - 모든 커스텀 예외의 부모"""
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# 원격 API 관련 예외
class TransportError(ShopFeedException):
    """원격 호출 실패 (non-2xx 또는 네트워크 오류)

    status가 None이면 응답을 받기 전에 실패한 경우입니다.
    """
    def __init__(
        self,
        status: Optional[int],
        body: str = "",
        message: Optional[str] = None,
        error_code: str = "TRANSPORT_ERROR",
        details: Optional[dict[str, Any]] = None,
    ):
        self.status = status
        self.body = body
        if message is None:
            message = f"API request failed: {status}" if status is not None else "API request failed: network error"
        super().__init__(message, error_code, details or {"status": status, "body": body})


class MalformedResponseError(TransportError):
    """응답 본문 디코딩 실패, success != true, 또는 스키마 불일치"""
    def __init__(self, reason: str, status: Optional[int] = None, body: str = "", details: Optional[dict[str, Any]] = None):
        self.reason = reason
        super().__init__(
            status,
            body,
            message=f"Malformed response: {reason}",
            error_code="MALFORMED_RESPONSE",
            details=details or {"status": status, "reason": reason},
        )


class ProductNotFoundException(TransportError):
    """단건 조회 404"""
    def __init__(self, product_id: int, body: str = ""):
        self.product_id = product_id
        super().__init__(
            404,
            body,
            message=f"Product not found: {product_id}",
            error_code="PRODUCT_NOT_FOUND",
            details={"product_id": product_id},
        )


# 유효성 검증 관련 예외
class ValidationException(ShopFeedException):
    """유효성 검증 예외"""
    def __init__(self, field: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Validation failed for '{field}': {reason}"
        super().__init__(message, "VALIDATION_ERROR",
                        details or {"field": field, "reason": reason})


class InvalidPaginationException(ValidationException):
    """page/limit 인자가 유효하지 않음"""
    def __init__(self, field: str, value: Any):
        super().__init__(field, f"must be a positive integer (value: {value})")
