"""shopfeed - 상품 피드 동기화 엔진"""

__version__ = "1.0.0"
