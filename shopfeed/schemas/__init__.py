"""스키마 패키지 - export only."""

from .product_schema import (
    BothIngestResponse,
    FeedSnapshot,
    IngestResponse,
    PageMeta,
    Platform,
    PlatformBatch,
    Product,
    ProductListResponse,
    SingleProductResponse,
)

__all__ = [
    "BothIngestResponse",
    "FeedSnapshot",
    "IngestResponse",
    "PageMeta",
    "Platform",
    "PlatformBatch",
    "Product",
    "ProductListResponse",
    "SingleProductResponse",
]
