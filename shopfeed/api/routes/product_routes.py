"""상품 단건 조회 엔드포인트"""
from fastapi import APIRouter, Depends, HTTPException

from shopfeed.api.routes.feed_routes import get_lookup_cache
from shopfeed.core.exceptions import ProductNotFoundException, TransportError
from shopfeed.core.logging import logger
from shopfeed.engine import ProductLookupCache
from shopfeed.schemas.product_schema import Product

router = APIRouter(prefix="/api/v1/products", tags=["products"])


@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: int,
    cache: ProductLookupCache = Depends(get_lookup_cache),
):
    """상품 상세 (동시 요청은 원격 호출 1회로 합쳐짐)"""
    try:
        return await cache.get(product_id)
    except ProductNotFoundException as e:
        raise HTTPException(status_code=404, detail=e.message)
    except TransportError as e:
        logger.warning(f"[API] product {product_id} lookup failed: {e.error_code}")
        raise HTTPException(status_code=502, detail=e.message)
