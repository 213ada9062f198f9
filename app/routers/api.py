import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from app.dependencies import get_review_store
from app.models.review import RankingResponse, SearchResponse
from app.services.ranking import rank_products
from app.services.search import search_reviews
from app.services.store import ReviewStore, StoreUnavailableError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["api"])

UNAVAILABLE_DETAIL = "レビューデータを取得できませんでした。しばらくしてから再試行してください。"


@router.get("/ranking", response_model=RankingResponse)
async def ranking(
    limit: int | None = Query(default=None, ge=1),
    q: str | None = Query(default=None, description="Case-insensitive product name filter"),
    store: ReviewStore = Depends(get_review_store),
):
    """Products ordered by number of reviews, most reviewed first."""
    try:
        reviews = await store.list_reviews()
    except StoreUnavailableError as exc:
        logger.error("Ranking unavailable: %s", exc)
        raise HTTPException(status_code=503, detail=UNAVAILABLE_DETAIL) from exc
    return rank_products(reviews, limit=limit, name_contains=q)


@router.get("/reviews", response_model=SearchResponse)
async def reviews_by_product(
    product_name: str = Query(...),
    store: ReviewStore = Depends(get_review_store),
):
    """Reviews whose product name equals ``product_name`` exactly."""
    try:
        return await search_reviews(store, product_name)
    except StoreUnavailableError as exc:
        logger.error("Search unavailable for %r: %s", product_name, exc)
        raise HTTPException(status_code=503, detail=UNAVAILABLE_DETAIL) from exc
