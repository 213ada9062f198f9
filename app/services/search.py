import logging

from app.models.review import SearchResponse
from app.services.store import ReviewStore

logger = logging.getLogger(__name__)


async def search_reviews(store: ReviewStore, product_name: str) -> SearchResponse:
    """
    Return every review whose product name equals ``product_name`` exactly.

    Matching is case-sensitive and nothing is trimmed, so an empty string only
    matches reviews stored with an empty product name. Results keep the
    store's order.

    Raises:
        StoreUnavailableError: If the store query fails.
    """
    results = await store.find_by_product_name(product_name)
    logger.info("Search for %r matched %d reviews", product_name, len(results))
    return SearchResponse(product_name=product_name, results=results, count=len(results))
