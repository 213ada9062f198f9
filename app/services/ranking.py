import logging
from collections import Counter
from collections.abc import Iterable

from app.models.review import RankingEntry, RankingResponse, Review

logger = logging.getLogger(__name__)


def rank_products(
    reviews: Iterable[Review],
    limit: int | None = None,
    name_contains: str | None = None,
) -> RankingResponse:
    """
    Count reviews per product name and order products by count, descending.

    Reviews without a product name are left out of the ranking and reported
    in ``unlabeled``. Products with equal counts keep the order in which they
    first appear in ``reviews``.

    Args:
        reviews: Review snapshot, in the order the store returned it.
        limit: Keep only the top ``limit`` entries (after filtering).
        name_contains: Keep only products whose name contains this text,
            ignoring case. Entries keep their rank in the full ranking.

    Returns:
        RankingResponse with 1-based ranks.
    """
    counts: Counter[str] = Counter()
    total = 0
    unlabeled = 0

    for review in reviews:
        total += 1
        if review.product_name is None:
            unlabeled += 1
            continue
        counts[review.product_name] += 1

    if unlabeled:
        logger.warning("Skipped %d reviews without a product name", unlabeled)

    # sorted() is stable and Counter keeps insertion order
    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    entries = [
        RankingEntry(rank=position, product_name=name, count=count)
        for position, (name, count) in enumerate(ordered, start=1)
    ]

    if name_contains:
        needle = name_contains.lower()
        entries = [e for e in entries if needle in e.product_name.lower()]
    if limit is not None:
        entries = entries[:limit]

    return RankingResponse(entries=entries, total_reviews=total, unlabeled=unlabeled)
