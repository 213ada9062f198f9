import logging
from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from app.config import settings
from app.dependencies import get_review_store
from app.services.ranking import rank_products
from app.services.search import search_reviews
from app.services.store import ReviewStore
from app.services.view_state import ViewStateHolder, ViewStatus, load_view

logger = logging.getLogger(__name__)
router = APIRouter(tags=["pages"])

templates = Jinja2Templates(directory=Path(__file__).parent.parent / "templates")


def _status_code(holder: ViewStateHolder) -> int:
    return 503 if holder.status is ViewStatus.FAILED else 200


def _dismissed_response(holder: ViewStateHolder) -> Response:
    logger.info("Client left before view '%s' loaded; nothing rendered", holder.view)
    return Response(status_code=204)


@router.get("/", include_in_schema=False)
async def index():
    return RedirectResponse(url="/ranking")


@router.get("/ranking")
async def ranking_page(
    request: Request,
    q: str | None = None,
    store: ReviewStore = Depends(get_review_store),
):
    """Popular products ranked by review count, optionally filtered by name."""

    async def load():
        return rank_products(await store.list_reviews(), name_contains=q)

    holder = await load_view(
        ViewStateHolder("ranking"),
        load,
        timeout=settings.store_timeout_seconds,
        is_dismissed=request.is_disconnected,
    )
    if holder.dismissed:
        return _dismissed_response(holder)
    return templates.TemplateResponse(
        request,
        "ranking.html",
        {"state": holder, "active": "ranking", "query": q or ""},
        status_code=_status_code(holder),
    )


@router.get("/search")
async def search_page(
    request: Request,
    product_name: str | None = None,
    store: ReviewStore = Depends(get_review_store),
):
    """Search form; runs the search once ``product_name`` is submitted."""
    context = {"active": "search", "product_name": product_name or "", "state": None}
    if product_name is None:
        return templates.TemplateResponse(request, "search.html", context)

    holder = await load_view(
        ViewStateHolder("search"),
        lambda: search_reviews(store, product_name),
        timeout=settings.store_timeout_seconds,
        is_dismissed=request.is_disconnected,
    )
    if holder.dismissed:
        return _dismissed_response(holder)
    context["state"] = holder
    return templates.TemplateResponse(
        request, "search.html", context, status_code=_status_code(holder)
    )
