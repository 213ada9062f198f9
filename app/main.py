import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from google.cloud import firestore

from app.config import settings
from app.routers import api, auth, pages
from app.services.auth import FirebaseAuthClient
from app.services.store import FirestoreReviewStore, InMemoryReviewStore

VERSION = "1.0.0"

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the review store and auth clients once for the whole app."""
    logger.info("Starting up, review store backend: %s", settings.review_store_backend)
    firestore_client = None
    if settings.review_store_backend == "memory":
        app.state.review_store = InMemoryReviewStore()
    else:
        firestore_client = firestore.AsyncClient(project=settings.firebase_project_id or None)
        app.state.review_store = FirestoreReviewStore(
            firestore_client,
            collection=settings.reviews_collection,
            timeout=settings.store_timeout_seconds,
        )

    http = httpx.AsyncClient(timeout=settings.store_timeout_seconds)
    app.state.auth_client = FirebaseAuthClient(http, api_key=settings.firebase_api_key)
    logger.info("Startup complete.")
    try:
        yield
    finally:
        logger.info("Shutting down.")
        await http.aclose()
        if firestore_client is not None:
            firestore_client.close()


app = FastAPI(
    title="MustMe Reviews",
    description="人気商品ランキングと商品名によるレビュー検索。",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(pages.router)
app.include_router(api.router)
app.include_router(auth.router)


@app.get("/health", tags=["health"])
async def health_check():
    return {"status": "ok", "version": VERSION}
