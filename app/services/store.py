import logging
from typing import Any, Protocol

from google.api_core import exceptions as google_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from app.models.review import Review

logger = logging.getLogger(__name__)

# Firestore field the equality search is keyed on
PRODUCT_NAME_FIELD = "ProductName"


class StoreUnavailableError(Exception):
    """The review store could not answer a query."""


class ReviewStore(Protocol):
    async def list_reviews(self) -> list[Review]: ...

    async def find_by_product_name(self, product_name: str) -> list[Review]: ...


class FirestoreReviewStore:
    """Read-only access to the reviews collection in Firestore."""

    def __init__(
        self,
        client: firestore.AsyncClient,
        collection: str = "reviews",
        timeout: float | None = None,
    ):
        self._client = client
        self._collection_name = collection
        self._timeout = timeout

    def _collection(self):
        return self._client.collection(self._collection_name)

    async def _stream(self, query, description: str) -> list[Review]:
        try:
            reviews = [
                Review.from_document(doc.id, doc.to_dict() or {})
                async for doc in query.stream(timeout=self._timeout)
            ]
        except (google_exceptions.GoogleAPICallError, google_exceptions.RetryError) as exc:
            logger.error("Firestore query failed (%s): %s", description, exc)
            raise StoreUnavailableError(f"Firestore query failed: {exc}") from exc

        logger.info("Fetched %d reviews (%s)", len(reviews), description)
        return reviews

    async def list_reviews(self) -> list[Review]:
        return await self._stream(self._collection(), "full scan")

    async def find_by_product_name(self, product_name: str) -> list[Review]:
        query = self._collection().where(
            filter=FieldFilter(PRODUCT_NAME_FIELD, "==", product_name)
        )
        return await self._stream(query, f"{PRODUCT_NAME_FIELD} == {product_name!r}")


class InMemoryReviewStore:
    """Dict-backed store with the same query semantics as Firestore.

    Used for local development and as a drop-in substitute in tests.
    """

    def __init__(self, documents: list[dict[str, Any]] | None = None):
        self._documents: list[tuple[str, dict[str, Any]]] = []
        for doc in documents or []:
            self.add(doc)

    def add(self, data: dict[str, Any]) -> str:
        doc_id = f"review_{len(self._documents) + 1}"
        self._documents.append((doc_id, dict(data)))
        return doc_id

    async def list_reviews(self) -> list[Review]:
        return [Review.from_document(doc_id, data) for doc_id, data in self._documents]

    async def find_by_product_name(self, product_name: str) -> list[Review]:
        # Firestore equality only looks at the exact field, no aliases
        return [
            Review.from_document(doc_id, data)
            for doc_id, data in self._documents
            if data.get(PRODUCT_NAME_FIELD) == product_name
        ]
