import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_review_store
from app.main import app
from app.services.store import InMemoryReviewStore


@pytest.fixture
def sample_documents():
    return [
        {"ProductName": "Widget", "ReviewText": "great"},
        {"ProductName": "Gadget", "ReviewText": "ok"},
        {"ProductName": "Widget", "ReviewText": "works fine"},
        {"ProductName": "widget", "ReviewText": "lowercase variant"},
    ]


@pytest.fixture
def store(sample_documents):
    return InMemoryReviewStore(sample_documents)


@pytest.fixture
def client(store):
    app.dependency_overrides[get_review_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()

