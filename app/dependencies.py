from fastapi import Request

from app.services.auth import FirebaseAuthClient
from app.services.store import ReviewStore


def get_review_store(request: Request) -> ReviewStore:
    """Store built in the app lifespan; override in tests."""
    return request.app.state.review_store


def get_auth_client(request: Request) -> FirebaseAuthClient:
    return request.app.state.auth_client
