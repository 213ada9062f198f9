import logging

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import get_auth_client
from app.models.auth import AuthUser, Credentials
from app.services.auth import AuthError, FirebaseAuthClient

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


def _to_http_error(exc: AuthError) -> HTTPException:
    status_code = 502 if exc.provider_unavailable else 400
    return HTTPException(status_code=status_code, detail=exc.message)


@router.post("/signup", response_model=AuthUser)
async def signup(credentials: Credentials, client: FirebaseAuthClient = Depends(get_auth_client)):
    """Create an email/password account."""
    try:
        return await client.create_account(credentials.email, credentials.password)
    except AuthError as exc:
        raise _to_http_error(exc) from exc


@router.post("/signin", response_model=AuthUser)
async def signin(credentials: Credentials, client: FirebaseAuthClient = Depends(get_auth_client)):
    """Sign in with email and password."""
    try:
        return await client.sign_in(credentials.email, credentials.password)
    except AuthError as exc:
        raise _to_http_error(exc) from exc
