import asyncio
import json

import httpx
import pytest

from app.services.auth import (
    DEFAULT_ERROR_MESSAGE,
    AuthError,
    AuthSession,
    FirebaseAuthClient,
)

SIGNED_IN = {
    "localId": "uid-1",
    "email": "taro@example.com",
    "idToken": "id-token",
    "refreshToken": "refresh-token",
    "expiresIn": "3600",
}


def _client(handler):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return FirebaseAuthClient(http, api_key="test-key")


def _error(message, status=400):
    return httpx.Response(status, json={"error": {"code": status, "message": message}})


class TestFirebaseAuthClient:
    def test_create_account_posts_to_sign_up(self):
        seen = {}

        def handler(request):
            seen["url"] = request.url
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=SIGNED_IN)

        user = asyncio.run(_client(handler).create_account("taro@example.com", "secret1"))

        assert seen["url"].path == "/v1/accounts:signUp"
        assert seen["url"].params["key"] == "test-key"
        assert seen["body"] == {
            "email": "taro@example.com",
            "password": "secret1",
            "returnSecureToken": True,
        }
        assert user.uid == "uid-1"
        assert user.expires_in == 3600

    def test_sign_in_uses_password_endpoint(self):
        def handler(request):
            assert request.url.path == "/v1/accounts:signInWithPassword"
            return httpx.Response(200, json=SIGNED_IN)

        user = asyncio.run(_client(handler).sign_in("taro@example.com", "secret1"))
        assert user.id_token == "id-token"

    def test_weak_password_message(self):
        def handler(request):
            return _error("WEAK_PASSWORD : Password should be at least 6 characters")

        with pytest.raises(AuthError) as excinfo:
            asyncio.run(_client(handler).create_account("taro@example.com", "123"))

        assert excinfo.value.code == "WEAK_PASSWORD"
        assert excinfo.value.message == "パスワードは6文字以上で入力してください。"

    def test_unknown_code_gets_default_message(self):
        with pytest.raises(AuthError) as excinfo:
            asyncio.run(_client(lambda r: _error("SOMETHING_NEW")).sign_in("a@b.c", "x"))
        assert excinfo.value.message == DEFAULT_ERROR_MESSAGE

    def test_network_failure(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(AuthError) as excinfo:
            asyncio.run(_client(handler).sign_in("a@b.c", "x"))
        assert excinfo.value.code == "NETWORK_REQUEST_FAILED"


    def test_server_error_with_json_body_is_provider_failure(self):
        def handler(request):
            return _error("UNAVAILABLE", status=503)

        with pytest.raises(AuthError) as excinfo:
            asyncio.run(_client(handler).sign_in("a@b.c", "x"))

        assert excinfo.value.code == "UNAVAILABLE"
        assert excinfo.value.status_code == 503
        assert excinfo.value.provider_unavailable

    def test_credential_error_is_not_provider_failure(self):
        with pytest.raises(AuthError) as excinfo:
            asyncio.run(_client(lambda r: _error("INVALID_PASSWORD")).sign_in("a@b.c", "x"))
        assert not excinfo.value.provider_unavailable

    def test_non_string_error_message(self):
        def handler(request):
            return httpx.Response(400, json={"error": {"message": {"nested": True}}})

        with pytest.raises(AuthError) as excinfo:
            asyncio.run(_client(handler).sign_in("a@b.c", "x"))
        assert excinfo.value.code == "HTTP_400"
        assert excinfo.value.message == DEFAULT_ERROR_MESSAGE

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, json={"email": "a@b.c"}),
            httpx.Response(200, text="<html>not json</html>"),
            httpx.Response(200, json=["unexpected"]),
        ],
    )
    def test_malformed_success_body(self, response):
        with pytest.raises(AuthError) as excinfo:
            asyncio.run(_client(lambda r: response).sign_in("a@b.c", "x"))
        assert excinfo.value.code == "INVALID_RESPONSE"
        assert excinfo.value.provider_unavailable


class TestAuthSession:
    def test_observer_sees_sign_in_and_sign_out(self):
        session = AuthSession(_client(lambda r: httpx.Response(200, json=SIGNED_IN)))
        events = []
        session.on_auth_state_changed(lambda user: events.append(user and user.uid))

        asyncio.run(session.sign_in("taro@example.com", "secret1"))
        session.sign_out()

        assert events == [None, "uid-1", None]
        assert session.current_user is None

    def test_unsubscribe_stops_notifications(self):
        session = AuthSession(_client(lambda r: httpx.Response(200, json=SIGNED_IN)))
        events = []
        unsubscribe = session.on_auth_state_changed(events.append)
        unsubscribe()

        asyncio.run(session.sign_up("taro@example.com", "secret1"))

        assert events == [None]
        assert session.current_user.uid == "uid-1"

    def test_failed_sign_in_keeps_user_signed_out(self):
        session = AuthSession(_client(lambda r: _error("INVALID_PASSWORD")))
        with pytest.raises(AuthError):
            asyncio.run(session.sign_in("taro@example.com", "wrong"))
        assert session.current_user is None
