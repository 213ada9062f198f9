import logging
from collections.abc import Callable

import httpx

from app.models.auth import AuthUser

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"

# Firebase Auth REST error codes -> user-facing messages
ERROR_MESSAGES = {
    "EMAIL_NOT_FOUND": "このメールアドレスに該当するアカウントが見つかりません。",
    "INVALID_PASSWORD": "パスワードが間違っています。もう一度お試しください。",
    "INVALID_LOGIN_CREDENTIALS": "メールアドレスまたはパスワードが間違っています。",
    "EMAIL_EXISTS": "このメールアドレスは既に使用されています。",
    "WEAK_PASSWORD": "パスワードは6文字以上で入力してください。",
    "INVALID_EMAIL": "有効なメールアドレスを入力してください。",
    "USER_DISABLED": "このアカウントは無効化されています。",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "試行回数が多すぎます。しばらくしてからもう一度お試しください。",
    "NETWORK_REQUEST_FAILED": "ネットワークエラーです。接続を確認してください。",
}
DEFAULT_ERROR_MESSAGE = "予期しないエラーが発生しました。もう一度お試しください。"

# Codes that mean the identity service itself failed, not the credentials
UPSTREAM_FAILURE_CODES = {"NETWORK_REQUEST_FAILED", "INVALID_RESPONSE"}

AuthStateListener = Callable[[AuthUser | None], None]


class AuthError(Exception):
    def __init__(self, code: str, status_code: int | None = None):
        self.code = code
        self.status_code = status_code  # HTTP status from the provider, if any
        self.message = ERROR_MESSAGES.get(code, DEFAULT_ERROR_MESSAGE)
        super().__init__(f"{code}: {self.message}")

    @property
    def provider_unavailable(self) -> bool:
        if self.code in UPSTREAM_FAILURE_CODES:
            return True
        return self.status_code is not None and self.status_code >= 500


def _error_code(response: httpx.Response) -> str:
    """Pull the provider code out of an error body, e.g. 'WEAK_PASSWORD : ...'."""
    try:
        raw = response.json()["error"]["message"]
        return raw.split(":")[0].strip()
    except (ValueError, KeyError, TypeError, AttributeError):
        return f"HTTP_{response.status_code}"


class FirebaseAuthClient:
    """Email/password accounts through the Identity Toolkit REST API."""

    def __init__(self, http: httpx.AsyncClient, api_key: str):
        self._http = http
        self._api_key = api_key

    async def _call(self, endpoint: str, email: str, password: str) -> AuthUser:
        url = f"{IDENTITY_TOOLKIT_URL}/accounts:{endpoint}"
        payload = {"email": email, "password": password, "returnSecureToken": True}
        try:
            response = await self._http.post(url, params={"key": self._api_key}, json=payload)
        except httpx.HTTPError as exc:
            logger.error("Identity Toolkit request failed (%s): %s", endpoint, exc)
            raise AuthError("NETWORK_REQUEST_FAILED") from exc

        if response.is_error:
            code = _error_code(response)
            logger.warning(
                "Identity Toolkit rejected %s for %s: %s (HTTP %d)",
                endpoint,
                email,
                code,
                response.status_code,
            )
            raise AuthError(code, status_code=response.status_code)

        try:
            data = response.json()
            return AuthUser(
                uid=data["localId"],
                email=data.get("email"),
                id_token=data["idToken"],
                refresh_token=data["refreshToken"],
                expires_in=int(data.get("expiresIn", 3600)),
            )
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.error("Unexpected Identity Toolkit response for %s: %s", endpoint, exc)
            raise AuthError("INVALID_RESPONSE", status_code=response.status_code) from exc

    async def create_account(self, email: str, password: str) -> AuthUser:
        user = await self._call("signUp", email, password)
        logger.info("Created account uid=%s", user.uid)
        return user

    async def sign_in(self, email: str, password: str) -> AuthUser:
        user = await self._call("signInWithPassword", email, password)
        logger.info("Signed in uid=%s", user.uid)
        return user


class AuthSession:
    """Tracks the signed-in user for a single consumer and notifies observers."""

    def __init__(self, client: FirebaseAuthClient):
        self._client = client
        self._listeners: list[AuthStateListener] = []
        self.current_user: AuthUser | None = None

    def _set_user(self, user: AuthUser | None) -> None:
        self.current_user = user
        for listener in list(self._listeners):
            listener(user)

    async def sign_up(self, email: str, password: str) -> AuthUser:
        user = await self._client.create_account(email, password)
        self._set_user(user)
        return user

    async def sign_in(self, email: str, password: str) -> AuthUser:
        user = await self._client.sign_in(email, password)
        self._set_user(user)
        return user

    def sign_out(self) -> None:
        if self.current_user is not None:
            logger.info("Signed out uid=%s", self.current_user.uid)
        self._set_user(None)

    def on_auth_state_changed(self, listener: AuthStateListener) -> Callable[[], None]:
        """Register ``listener``; it is called now and on every change."""
        self._listeners.append(listener)
        listener(self.current_user)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
