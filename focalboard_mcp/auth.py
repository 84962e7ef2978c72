"""
Login/logout against the two Focalboard deployment flavours.

Standalone Focalboard answers ``POST {prefix}/login`` with a JSON body holding
the session token. Focalboard embedded in Mattermost logs in through the host's
``/api/v4/users/login`` and returns the token in a response header, with the
CSRF token in the ``MMCSRF`` cookie.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

import httpx

from .exceptions import AuthError, ValidationError

logger = logging.getLogger(__name__)

HOSTED_PREFIX_MARKER = "/plugins/focalboard/"
MATTERMOST_LOGIN_PATH = "/api/v4/users/login"
MATTERMOST_LOGOUT_PATH = "/api/v4/users/logout"
CSRF_COOKIE_NAME = "MMCSRF"
TOKEN_HEADER_NAMES = ("Token", "token")

# A comma starts a new cookie only when followed by "name=", which keeps
# "Expires=Wed, 21 Oct 2026 ..." intact.
_COOKIE_SPLIT = re.compile(r",\s*(?=[^;,\s]+=)")


class AuthMode(str, Enum):
    AUTO = "auto"
    FOCALBOARD = "focalboard"
    MATTERMOST = "mattermost"

    @classmethod
    def parse(cls, value: str | AuthMode | None) -> AuthMode:
        if value is None or value == "":
            return cls.AUTO
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValidationError(f"Unknown auth mode {value!r} (expected one of: {allowed})") from None


def infer_auth_mode(api_prefix: str) -> AuthMode:
    """Mattermost-hosted deployments serve the API under /plugins/focalboard/."""
    return AuthMode.MATTERMOST if HOSTED_PREFIX_MARKER in api_prefix else AuthMode.FOCALBOARD


def resolve_auth_mode(mode: str | AuthMode | None, api_prefix: str) -> AuthMode:
    """An explicit mode wins over inference from the prefix."""
    parsed = AuthMode.parse(mode)
    if parsed is AuthMode.AUTO:
        return infer_auth_mode(api_prefix)
    return parsed


def split_set_cookie(value: str) -> list[str]:
    """Split a comma-folded Set-Cookie header into individual cookies."""
    return [part.strip() for part in _COOKIE_SPLIT.split(value) if part.strip()]


def set_cookie_headers(headers: httpx.Headers) -> list[str]:
    cookies = []
    for raw in headers.get_list("set-cookie"):
        cookies.extend(split_set_cookie(raw))
    return cookies


def find_cookie(set_cookies: list[str], name: str) -> str | None:
    """Return the value of the named cookie from Set-Cookie strings."""
    prefix = f"{name}="
    for cookie in set_cookies:
        if cookie.startswith(prefix):
            return cookie[len(prefix) :].split(";", 1)[0]
    return None


@dataclass
class AuthSession:
    """
    Credentials attached to every outgoing request.

    One instance is owned by one FocalboardClient. Login replaces its contents and
    logout clears them; neither is guarded by a lock, so a request racing a
    login may carry either the old or the new credential.
    """

    token: str = ""
    csrf_token: str | None = None
    mode: AuthMode | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def replace_with(self, other: AuthSession) -> None:
        self.token = other.token
        self.csrf_token = other.csrf_token
        self.mode = other.mode

    def clear(self) -> None:
        self.token = ""
        self.csrf_token = None
        self.mode = None

    def headers(self, requested_with: str | None = None) -> dict[str, str]:
        """Authorization/CSRF/requested-with headers for the held credential."""
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if self.csrf_token:
            headers["X-CSRF-Token"] = self.csrf_token
        if requested_with:
            headers["X-Requested-With"] = requested_with
        return headers


@dataclass(frozen=True)
class LogoutResult:
    """Outcome of a logout: local clearing always happens, the remote call may fail."""

    local_cleared: bool
    remote_acknowledged: bool
    error: str | None = None


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return response.reason_phrase or f"HTTP {response.status_code}"


class Authenticator:
    """Performs login/logout requests over the client's HTTP connection pool."""

    def __init__(self, http: httpx.AsyncClient, api_prefix: str, requested_with: str | None = None):
        self.http = http
        self.api_prefix = api_prefix
        self.requested_with = requested_with

    def _base_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.requested_with:
            headers["X-Requested-With"] = self.requested_with
        return headers

    async def _post_login(self, path: str, body: dict) -> httpx.Response:
        try:
            response = await self.http.post(path, json=body, headers=self._base_headers())
        except httpx.TransportError as e:
            raise AuthError(f"Login request failed: {e}") from e
        if response.is_error:
            raise AuthError(f"Login failed: {_error_message(response)}")
        return response

    async def login(
        self,
        password: str,
        login_id: str | None = None,
        username: str | None = None,
        mode: str | AuthMode | None = AuthMode.AUTO,
    ) -> AuthSession:
        """
        Log in and return a fresh AuthSession.

        Args:
            password: Account password
            login_id: Mattermost login id (email or username); used as username in standalone mode
            username: Focalboard username; used as login id in Mattermost mode
            mode: auto, focalboard or mattermost

        Raises:
            ValidationError: If neither login_id nor username is given
            AuthError: If the server rejects the login or returns no token
        """
        resolved = resolve_auth_mode(mode, self.api_prefix)

        if resolved is AuthMode.MATTERMOST:
            identifier = login_id or username
            if not identifier:
                raise ValidationError("login requires loginId or username")
            response = await self._post_login(
                MATTERMOST_LOGIN_PATH,
                {"login_id": identifier, "password": password},
            )
            token = next((response.headers[h] for h in TOKEN_HEADER_NAMES if response.headers.get(h)), "")
            if not token:
                raise AuthError("Login succeeded but no Token header was returned")
            csrf_token = find_cookie(set_cookie_headers(response.headers), CSRF_COOKIE_NAME)
            logger.info(f"Logged in to Mattermost-hosted Focalboard as {identifier}")
            return AuthSession(token=token, csrf_token=csrf_token, mode=resolved)

        identifier = username or login_id
        if not identifier:
            raise ValidationError("login requires username or loginId")
        response = await self._post_login(
            f"{self.api_prefix}/login",
            {"type": "normal", "username": identifier, "password": password},
        )
        try:
            data = response.json()
        except ValueError:
            data = None
        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            raise AuthError("Login succeeded but the response had no token")
        logger.info(f"Logged in to Focalboard as {identifier}")
        return AuthSession(token=token, mode=resolved)

    async def logout(self, session: AuthSession, mode: str | AuthMode | None = None) -> LogoutResult:
        """
        Clear the session and tell the server about it.

        The session is always cleared. A network or server failure is reported in
        the result instead of being raised; callers decide whether it matters. An
        unknown mode skips the remote call but still clears the session.
        """
        try:
            resolved = resolve_auth_mode(mode or session.mode, self.api_prefix)
            headers = session.headers(self.requested_with)
            if resolved is AuthMode.MATTERMOST:
                path = MATTERMOST_LOGOUT_PATH
            else:
                path = f"{self.api_prefix}/logout"
                headers["Content-Type"] = "application/json"
            response = await self.http.post(path, headers=headers)
        except ValidationError as e:
            logger.warning(f"Logout not sent: {e.message}")
            return LogoutResult(local_cleared=True, remote_acknowledged=False, error=e.message)
        except httpx.HTTPError as e:
            logger.warning(f"Logout request failed: {e}")
            return LogoutResult(local_cleared=True, remote_acknowledged=False, error=str(e))
        finally:
            session.clear()

        if response.is_error:
            message = _error_message(response)
            logger.warning(f"Logout rejected by server: {message}")
            return LogoutResult(local_cleared=True, remote_acknowledged=False, error=message)
        return LogoutResult(local_cleared=True, remote_acknowledged=True)
