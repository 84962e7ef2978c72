"""
Server configuration loaded once from the environment.

Command-line flags in mcp_server.main() override individual values; after
startup the Settings object is never mutated.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .auth import AuthMode
from .exceptions import ValidationError

TRANSPORTS = ("stdio", "http")


def _env_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{key} must be an integer, got {raw!r}") from None


def _env_float(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValidationError(f"{key} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    base_url: str = "http://localhost:8000"
    api_prefix: str = "/api/v2"
    token: str = ""
    csrf_token: str | None = None
    requested_with: str | None = "XMLHttpRequest"
    team_id: str = "0"
    auth_mode: AuthMode = AuthMode.AUTO
    password: str | None = None
    login_id: str | None = None
    username: str | None = None
    timeout: float = 30.0
    transport: str = "stdio"
    http_host: str = "127.0.0.1"
    http_port: int = 3000
    http_path: str = "/mcp"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from FOCALBOARD_* and MCP_* environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            base_url=env.get("FOCALBOARD_URL") or cls.base_url,
            api_prefix=env.get("FOCALBOARD_API_PREFIX") or cls.api_prefix,
            token=env.get("FOCALBOARD_TOKEN", ""),
            csrf_token=env.get("FOCALBOARD_CSRF_TOKEN") or None,
            requested_with=env.get("FOCALBOARD_REQUESTED_WITH") or cls.requested_with,
            team_id=env.get("FOCALBOARD_TEAM_ID") or cls.team_id,
            auth_mode=AuthMode.parse(env.get("FOCALBOARD_AUTH_MODE")),
            password=env.get("FOCALBOARD_PASSWORD") or None,
            login_id=env.get("FOCALBOARD_LOGIN_ID") or None,
            username=env.get("FOCALBOARD_USERNAME") or None,
            timeout=_env_float(env, "FOCALBOARD_TIMEOUT", cls.timeout),
            transport=(env.get("MCP_TRANSPORT") or cls.transport).lower(),
            http_host=env.get("MCP_HTTP_HOST") or cls.http_host,
            http_port=_env_int(env, "MCP_HTTP_PORT", cls.http_port),
            http_path=env.get("MCP_HTTP_PATH") or cls.http_path,
        )

    @property
    def has_startup_credentials(self) -> bool:
        return bool(self.password)

    def validate(self) -> "Settings":
        """
        Check cross-field rules that must hold before the server starts.

        Raises:
            ValidationError: On an unusable combination of values
        """
        if self.password and not (self.login_id or self.username):
            raise ValidationError(
                "FOCALBOARD_PASSWORD is set but neither FOCALBOARD_LOGIN_ID nor FOCALBOARD_USERNAME is set"
            )
        if self.transport not in TRANSPORTS:
            raise ValidationError(f"MCP_TRANSPORT must be one of {', '.join(TRANSPORTS)}, got {self.transport!r}")
        if not self.http_path.startswith("/"):
            raise ValidationError(f"MCP_HTTP_PATH must start with '/', got {self.http_path!r}")
        return self
