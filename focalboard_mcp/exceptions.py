"""
focalboard-mcp exception hierarchy.

All custom exceptions live here to avoid circular imports.
"""


class FocalboardError(Exception):
    """Base class for every error surfaced through a tool result."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(FocalboardError):
    """Malformed or incomplete caller-supplied arguments. Raised before any network call."""


class RemoteApiError(FocalboardError):
    """Non-2xx response (or transport failure) from the Focalboard API."""

    def __init__(self, message: str, code: str | None = None, status_code: int | None = None):
        self.code = code
        self.status_code = status_code
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.code:
            parts.append(f"(code: {self.code})")
        if self.status_code:
            parts.append(f"[HTTP {self.status_code}]")
        return " ".join(parts)


class AmbiguousReferenceError(FocalboardError):
    """A name matched more than one board or block."""

    def __init__(self, message: str, candidates: list[str]):
        self.candidates = candidates
        super().__init__(message)


class NotFoundError(FocalboardError):
    """A name or ID matched nothing."""


class AuthError(FocalboardError):
    """Login did not yield a usable credential."""


class UnknownToolError(FocalboardError):
    """Dispatch received a tool name that is not part of the tool set."""
