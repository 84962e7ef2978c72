"""
Focalboard MCP - MCP tool server for Focalboard boards, blocks and cards.
"""

from .auth import AuthMode, AuthSession, LogoutResult, infer_auth_mode
from .client import FocalboardClient, merge_properties, merge_property_templates
from .config import Settings
from .exceptions import (
    AmbiguousReferenceError,
    AuthError,
    FocalboardError,
    NotFoundError,
    RemoteApiError,
    UnknownToolError,
    ValidationError,
)
from .logging_config import configure_logging
from .tool_executor import ToolExecutor
from .tool_schemas import TOOLS, ToolName

__all__ = [
    "FocalboardClient",
    "AuthMode",
    "AuthSession",
    "LogoutResult",
    "infer_auth_mode",
    "merge_properties",
    "merge_property_templates",
    "Settings",
    "FocalboardError",
    "ValidationError",
    "RemoteApiError",
    "AmbiguousReferenceError",
    "NotFoundError",
    "AuthError",
    "UnknownToolError",
    "TOOLS",
    "ToolName",
    "ToolExecutor",
    "configure_logging",
]
__version__ = "1.0.0"
