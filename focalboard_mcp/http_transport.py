"""
Streamable HTTP binding for the MCP server.

An ``initialize`` POST opens a session whose id comes back in the
``mcp-session-id`` header; later requests must send it back, and DELETE ends
the session. Requests arriving without a session id are answered here with a
JSON-RPC error instead of reaching the session manager.
"""

import contextlib
import json
import logging
from collections.abc import AsyncIterator

import uvicorn
from mcp.server import Server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

logger = logging.getLogger(__name__)

SESSION_HEADER = "mcp-session-id"
SESSION_ERROR_CODE = -32000


def session_error_response(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(
        {"jsonrpc": "2.0", "error": {"code": SESSION_ERROR_CODE, "message": message}, "id": None},
        status_code=status_code,
    )


def is_initialize_request(body: bytes) -> bool:
    """True for a JSON-RPC initialize call, alone or inside a batch."""
    try:
        payload = json.loads(body or b"null")
    except ValueError:
        return False
    messages = payload if isinstance(payload, list) else [payload]
    return any(isinstance(message, dict) and message.get("method") == "initialize" for message in messages)


def _replay_body(body: bytes, receive: Receive) -> Receive:
    """Hand an already-read body downstream, then fall through to the real channel."""
    replayed = False

    async def replay() -> dict:
        nonlocal replayed
        if not replayed:
            replayed = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


class SessionGate:
    """ASGI app in front of the session manager."""

    def __init__(self, manager: StreamableHTTPSessionManager):
        self.manager = manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        if request.headers.get(SESSION_HEADER):
            await self.manager.handle_request(scope, receive, send)
            return

        if request.method == "POST":
            body = await request.body()
            if is_initialize_request(body):
                await self.manager.handle_request(scope, _replay_body(body, receive), send)
                return

        response = session_error_response("Session not found. Send an initialize request first.")
        await response(scope, receive, send)


def create_http_app(server: Server, path: str = "/mcp") -> Starlette:
    """Build the Starlette app serving ``server`` at ``path``."""
    manager = StreamableHTTPSessionManager(app=server)

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        async with manager.run():
            yield

    return Starlette(
        routes=[Route(path, endpoint=SessionGate(manager), methods=["GET", "POST", "DELETE"])],
        lifespan=lifespan,
    )


async def run_http(server: Server, host: str, port: int, path: str) -> None:
    app = create_http_app(server, path)
    logger.info(f"MCP streamable HTTP server listening on http://{host}:{port}{path}")
    config = uvicorn.Config(app, host=host, port=port, log_level="warning")
    await uvicorn.Server(config).serve()
