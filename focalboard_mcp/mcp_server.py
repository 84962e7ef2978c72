import argparse
import asyncio
import contextlib
import dataclasses
import json
import logging
import signal
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, TextContent, Tool

from .auth import AuthMode
from .client import FocalboardClient
from .config import TRANSPORTS, Settings
from .exceptions import FocalboardError, ValidationError
from .http_transport import run_http
from .logging_config import configure_logging
from .tool_executor import ToolExecutor
from .tool_schemas import TOOLS

logger = logging.getLogger(__name__)

SERVER_NAME = "focalboard-mcp"


def _text_result(text: str, is_error: bool = False) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


class FocalboardMCPServer:
    def __init__(self, client: FocalboardClient):
        self.client = client
        self.executor = ToolExecutor(client)
        self.server = Server(SERVER_NAME)
        self._setup_handlers()

    def _setup_handlers(self):
        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            return self.list_tools()

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
            return await self.call_tool(name, arguments)

    def list_tools(self) -> list[Tool]:
        return [Tool(name=t["name"], description=t["description"], inputSchema=t["input_schema"]) for t in TOOLS]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        """Run a tool; every failure comes back as an isError result, never as an exception."""
        try:
            result = await self.executor.execute(name, arguments)
        except FocalboardError as e:
            logger.warning(f"Tool {name} failed: {e}")
            return _text_result(f"Error: {e}", is_error=True)
        except Exception as e:
            logger.exception(f"Unexpected error in tool {name}")
            return _text_result(f"Error: Unexpected error: {e}", is_error=True)
        return _text_result(json.dumps(result, indent=2, ensure_ascii=False))

    async def run(self):
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(read_stream, write_stream, self.server.create_initialization_options())

    async def run_http(self, host: str, port: int, path: str):
        await run_http(self.server, host, port, path)


def create_client(settings: Settings) -> FocalboardClient:
    return FocalboardClient(
        base_url=settings.base_url,
        token=settings.token,
        api_prefix=settings.api_prefix,
        csrf_token=settings.csrf_token,
        requested_with=settings.requested_with,
        team_id=settings.team_id,
        timeout=settings.timeout,
    )


async def startup_login(client: FocalboardClient, settings: Settings) -> None:
    """Log in with configured credentials before any tool traffic is accepted."""
    if not settings.has_startup_credentials:
        return
    await client.login(
        settings.password,
        login_id=settings.login_id,
        username=settings.username,
        mode=settings.auth_mode,
    )


async def shutdown(client: FocalboardClient, settings: Settings) -> None:
    """Release the session obtained at startup and close the connection pool."""
    try:
        if settings.has_startup_credentials and client.session.is_authenticated:
            result = await client.logout(settings.auth_mode)
            # Only the local clear matters on the way out; a remote failure is ignored.
            if not result.remote_acknowledged:
                logger.info(f"Server did not acknowledge logout: {result.error}")
    finally:
        await client.aclose()


async def serve(settings: Settings) -> None:
    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    if task is not None:
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(signal.SIGTERM, task.cancel)

    client = create_client(settings)
    try:
        await startup_login(client, settings)
        server = FocalboardMCPServer(client)
        if settings.transport == "http":
            await server.run_http(settings.http_host, settings.http_port, settings.http_path)
        else:
            await server.run()
    finally:
        await shutdown(client, settings)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Focalboard MCP Server")
    parser.add_argument("--url", help="Focalboard server URL (or set FOCALBOARD_URL env var)")
    parser.add_argument("--api-prefix", help="API path prefix (or set FOCALBOARD_API_PREFIX env var)")
    parser.add_argument("--token", help="Session token (or set FOCALBOARD_TOKEN env var)")
    parser.add_argument("--team-id", help="Default team ID (or set FOCALBOARD_TEAM_ID env var)")
    parser.add_argument(
        "--auth-mode",
        choices=[m.value for m in AuthMode],
        help="Login protocol (or set FOCALBOARD_AUTH_MODE env var)",
    )
    parser.add_argument("--transport", choices=TRANSPORTS, help="stdio or http (or set MCP_TRANSPORT env var)")
    parser.add_argument("--host", help="HTTP bind host (or set MCP_HTTP_HOST env var)")
    parser.add_argument("--port", type=int, help="HTTP port (or set MCP_HTTP_PORT env var)")
    parser.add_argument("--path", help="HTTP endpoint path (or set MCP_HTTP_PATH env var)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Environment settings with CLI args taking precedence."""
    settings = Settings.from_env()
    overrides = {
        "base_url": args.url,
        "api_prefix": args.api_prefix,
        "token": args.token,
        "team_id": args.team_id,
        "auth_mode": AuthMode(args.auth_mode) if args.auth_mode else None,
        "transport": args.transport,
        "http_host": args.host,
        "http_port": args.port,
        "http_path": args.path,
    }
    return dataclasses.replace(settings, **{k: v for k, v in overrides.items() if v is not None}).validate()


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = settings_from_args(args)
    except ValidationError as e:
        parser.error(str(e))

    try:
        asyncio.run(serve(settings))
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    except FocalboardError as e:
        parser.exit(1, f"{parser.prog}: startup failed: {e}\n")


if __name__ == "__main__":
    main()
