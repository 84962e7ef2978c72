"""Shared fixtures: a FocalboardClient wired to an in-memory fake server."""

import json
from collections.abc import Callable

import httpx
import pytest
import pytest_asyncio

from focalboard_mcp.client import FocalboardClient

BOARD_ID = "bxk3m9qa7rtyd1f5wz8n2pcl4ha"
CARD_ID = "cq9w8e7r6t5y4u3i2o1p0asdfgh"
UUID_ID = "3f2b8c1e-9a4d-4e6f-8b7a-1c2d3e4f5a6b"


class FakeFocalboard:
    """Routes requests to registered handlers and records every call."""

    def __init__(self):
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.calls: list[httpx.Request] = []

    def on(self, method: str, path: str, response=None, status: int = 200, handler=None):
        if handler is None:

            def handler(request, response=response, status=status):
                return httpx.Response(status, json=response)

        self.routes[(method, path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": "not found", "errorCode": 404})
        return handler(request)

    def paths(self, method: str | None = None) -> list[str]:
        return [r.url.path for r in self.calls if method is None or r.method == method]

    def body(self, index: int = -1):
        return json.loads(self.calls[index].content)


def make_board(board_id: str = BOARD_ID, title: str = "Test Board", **overrides) -> dict:
    board = {
        "id": board_id,
        "teamId": "0",
        "title": title,
        "type": "O",
        "properties": {},
        "cardProperties": [],
        "createAt": 1700000000000,
        "updateAt": 1700000000000,
        "deleteAt": 0,
    }
    board.update(overrides)
    return board


def make_block(block_id: str, title: str = "", block_type: str = "text", **overrides) -> dict:
    block = {"id": block_id, "boardId": BOARD_ID, "type": block_type, "title": title, "fields": {}}
    block.update(overrides)
    return block


@pytest.fixture
def fake():
    return FakeFocalboard()


@pytest_asyncio.fixture
async def client(fake):
    client = FocalboardClient(
        base_url="http://focalboard.test",
        token="tok",
        requested_with="XMLHttpRequest",
        transport=httpx.MockTransport(fake),
    )
    yield client
    await client.aclose()
