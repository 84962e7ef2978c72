"""
Focalboard API Client implementation.
"""

import logging
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .auth import Authenticator, AuthMode, AuthSession, LogoutResult
from .exceptions import AmbiguousReferenceError, NotFoundError, RemoteApiError, ValidationError
from .ids import looks_like_id, new_id, now_millis
from .models import (
    M,
    Block,
    BlockPatch,
    BlockPatchBatch,
    Board,
    BoardMember,
    BoardPatch,
    BoardsAndBlocks,
    Card,
    CardPatch,
    CreateBlock,
    CreateBoard,
    CreateCard,
    DeleteBoardsAndBlocks,
    PatchBoardsAndBlocks,
    User,
    parse,
    parse_list,
)

logger = logging.getLogger(__name__)

MAX_CARDS_PER_PAGE = 100
_IDEMPOTENT_METHODS = {"GET", "HEAD"}


def _is_retryable(exception: BaseException) -> bool:
    """Only connection-level failures of read requests are retried."""
    if not isinstance(exception, httpx.TransportError):
        return False
    try:
        return exception.request.method in _IDEMPOTENT_METHODS
    except RuntimeError:
        # request was never attached to the exception
        return False


def _log_retry(retry_state) -> None:
    """Log retry attempts."""
    logger.warning(
        f"Retrying request (attempt {retry_state.attempt_number}) after error: {retry_state.outcome.exception()}"
    )


def _record(model: type[M], data: Any, context: str) -> M:
    """Validate a response body; a mismatch is the server's fault, not the caller's."""
    try:
        return parse(model, data, context)
    except ValidationError as e:
        raise RemoteApiError(e.message, code="INVALID_RESPONSE") from e


def _records(model: type[M], data: Any, context: str) -> list[M]:
    try:
        return parse_list(model, data, context)
    except ValidationError as e:
        raise RemoteApiError(e.message, code="INVALID_RESPONSE") from e


def _api_error(response: httpx.Response) -> RemoteApiError:
    try:
        error_data = response.json()
    except ValueError:
        error_data = None
    if isinstance(error_data, dict) and error_data.get("error"):
        code = error_data.get("errorCode")
        return RemoteApiError(
            message=str(error_data["error"]),
            code=str(code) if code is not None else None,
            status_code=response.status_code,
        )
    return RemoteApiError(
        message=response.reason_phrase or "Unknown error",
        status_code=response.status_code,
    )


def merge_properties(
    existing: dict[str, Any] | None,
    updated: dict[str, Any] | None,
    deleted: list[str] | None,
) -> dict[str, Any]:
    """
    Overlay updated on existing, then drop deleted keys.

    Deletion runs after the overlay, so a key both updated and deleted ends up removed.
    """
    merged = {**(existing or {}), **(updated or {})}
    for key in deleted or []:
        merged.pop(key, None)
    return merged


def merge_property_templates(
    existing: list[dict[str, Any]] | None,
    updated: list[dict[str, Any]] | None,
    deleted: list[str] | None,
) -> list[dict[str, Any]]:
    """Same as merge_properties for the ordered cardProperties list, keyed by template id."""
    merged = list(existing or [])
    positions = {template["id"]: i for i, template in enumerate(merged)}
    for template in updated or []:
        if template["id"] in positions:
            merged[positions[template["id"]]] = template
        else:
            positions[template["id"]] = len(merged)
            merged.append(template)
    removed = set(deleted or [])
    return [template for template in merged if template["id"] not in removed]


def assign_block_ids(blocks: list[CreateBlock]) -> list[CreateBlock]:
    """Give id-less blocks a generated ID and stamp createAt/updateAt."""
    stamp = now_millis()
    return [
        block.model_copy(
            update={
                "id": block.id or new_id(),
                "create_at": block.create_at or stamp,
                "update_at": block.update_at or stamp,
            }
        )
        for block in blocks
    ]


def assign_board_ids(boards: list[CreateBoard]) -> list[CreateBoard]:
    stamp = now_millis()
    return [
        board.model_copy(
            update={
                "id": board.id or new_id(),
                "create_at": board.create_at or stamp,
                "update_at": board.update_at or stamp,
            }
        )
        for board in boards
    ]


class FocalboardClient:
    """
    Async Python client for the Focalboard REST API.

    The client owns one AuthSession. Login overwrites it and logout clears it;
    every request reads it at send time. There is no locking, so with
    concurrent callers the last login wins. Property merges in update_board and
    update_card are read-then-write without isolation: a concurrent external
    edit between the read and the write is lost.

    Example:
        >>> async with FocalboardClient(base_url="http://localhost:8000", token="...") as client:
        ...     board = await client.resolve_board("Roadmap")
        ...     cards = await client.list_cards(board.id)
    """

    def __init__(
        self,
        base_url: str,
        token: str = "",
        api_prefix: str = "/api/v2",
        csrf_token: str | None = None,
        requested_with: str | None = None,
        team_id: str = "0",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the Focalboard API client.

        Args:
            base_url: Server root (e.g., "http://localhost:8000")
            token: Initial session/bearer token (optional; login() can obtain one)
            api_prefix: API path prefix, "/api/v2" standalone or
                "/plugins/focalboard/api/v2" inside Mattermost
            csrf_token: Initial CSRF token (Mattermost only)
            requested_with: Value for the X-Requested-With header, if any
            team_id: Team used when a call does not name one
            timeout: Request timeout in seconds (default: 30.0)
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.api_prefix = "/" + api_prefix.strip("/") if api_prefix.strip("/") else ""
        self.requested_with = requested_with
        self.team_id = team_id
        self.timeout = timeout
        self.session = AuthSession(token=token, csrf_token=csrf_token)
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )
        self.auth = Authenticator(self._http, self.api_prefix, requested_with)

    async def __aenter__(self) -> "FocalboardClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP connection pool."""
        await self._http.aclose()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        retry=retry_if_exception(_is_retryable),
        before_sleep=_log_retry,
        reraise=True,
    )
    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        return await self._http.request(method, url, **kwargs)

    async def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make an API request under the configured prefix.

        Connection failures on GET are retried with exponential backoff; error
        responses are never retried.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            path: API path below the prefix (e.g., "/boards/abc")
            json: JSON body
            params: Query parameters

        Returns:
            Decoded JSON body, or None for an empty body

        Raises:
            RemoteApiError: If the API returns a non-2xx status or cannot be reached
        """
        url = f"{self.api_prefix}{path}"
        headers = self.session.headers(self.requested_with)
        logger.debug(f"{method} {url}")
        try:
            response = await self._send(method, url, json=json, params=params, headers=headers)
        except httpx.TransportError as e:
            raise RemoteApiError(f"Request failed: {e}", code="REQUEST_ERROR") from e

        if response.is_error:
            raise _api_error(response)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteApiError(
                message="Invalid JSON response",
                code="INVALID_RESPONSE",
                status_code=response.status_code,
            ) from e

    # =========================================================================
    # Authentication
    # =========================================================================

    async def login(
        self,
        password: str,
        login_id: str | None = None,
        username: str | None = None,
        mode: str | AuthMode | None = AuthMode.AUTO,
    ) -> AuthSession:
        """Log in and attach the new credentials to this client."""
        session = await self.auth.login(password, login_id=login_id, username=username, mode=mode)
        self.session.replace_with(session)
        return self.session

    async def logout(self, mode: str | AuthMode | None = None) -> LogoutResult:
        """Clear this client's credentials; the result says whether the server acknowledged."""
        return await self.auth.logout(self.session, mode)

    # =========================================================================
    # Board Methods
    # =========================================================================

    async def create_board(self, data: CreateBoard) -> Board:
        """
        Create a board.

        Args:
            data: Validated board fields; teamId and title are required

        Returns:
            The board as stored by the server, with its assigned id
        """
        result = await self._request("POST", "/boards", json=data.to_wire())
        return _record(Board, result, "board response")

    async def get_board(self, board_id: str) -> Board:
        """Get a board by ID, including its cardProperties schema."""
        result = await self._request("GET", f"/boards/{board_id}")
        return _record(Board, result, "board response")

    async def _send_board_patch(self, board_id: str, payload: dict[str, Any]) -> Board:
        result = await self._request("PATCH", f"/boards/{board_id}", json=payload)
        return _record(Board, result, "board response")

    async def update_board(self, board_id: str, patch: BoardPatch) -> Board:
        """
        Update a board, merging property changes into the current state.

        The server replaces ``properties`` and ``cardProperties`` wholesale even
        though the patch fields are named ``updated*``. To keep the update
        incremental, the current board is fetched, the caller's entries are
        overlaid, ``deleted*`` keys are removed, and the full result is sent.

        Args:
            board_id: The board to update
            patch: Fields to change

        Returns:
            Updated board
        """
        touches_properties = patch.updated_properties is not None or patch.deleted_properties is not None
        touches_templates = (
            patch.card_properties is not None
            or patch.updated_card_properties is not None
            or patch.deleted_card_properties is not None
        )
        if not (touches_properties or touches_templates):
            return await self._send_board_patch(board_id, patch.to_wire())

        current = await self.get_board(board_id)
        payload = patch.to_wire()
        if touches_properties:
            payload["updatedProperties"] = merge_properties(
                current.properties, patch.updated_properties, patch.deleted_properties
            )
            payload.pop("deletedProperties", None)
        if touches_templates:
            requested = (patch.card_properties or []) + (patch.updated_card_properties or [])
            # server-side entries keep fields and property types this client does not model
            payload["updatedCardProperties"] = merge_property_templates(
                [template.to_wire() for template in current.card_properties or []],
                [template.to_wire() for template in requested],
                patch.deleted_card_properties,
            )
            payload.pop("cardProperties", None)
            payload.pop("deletedCardProperties", None)
        return await self._send_board_patch(board_id, payload)

    async def delete_board(self, board_id: str) -> None:
        """Delete a board (it can be restored with undelete_board)."""
        await self._request("DELETE", f"/boards/{board_id}")

    async def undelete_board(self, board_id: str) -> None:
        """Restore a deleted board."""
        await self._request("POST", f"/boards/{board_id}/undelete")

    async def duplicate_board(self, board_id: str, as_template: bool = False) -> dict[str, list]:
        """
        Copy a board with all its blocks.

        Returns:
            Dict with 'boards' and 'blocks' lists of the created records
        """
        result = await self._request(
            "POST",
            f"/boards/{board_id}/duplicate",
            params={"asTemplate": as_template},
        )
        return self._boards_and_blocks(result)

    async def list_boards(self, team_id: str | None = None) -> list[Board]:
        """List boards of a team the user can see (default team if omitted)."""
        result = await self._request("GET", f"/teams/{team_id or self.team_id}/boards")
        return _records(Board, result or [], "board list response")

    async def search_boards(self, query: str, team_id: str | None = None) -> list[Board]:
        """Search boards by title within a team (default team if omitted)."""
        result = await self._request(
            "GET",
            f"/teams/{team_id or self.team_id}/boards/search",
            params={"q": query},
        )
        return _records(Board, result or [], "board search response")

    async def join_board(self, board_id: str) -> BoardMember:
        """Join an open board as the current user."""
        result = await self._request("POST", f"/boards/{board_id}/join")
        return _record(BoardMember, result, "board member response")

    async def leave_board(self, board_id: str) -> None:
        """Remove the current user's membership from a board."""
        await self._request("POST", f"/boards/{board_id}/leave")

    async def get_board_members(self, board_id: str) -> list[BoardMember]:
        result = await self._request("GET", f"/boards/{board_id}/members")
        return _records(BoardMember, result or [], "board members response")

    async def list_team_users(self, team_id: str | None = None) -> list[User]:
        result = await self._request("GET", f"/teams/{team_id or self.team_id}/users")
        return _records(User, result or [], "team users response")

    # =========================================================================
    # Name Resolution
    # =========================================================================

    async def resolve_board(self, identifier: str, team_id: str | None = None) -> Board:
        """
        Resolve a board name or ID to a board.

        ID-shaped input is fetched directly first. Otherwise, or if that fetch
        fails, the team's boards are searched by title: a single exact title
        match wins, then a single search hit.

        Raises:
            AmbiguousReferenceError: If several boards match and none exactly
            NotFoundError: If nothing matches
        """
        identifier = (identifier or "").strip()
        if not identifier:
            raise ValidationError("A board name or ID is required")

        if looks_like_id(identifier):
            try:
                return await self.get_board(identifier)
            except RemoteApiError as e:
                logger.debug(f"Direct fetch of board {identifier} failed ({e}), falling back to search")

        results = await self.search_boards(identifier, team_id)
        exact = [board for board in results if board.title == identifier]
        if len(exact) == 1:
            return exact[0]
        if len(results) == 1:
            return results[0]
        if len(results) > 1:
            titles = [board.title for board in results]
            listed = ", ".join(f'"{title}"' for title in titles)
            raise AmbiguousReferenceError(
                f'Multiple boards match "{identifier}": {listed}. Be more specific or use the board ID.',
                candidates=titles,
            )
        raise NotFoundError(f'No board found matching "{identifier}"')

    async def resolve_block(self, board_id: str, identifier: str) -> Block:
        """
        Resolve a block title or ID within a board.

        There is no reliable single-block fetch across deployments, so all of the
        board's blocks are listed and filtered locally.

        Raises:
            AmbiguousReferenceError: If several blocks share the title
            NotFoundError: If nothing matches
        """
        identifier = (identifier or "").strip()
        if not identifier:
            raise ValidationError("A block title or ID is required")

        blocks = await self.get_blocks(board_id)
        if looks_like_id(identifier):
            for block in blocks:
                if block.id == identifier:
                    return block

        matches = [block for block in blocks if block.title == identifier]
        if not matches:
            raise NotFoundError(f'No block found matching "{identifier}" in board {board_id}')
        if len(matches) > 1:
            candidates = [f"{block.title} ({block.id})" for block in matches]
            raise AmbiguousReferenceError(
                f'Multiple blocks titled "{identifier}": {", ".join(candidates)}. Use the block ID instead.',
                candidates=candidates,
            )
        return matches[0]

    # =========================================================================
    # Block Methods
    # =========================================================================

    async def create_blocks(
        self,
        board_id: str,
        blocks: list[CreateBlock],
        disable_notify: bool = False,
    ) -> list[Block]:
        """
        Create blocks in a board.

        Blocks without an id get a generated one so that parentId can refer to
        another block of the same batch; the server remaps the IDs consistently.

        Returns:
            Created blocks with their server-side IDs
        """
        payload = [block.to_wire() for block in assign_block_ids(blocks)]
        result = await self._request(
            "POST",
            f"/boards/{board_id}/blocks",
            json=payload,
            params={"disable_notify": disable_notify},
        )
        return _records(Block, result or [], "block list response")

    async def get_blocks(
        self,
        board_id: str,
        parent_id: str | None = None,
        block_type: str | None = None,
    ) -> list[Block]:
        """Get blocks of a board, optionally filtered by parent and type."""
        params = {}
        if parent_id:
            params["parent_id"] = parent_id
        if block_type:
            params["type"] = block_type
        result = await self._request("GET", f"/boards/{board_id}/blocks", params=params or None)
        return _records(Block, result or [], "block list response")

    async def update_block(
        self,
        board_id: str,
        block_id: str,
        patch: BlockPatch,
        disable_notify: bool = False,
    ) -> None:
        """Patch a block. updatedFields/deletedFields merge into the block's fields server-side."""
        await self._request(
            "PATCH",
            f"/boards/{board_id}/blocks/{block_id}",
            json=patch.to_wire(),
            params={"disable_notify": disable_notify},
        )

    async def patch_blocks(self, board_id: str, batch: BlockPatchBatch, disable_notify: bool = False) -> None:
        """Patch several blocks of one board in a single request."""
        if len(batch.block_ids) != len(batch.block_patches):
            raise ValidationError(
                f"blockIds and blockPatches must have the same length "
                f"({len(batch.block_ids)} != {len(batch.block_patches)})"
            )
        await self._request(
            "PATCH",
            f"/boards/{board_id}/blocks/",
            json=batch.to_wire(),
            params={"disable_notify": disable_notify},
        )

    async def delete_block(self, board_id: str, block_id: str, disable_notify: bool = False) -> None:
        await self._request(
            "DELETE",
            f"/boards/{board_id}/blocks/{block_id}",
            params={"disable_notify": disable_notify},
        )

    async def undelete_block(self, board_id: str, block_id: str) -> Block | None:
        """Restore a deleted block; returns the restored block when the server sends it."""
        result = await self._request("POST", f"/boards/{board_id}/blocks/{block_id}/undelete")
        if not result:
            return None
        return _record(Block, result, "block response")

    async def duplicate_block(self, board_id: str, block_id: str, as_template: bool = False) -> list[Block]:
        """Copy a block and its children."""
        result = await self._request(
            "POST",
            f"/boards/{board_id}/blocks/{block_id}/duplicate",
            params={"asTemplate": as_template},
        )
        return _records(Block, result or [], "block list response")

    # =========================================================================
    # Card Methods
    # =========================================================================

    async def list_cards(self, board_id: str, page: int = 0, per_page: int = 20) -> list[Card]:
        """
        List cards of a board, one page at a time.

        Args:
            board_id: The board ID
            page: Zero-based page number
            per_page: Page size, capped at 100
        """
        per_page = max(1, min(per_page, MAX_CARDS_PER_PAGE))
        result = await self._request(
            "GET",
            f"/boards/{board_id}/cards",
            params={"page": max(page, 0), "per_page": per_page},
        )
        return _records(Card, result or [], "card list response")

    async def get_card(self, card_id: str) -> Card:
        result = await self._request("GET", f"/cards/{card_id}")
        return _record(Card, result, "card response")

    async def create_card(self, board_id: str, data: CreateCard, disable_notify: bool = False) -> Card:
        result = await self._request(
            "POST",
            f"/boards/{board_id}/cards",
            json=data.to_wire(),
            params={"disable_notify": disable_notify},
        )
        return _record(Card, result, "card response")

    async def _patch_card(self, card_id: str, patch: CardPatch, disable_notify: bool = False) -> Card:
        result = await self._request(
            "PATCH",
            f"/cards/{card_id}",
            json=patch.to_wire(),
            params={"disable_notify": disable_notify},
        )
        return _record(Card, result, "card response")

    async def update_card(self, card_id: str, patch: CardPatch, disable_notify: bool = False) -> Card:
        """
        Update a card, merging property changes into its current properties.

        ``updatedProperties`` would replace the whole map server-side, so the
        card is read first, the update overlaid, ``deletedProperties`` removed,
        and the merged map sent.
        """
        if patch.updated_properties is None and patch.deleted_properties is None:
            return await self._patch_card(card_id, patch, disable_notify)

        current = await self.get_card(card_id)
        merged = merge_properties(current.properties, patch.updated_properties, patch.deleted_properties)
        patch = patch.model_copy(update={"updated_properties": merged, "deleted_properties": None})
        return await self._patch_card(card_id, patch, disable_notify)

    # =========================================================================
    # Combined Board + Block Methods
    # =========================================================================

    @staticmethod
    def _boards_and_blocks(result: Any) -> dict[str, list]:
        result = result or {}
        return {
            "boards": _records(Board, result.get("boards") or [], "boards response"),
            "blocks": _records(Block, result.get("blocks") or [], "blocks response"),
        }

    async def insert_boards_and_blocks(
        self,
        envelope: BoardsAndBlocks,
        disable_notify: bool = False,
    ) -> dict[str, list]:
        """
        Atomically create boards and their blocks.

        Boards and blocks without an id get generated IDs so blocks can point at
        boards of the same request through boardId.
        """
        payload = {
            "boards": [board.to_wire() for board in assign_board_ids(envelope.boards)],
            "blocks": [block.to_wire() for block in assign_block_ids(envelope.blocks)],
        }
        result = await self._request(
            "POST",
            "/boards-and-blocks",
            json=payload,
            params={"disable_notify": disable_notify},
        )
        return self._boards_and_blocks(result)

    async def patch_boards_and_blocks(
        self,
        envelope: PatchBoardsAndBlocks,
        disable_notify: bool = False,
    ) -> dict[str, list]:
        """
        Atomically patch boards and blocks.

        ID and patch arrays are paired by position. Their lengths are not
        checked here; the server decides how to treat a mismatch.
        """
        result = await self._request(
            "PATCH",
            "/boards-and-blocks",
            json=envelope.to_wire(),
            params={"disable_notify": disable_notify},
        )
        return self._boards_and_blocks(result)

    async def delete_boards_and_blocks(self, envelope: DeleteBoardsAndBlocks, disable_notify: bool = False) -> None:
        await self._request(
            "DELETE",
            "/boards-and-blocks",
            json=envelope.to_wire(),
            params={"disable_notify": disable_notify},
        )
