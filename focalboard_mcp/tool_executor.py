"""Tool executor for MCP tools using the Focalboard API client."""

from typing import Any, assert_never

from .client import FocalboardClient
from .exceptions import RemoteApiError, UnknownToolError, ValidationError
from .formatters import to_payload
from .models import (
    BlockPatch,
    BlockPatchBatch,
    Board,
    BoardPatch,
    BoardsAndBlocks,
    CardPatch,
    CreateBlock,
    CreateBoard,
    CreateCard,
    DeleteBoardsAndBlocks,
    PatchBoardsAndBlocks,
    parse,
    parse_list,
)
from .tool_schemas import TOOL_DEFINITIONS, ToolName


def parse_tool_name(name: str) -> ToolName:
    """Map a wire tool name onto the closed ToolName set."""
    try:
        return ToolName(name)
    except ValueError:
        raise UnknownToolError(f"Unknown tool: {name}") from None


def _get_required_params(tool: ToolName) -> list[str]:
    """Get required parameters for a tool from its schema."""
    return TOOL_DEFINITIONS[tool]["input_schema"].get("required", [])


def _validate_tool_input(tool: ToolName, tool_input: dict[str, Any]) -> None:
    """Validate that all required parameters are present.

    Raises:
        ValidationError: If a required parameter is missing
    """
    required = _get_required_params(tool)
    missing = [param for param in required if tool_input.get(param) is None]
    if missing:
        raise ValidationError(f"Missing required parameter(s): {', '.join(missing)}")


def _int_arg(tool_input: dict[str, Any], name: str, default: int) -> int:
    value = tool_input.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer, got {value!r}") from None


def _dict_arg(tool_input: dict[str, Any], name: str) -> dict[str, Any]:
    value = tool_input.get(name)
    if not isinstance(value, dict):
        raise ValidationError(f"{name} must be an object, got {type(value).__name__}")
    return value


class ToolExecutor:
    """Executes tool calls using the Focalboard API client."""

    def __init__(self, client: FocalboardClient):
        """Initialize with a configured API client."""
        self.client = client

    async def _board(self, tool_input: dict[str, Any]) -> Board:
        return await self.client.resolve_board(tool_input["board"], tool_input.get("teamId"))

    async def _block_id(self, board_id: str, reference: str) -> str:
        """Resolve a block reference within the board; ID-shaped titles still match by title."""
        block = await self.client.resolve_block(board_id, reference)
        return block.id

    async def execute(self, tool_name: str, tool_input: dict[str, Any] | None) -> Any:
        """
        Execute a tool call and return a JSON-compatible result.

        Args:
            tool_name: Name of the tool to execute
            tool_input: Input parameters for the tool

        Returns:
            Plain data (dicts/lists) ready for JSON serialization

        Raises:
            UnknownToolError: If tool_name is not a known tool
            ValidationError: If required params are missing or malformed
            FocalboardError: Any resolution or API failure
        """
        tool = parse_tool_name(tool_name)
        tool_input = tool_input or {}
        _validate_tool_input(tool, tool_input)
        result = await self._dispatch(tool, tool_input)
        return to_payload(result)

    async def _dispatch(self, tool: ToolName, tool_input: dict[str, Any]) -> Any:  # noqa: C901
        client = self.client
        disable_notify = bool(tool_input.get("disableNotify", False))

        match tool:
            # Boards
            case ToolName.CREATE_BOARD:
                data = parse(CreateBoard, {"teamId": client.team_id, "type": "P", **tool_input}, "board")
                return await client.create_board(data)

            case ToolName.GET_BOARD:
                return await self._board(tool_input)

            case ToolName.UPDATE_BOARD:
                patch = parse(BoardPatch, tool_input, "board patch")
                board = await self._board(tool_input)
                return await client.update_board(board.id, patch)

            case ToolName.DELETE_BOARD:
                board = await self._board(tool_input)
                await client.delete_board(board.id)
                return {"deleted": True, "boardId": board.id, "title": board.title}

            case ToolName.LIST_BOARDS:
                return await client.list_boards(tool_input.get("teamId"))

            case ToolName.SEARCH_BOARDS:
                return await client.search_boards(tool_input["query"], tool_input.get("teamId"))

            case ToolName.DUPLICATE_BOARD:
                board = await self._board(tool_input)
                return await client.duplicate_board(board.id, as_template=bool(tool_input.get("asTemplate", False)))

            case ToolName.UNDELETE_BOARD:
                await client.undelete_board(tool_input["boardId"])
                return {"restored": True, "boardId": tool_input["boardId"]}

            case ToolName.JOIN_BOARD:
                board = await self._board(tool_input)
                return await client.join_board(board.id)

            case ToolName.LEAVE_BOARD:
                board = await self._board(tool_input)
                await client.leave_board(board.id)
                return {"left": True, "boardId": board.id}

            case ToolName.GET_BOARD_MEMBERS:
                board = await self._board(tool_input)
                return await client.get_board_members(board.id)

            case ToolName.LIST_TEAM_USERS:
                return await client.list_team_users(tool_input.get("teamId"))

            # Blocks
            case ToolName.CREATE_BLOCKS:
                blocks = parse_list(CreateBlock, tool_input["blocks"], "block")
                board = await self._board(tool_input)
                blocks = [block.model_copy(update={"board_id": board.id}) for block in blocks]
                return await client.create_blocks(board.id, blocks, disable_notify)

            case ToolName.GET_BLOCKS:
                board = await self._board(tool_input)
                return await client.get_blocks(board.id, tool_input.get("parentId"), tool_input.get("type"))

            case ToolName.GET_BLOCK:
                board = await self._board(tool_input)
                return await client.resolve_block(board.id, tool_input["block"])

            case ToolName.UPDATE_BLOCK:
                patch = parse(BlockPatch, tool_input, "block patch")
                board = await self._board(tool_input)
                block_id = await self._block_id(board.id, tool_input["block"])
                await client.update_block(board.id, block_id, patch, disable_notify)
                return {"updated": True, "blockId": block_id}

            case ToolName.DELETE_BLOCK:
                board = await self._board(tool_input)
                block_id = await self._block_id(board.id, tool_input["block"])
                await client.delete_block(board.id, block_id, disable_notify)
                return {"deleted": True, "blockId": block_id}

            case ToolName.PATCH_BLOCKS_BATCH:
                batch = parse(
                    BlockPatchBatch,
                    {"block_ids": tool_input["blockIds"], "block_patches": tool_input["blockPatches"]},
                    "block patch batch",
                )
                board = await self._board(tool_input)
                await client.patch_blocks(board.id, batch, disable_notify)
                return {"updated": len(batch.block_ids), "blockIds": batch.block_ids}

            case ToolName.DUPLICATE_BLOCK:
                board = await self._board(tool_input)
                block_id = await self._block_id(board.id, tool_input["block"])
                return await client.duplicate_block(
                    board.id, block_id, as_template=bool(tool_input.get("asTemplate", False))
                )

            case ToolName.UNDELETE_BLOCK:
                board = await self._board(tool_input)
                restored = await client.undelete_block(board.id, tool_input["blockId"])
                return restored or {"restored": True, "blockId": tool_input["blockId"]}

            # Cards
            case ToolName.LIST_CARDS:
                page = _int_arg(tool_input, "page", 0)
                per_page = _int_arg(tool_input, "per_page", 20)
                board = await self._board(tool_input)
                return await client.list_cards(board.id, page, per_page)

            case ToolName.GET_CARD:
                return await client.get_card(tool_input["card"])

            case ToolName.CREATE_CARD:
                data = parse(CreateCard, tool_input, "card")
                description = tool_input.get("description")
                board = await self._board(tool_input)
                card = await client.create_card(board.id, data, disable_notify)
                if not description:
                    return card
                blocks = await client.create_blocks(
                    board.id,
                    [CreateBlock(board_id=board.id, parent_id=card.id, type="text", title=description)],
                    disable_notify,
                )
                if not blocks:
                    raise RemoteApiError("Failed to create description block")
                return await client.update_card(card.id, CardPatch(content_order=[blocks[0].id]), disable_notify)

            case ToolName.UPDATE_CARD:
                raw_patch = dict(_dict_arg(tool_input, "patch"))
                # "properties" is accepted as an alias of updatedProperties
                if "properties" in raw_patch and "updatedProperties" not in raw_patch:
                    raw_patch["updatedProperties"] = raw_patch.pop("properties")
                patch = parse(CardPatch, raw_patch, "card patch")
                return await client.update_card(tool_input["card"], patch, disable_notify)

            # Combined
            case ToolName.INSERT_BOARDS_AND_BLOCKS:
                boards = tool_input["boards"]
                if isinstance(boards, list):
                    boards = [{"teamId": client.team_id, **b} if isinstance(b, dict) else b for b in boards]
                envelope = parse(BoardsAndBlocks, {"boards": boards, "blocks": tool_input["blocks"]}, "boards and blocks")
                missing = [i for i, block in enumerate(envelope.blocks) if not block.board_id]
                if missing:
                    raise ValidationError(f"blocks {missing} need a boardId")
                return await client.insert_boards_and_blocks(envelope, disable_notify)

            case ToolName.PATCH_BOARDS_AND_BLOCKS:
                envelope = parse(PatchBoardsAndBlocks, tool_input, "boards and blocks patch")
                return await client.patch_boards_and_blocks(envelope, disable_notify)

            case ToolName.DELETE_BOARDS_AND_BLOCKS:
                envelope = parse(DeleteBoardsAndBlocks, tool_input, "boards and blocks deletion")
                await client.delete_boards_and_blocks(envelope, disable_notify)
                return {"deleted": True, "boards": envelope.boards, "blocks": envelope.blocks}

            case _:
                assert_never(tool)
