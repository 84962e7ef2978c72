"""MCP tool schema definitions for the Focalboard API.

This module contains only the tool names and definitions (pure data) so both the
executor and the server can import it without circular dependencies.
"""

from enum import Enum


class ToolName(str, Enum):
    """Closed set of tools; the executor matches on every member."""

    CREATE_BOARD = "create_board"
    GET_BOARD = "get_board"
    UPDATE_BOARD = "update_board"
    DELETE_BOARD = "delete_board"
    LIST_BOARDS = "list_boards"
    SEARCH_BOARDS = "search_boards"
    DUPLICATE_BOARD = "duplicate_board"
    UNDELETE_BOARD = "undelete_board"
    JOIN_BOARD = "join_board"
    LEAVE_BOARD = "leave_board"
    GET_BOARD_MEMBERS = "get_board_members"
    LIST_TEAM_USERS = "list_team_users"
    CREATE_BLOCKS = "create_blocks"
    GET_BLOCKS = "get_blocks"
    GET_BLOCK = "get_block"
    UPDATE_BLOCK = "update_block"
    DELETE_BLOCK = "delete_block"
    PATCH_BLOCKS_BATCH = "patch_blocks_batch"
    DUPLICATE_BLOCK = "duplicate_block"
    UNDELETE_BLOCK = "undelete_block"
    LIST_CARDS = "list_cards"
    GET_CARD = "get_card"
    CREATE_CARD = "create_card"
    UPDATE_CARD = "update_card"
    INSERT_BOARDS_AND_BLOCKS = "insert_boards_and_blocks"
    PATCH_BOARDS_AND_BLOCKS = "patch_boards_and_blocks"
    DELETE_BOARDS_AND_BLOCKS = "delete_boards_and_blocks"


_BOARD_REF = {
    "type": "string",
    "description": "Board name or ID. A name is matched against board titles of the team.",
}
_TEAM_ID = {
    "type": "string",
    "description": "Team ID (optional, defaults to the configured team)",
}
_DISABLE_NOTIFY = {
    "type": "boolean",
    "default": False,
    "description": "Suppress notifications for this change",
}
_BLOCK_TYPE = {
    "type": "string",
    "enum": [
        "card",
        "view",
        "text",
        "image",
        "divider",
        "checkbox",
        "h1",
        "h2",
        "h3",
        "list-item",
        "attachment",
        "quote",
        "video",
        "comment",
    ],
}
_PROPERTY_TEMPLATE = {
    "type": "object",
    "description": "Property template: {id, name, type, options?: [{id, value, color?}]}",
    "properties": {
        "id": {"type": "string"},
        "name": {"type": "string"},
        "type": {"type": "string"},
        "options": {"type": "array", "items": {"type": "object"}},
    },
    "required": ["id", "name", "type"],
}

# Tool definitions for MCP
TOOLS = [
    # Boards
    {
        "name": ToolName.CREATE_BOARD.value,
        "description": "Create a new board in a team.",
        "input_schema": {
            "type": "object",
            "properties": {
                "teamId": _TEAM_ID,
                "title": {"type": "string", "description": "Board title"},
                "description": {"type": "string", "description": "Board description"},
                "icon": {"type": "string", "description": "Board icon emoji"},
                "type": {"type": "string", "enum": ["O", "P"], "default": "P", "description": "O=Open, P=Private"},
                "cardProperties": {
                    "type": "array",
                    "items": _PROPERTY_TEMPLATE,
                    "description": "Card property schema for the board",
                },
            },
            "required": ["title"],
        },
    },
    {
        "name": ToolName.GET_BOARD.value,
        "description": "Get a board, including its card property schema (property IDs and option IDs). Use this before creating or updating cards.",
        "input_schema": {
            "type": "object",
            "properties": {"board": _BOARD_REF, "teamId": _TEAM_ID},
            "required": ["board"],
        },
    },
    {
        "name": ToolName.UPDATE_BOARD.value,
        "description": "Update board fields. updatedProperties and cardProperties are merged into the existing values (only the given keys change); deletedProperties and deletedCardProperties remove entries.",
        "input_schema": {
            "type": "object",
            "properties": {
                "board": _BOARD_REF,
                "teamId": _TEAM_ID,
                "title": {"type": "string"},
                "description": {"type": "string"},
                "icon": {"type": "string"},
                "showDescription": {"type": "boolean"},
                "type": {"type": "string", "enum": ["O", "P"]},
                "minimumRole": {"type": "string", "enum": ["admin", "editor", "commenter", "viewer"]},
                "updatedProperties": {"type": "object", "description": "Board properties to set"},
                "deletedProperties": {"type": "array", "items": {"type": "string"}},
                "cardProperties": {
                    "type": "array",
                    "items": _PROPERTY_TEMPLATE,
                    "description": "Property templates to add or replace (matched by id)",
                },
                "deletedCardProperties": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Property template IDs to remove",
                },
            },
            "required": ["board"],
        },
    },
    {
        "name": ToolName.DELETE_BOARD.value,
        "description": "Delete a board. It can be restored with undelete_board.",
        "input_schema": {
            "type": "object",
            "properties": {"board": _BOARD_REF, "teamId": _TEAM_ID},
            "required": ["board"],
        },
    },
    {
        "name": ToolName.LIST_BOARDS.value,
        "description": "List all boards in a team.",
        "input_schema": {"type": "object", "properties": {"teamId": _TEAM_ID}},
    },
    {
        "name": ToolName.SEARCH_BOARDS.value,
        "description": "Search boards by title.",
        "input_schema": {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search query"},
                "teamId": _TEAM_ID,
            },
            "required": ["query"],
        },
    },
    {
        "name": ToolName.DUPLICATE_BOARD.value,
        "description": "Create a complete copy of a board including all its blocks.",
        "input_schema": {
            "type": "object",
            "properties": {
                "board": _BOARD_REF,
                "teamId": _TEAM_ID,
                "asTemplate": {"type": "boolean", "default": False},
            },
            "required": ["board"],
        },
    },
    {
        "name": ToolName.UNDELETE_BOARD.value,
        "description": "Restore a previously deleted board. Requires the board ID.",
        "input_schema": {
            "type": "object",
            "properties": {"boardId": {"type": "string"}},
            "required": ["boardId"],
        },
    },
    {
        "name": ToolName.JOIN_BOARD.value,
        "description": "Join a board as a member.",
        "input_schema": {
            "type": "object",
            "properties": {"board": _BOARD_REF, "teamId": _TEAM_ID},
            "required": ["board"],
        },
    },
    {
        "name": ToolName.LEAVE_BOARD.value,
        "description": "Leave a board by removing your own membership.",
        "input_schema": {
            "type": "object",
            "properties": {"board": _BOARD_REF, "teamId": _TEAM_ID},
            "required": ["board"],
        },
    },
    {
        "name": ToolName.GET_BOARD_MEMBERS.value,
        "description": "List the members of a board and their roles.",
        "input_schema": {
            "type": "object",
            "properties": {"board": _BOARD_REF, "teamId": _TEAM_ID},
            "required": ["board"],
        },
    },
    {
        "name": ToolName.LIST_TEAM_USERS.value,
        "description": "List users of a team. Use the user IDs as values of person properties.",
        "input_schema": {"type": "object", "properties": {"teamId": _TEAM_ID}},
    },
    # Blocks
    {
        "name": ToolName.CREATE_BLOCKS.value,
        "description": "Create blocks in a board. Blocks without an id get a generated one, so parentId may point at another block of the same call.",
        "input_schema": {
            "type": "object",
            "properties": {
                "board": _BOARD_REF,
                "teamId": _TEAM_ID,
                "blocks": {
                    "type": "array",
                    "description": "Blocks to create: {type, title?, parentId?, fields?, id?}",
                    "items": {
                        "type": "object",
                        "properties": {
                            "id": {"type": "string"},
                            "type": _BLOCK_TYPE,
                            "title": {"type": "string"},
                            "parentId": {"type": "string"},
                            "fields": {"type": "object"},
                        },
                        "required": ["type"],
                    },
                },
                "disableNotify": _DISABLE_NOTIFY,
            },
            "required": ["board", "blocks"],
        },
    },
    {
        "name": ToolName.GET_BLOCKS.value,
        "description": "Get blocks from a board, optionally filtered by parent block and type.",
        "input_schema": {
            "type": "object",
            "properties": {
                "board": _BOARD_REF,
                "teamId": _TEAM_ID,
                "parentId": {"type": "string", "description": "Filter by parent block ID"},
                "type": {"type": "string", "description": "Filter by block type"},
            },
            "required": ["board"],
        },
    },
    {
        "name": ToolName.GET_BLOCK.value,
        "description": "Find a single block in a board by ID or exact title.",
        "input_schema": {
            "type": "object",
            "properties": {
                "board": _BOARD_REF,
                "teamId": _TEAM_ID,
                "block": {"type": "string", "description": "Block ID or exact title"},
            },
            "required": ["board", "block"],
        },
    },
    {
        "name": ToolName.UPDATE_BLOCK.value,
        "description": "Update a block. updatedFields merges into the block's fields; deletedFields removes field keys.",
        "input_schema": {
            "type": "object",
            "properties": {
                "board": _BOARD_REF,
                "teamId": _TEAM_ID,
                "block": {"type": "string", "description": "Block ID or exact title"},
                "title": {"type": "string"},
                "parentId": {"type": "string"},
                "type": _BLOCK_TYPE,
                "updatedFields": {"type": "object"},
                "deletedFields": {"type": "array", "items": {"type": "string"}},
                "disableNotify": _DISABLE_NOTIFY,
            },
            "required": ["board", "block"],
        },
    },
    {
        "name": ToolName.DELETE_BLOCK.value,
        "description": "Delete a block.",
        "input_schema": {
            "type": "object",
            "properties": {
                "board": _BOARD_REF,
                "teamId": _TEAM_ID,
                "block": {"type": "string", "description": "Block ID or exact title"},
                "disableNotify": _DISABLE_NOTIFY,
            },
            "required": ["board", "block"],
        },
    },
    {
        "name": ToolName.PATCH_BLOCKS_BATCH.value,
        "description": "Update several blocks of one board in a single request. blockIds[i] is patched with blockPatches[i].",
        "input_schema": {
            "type": "object",
            "properties": {
                "board": _BOARD_REF,
                "teamId": _TEAM_ID,
                "blockIds": {"type": "array", "items": {"type": "string"}},
                "blockPatches": {
                    "type": "array",
                    "items": {"type": "object"},
                    "description": "Patches (same length as blockIds): {title?, parentId?, type?, updatedFields?, deletedFields?}",
                },
                "disableNotify": _DISABLE_NOTIFY,
            },
            "required": ["board", "blockIds", "blockPatches"],
        },
    },
    {
        "name": ToolName.DUPLICATE_BLOCK.value,
        "description": "Create a copy of a block (and its children) with new IDs.",
        "input_schema": {
            "type": "object",
            "properties": {
                "board": _BOARD_REF,
                "teamId": _TEAM_ID,
                "block": {"type": "string", "description": "Block ID or exact title"},
                "asTemplate": {"type": "boolean", "default": False},
            },
            "required": ["board", "block"],
        },
    },
    {
        "name": ToolName.UNDELETE_BLOCK.value,
        "description": "Restore a previously deleted block. Requires the block ID.",
        "input_schema": {
            "type": "object",
            "properties": {
                "board": _BOARD_REF,
                "teamId": _TEAM_ID,
                "blockId": {"type": "string"},
            },
            "required": ["board", "blockId"],
        },
    },
    # Cards
    {
        "name": ToolName.LIST_CARDS.value,
        "description": "List cards in a board with pagination. Returns cards with their properties. Much more efficient than get_blocks for card listing.",
        "input_schema": {
            "type": "object",
            "properties": {
                "board": _BOARD_REF,
                "teamId": _TEAM_ID,
                "page": {"type": "integer", "description": "Page number (0-based, default 0)"},
                "per_page": {"type": "integer", "description": "Cards per page (default 20, max 100)"},
            },
            "required": ["board"],
        },
    },
    {
        "name": ToolName.GET_CARD.value,
        "description": "Get a single card with all its properties.",
        "input_schema": {
            "type": "object",
            "properties": {"card": {"type": "string", "description": "Card ID"}},
            "required": ["card"],
        },
    },
    {
        "name": ToolName.CREATE_CARD.value,
        "description": "Create a new card in a board with properties. Use get_board first to learn the board's property schema (property IDs and option IDs).",
        "input_schema": {
            "type": "object",
            "properties": {
                "board": _BOARD_REF,
                "teamId": _TEAM_ID,
                "title": {"type": "string", "description": "Card title"},
                "icon": {"type": "string", "description": "Card icon (emoji)"},
                "properties": {
                    "type": "object",
                    "description": "Card properties as {propertyId: value}. For select properties, value is the option ID.",
                },
                "description": {
                    "type": "string",
                    "description": "Card description (creates a text block as card content and sets contentOrder automatically)",
                },
                "contentOrder": {
                    "type": "array",
                    "description": "Content block ordering (ignored when description is provided)",
                },
                "disableNotify": _DISABLE_NOTIFY,
            },
            "required": ["board"],
        },
    },
    {
        "name": ToolName.UPDATE_CARD.value,
        "description": "Update a card's title, icon, or properties incrementally. updatedProperties only changes the given properties and leaves others untouched; deletedProperties removes properties.",
        "input_schema": {
            "type": "object",
            "properties": {
                "card": {"type": "string", "description": "Card ID"},
                "patch": {
                    "type": "object",
                    "description": "Fields to update: title, icon, updatedProperties (or properties), deletedProperties, contentOrder",
                },
                "disableNotify": _DISABLE_NOTIFY,
            },
            "required": ["card", "patch"],
        },
    },
    # Combined
    {
        "name": ToolName.INSERT_BOARDS_AND_BLOCKS.value,
        "description": "Atomically create boards and blocks together. Items without an id get a generated one, so blocks can reference new boards through boardId.",
        "input_schema": {
            "type": "object",
            "properties": {
                "boards": {"type": "array", "items": {"type": "object"}},
                "blocks": {"type": "array", "items": {"type": "object"}},
                "disableNotify": _DISABLE_NOTIFY,
            },
            "required": ["boards", "blocks"],
        },
    },
    {
        "name": ToolName.PATCH_BOARDS_AND_BLOCKS.value,
        "description": "Atomically update boards and blocks together. boardIDs[i] is patched with boardPatches[i], blockIDs[i] with blockPatches[i].",
        "input_schema": {
            "type": "object",
            "properties": {
                "boardIDs": {"type": "array", "items": {"type": "string"}},
                "boardPatches": {"type": "array", "items": {"type": "object"}},
                "blockIDs": {"type": "array", "items": {"type": "string"}},
                "blockPatches": {"type": "array", "items": {"type": "object"}},
                "disableNotify": _DISABLE_NOTIFY,
            },
            "required": ["boardIDs", "boardPatches", "blockIDs", "blockPatches"],
        },
    },
    {
        "name": ToolName.DELETE_BOARDS_AND_BLOCKS.value,
        "description": "Delete multiple boards and blocks in a single atomic operation.",
        "input_schema": {
            "type": "object",
            "properties": {
                "boards": {"type": "array", "items": {"type": "string"}, "description": "Board IDs to delete"},
                "blocks": {"type": "array", "items": {"type": "string"}, "description": "Block IDs to delete"},
                "disableNotify": _DISABLE_NOTIFY,
            },
        },
    },
]

# Keyed view; a repeated name keeps its last definition.
TOOL_DEFINITIONS = {ToolName(tool["name"]): tool for tool in TOOLS}
