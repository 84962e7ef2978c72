"""
Typed models for Focalboard boards, blocks, cards and their patch envelopes.

Field names are snake_case in Python and camelCase on the wire. Input models check
enumerated values strictly and drop unknown keys; response models keep unknown
fields and accept type values beyond the input enums so newer servers round-trip.
"""

from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .exceptions import ValidationError

BoardType = Literal["O", "P"]
MinimumRole = Literal["admin", "editor", "commenter", "viewer"]
BlockType = Literal[
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
]
PropertyType = Literal[
    "text",
    "number",
    "select",
    "multiSelect",
    "date",
    "person",
    "checkbox",
    "url",
    "email",
    "phone",
    "createdTime",
    "createdBy",
    "updatedTime",
    "updatedBy",
]


class WireModel(BaseModel):
    """Input payload: camelCase on the wire, unknown keys ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_wire(self) -> dict[str, Any]:
        """Serialize for the API, omitting unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class RecordModel(WireModel):
    """Server record: unknown keys are preserved."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class AuditFields(RecordModel):
    created_by: str | None = None
    modified_by: str | None = None
    create_at: int | None = None
    update_at: int | None = None
    # 0 means "not deleted"
    delete_at: int | None = None


# ============================================================================
# Property templates
# ============================================================================


class PropertyOption(WireModel):
    id: str
    value: str
    color: str | None = None


class PropertyTemplate(WireModel):
    """Board-level schema entry describing one card property."""

    id: str
    name: str
    type: PropertyType
    options: list[PropertyOption] | None = None


class CardPropertyRecord(RecordModel):
    """A cardProperties entry as stored by the server; newer property types pass through."""

    id: str
    name: str | None = None
    type: str
    options: list[dict[str, Any]] | None = None


# ============================================================================
# Boards
# ============================================================================


class Board(AuditFields):
    id: str | None = None
    team_id: str
    channel_id: str | None = None
    type: str = "P"
    minimum_role: str | None = None
    title: str
    description: str | None = None
    icon: str | None = None
    show_description: bool | None = None
    is_template: bool | None = None
    template_version: int | None = None
    properties: dict[str, Any] | None = None
    card_properties: list[CardPropertyRecord] | None = None


class CreateBoard(WireModel):
    id: str | None = None
    team_id: str
    title: str
    description: str | None = None
    icon: str | None = None
    type: BoardType | None = None
    show_description: bool | None = None
    is_template: bool | None = None
    card_properties: list[PropertyTemplate] | None = None
    create_at: int | None = None
    update_at: int | None = None


class BoardPatch(WireModel):
    title: str | None = None
    description: str | None = None
    icon: str | None = None
    show_description: bool | None = None
    type: BoardType | None = None
    minimum_role: MinimumRole | None = None
    channel_id: str | None = None
    card_properties: list[PropertyTemplate] | None = None
    updated_properties: dict[str, Any] | None = None
    deleted_properties: list[str] | None = None
    updated_card_properties: list[PropertyTemplate] | None = None
    deleted_card_properties: list[str] | None = None


class BoardMember(RecordModel):
    board_id: str
    user_id: str
    roles: str | None = None
    minimum_role: str | None = None
    scheme_admin: bool | None = None
    scheme_editor: bool | None = None
    scheme_commenter: bool | None = None
    scheme_viewer: bool | None = None


class User(RecordModel):
    id: str
    username: str | None = None
    email: str | None = None
    nickname: str | None = None
    firstname: str | None = None
    lastname: str | None = None
    is_bot: bool | None = None


# ============================================================================
# Blocks
# ============================================================================


class Block(AuditFields):
    id: str
    board_id: str
    parent_id: str | None = None
    schema_version: int | None = Field(default=None, alias="schema")
    # server records may carry types newer than BlockType
    type: str
    title: str | None = None
    fields: dict[str, Any] | None = None


class CreateBlock(WireModel):
    id: str | None = None
    # filled from the target board when blocks are created through a board
    board_id: str | None = None
    parent_id: str | None = None
    schema_version: int | None = Field(default=None, alias="schema")
    type: BlockType
    title: str | None = None
    fields: dict[str, Any] | None = None
    create_at: int | None = None
    update_at: int | None = None


class BlockPatch(WireModel):
    parent_id: str | None = None
    schema_version: int | None = Field(default=None, alias="schema")
    type: BlockType | None = None
    title: str | None = None
    # wholesale replacement; updated_fields/deleted_fields are the field-level merge
    fields: dict[str, Any] | None = None
    updated_fields: dict[str, Any] | None = None
    deleted_fields: list[str] | None = None


class BlockPatchBatch(WireModel):
    block_ids: list[str] = Field(alias="block_ids")
    block_patches: list[BlockPatch] = Field(alias="block_patches")


# ============================================================================
# Cards
# ============================================================================


class Card(AuditFields):
    id: str
    board_id: str | None = None
    title: str | None = None
    icon: str | None = None
    properties: dict[str, Any] | None = None
    content_order: list[Any] | None = None
    is_template: bool | None = None


class CreateCard(WireModel):
    title: str | None = None
    icon: str | None = None
    properties: dict[str, Any] | None = None
    content_order: list[Any] | None = None


class CardPatch(WireModel):
    title: str | None = None
    icon: str | None = None
    content_order: list[Any] | None = None
    updated_properties: dict[str, Any] | None = None
    deleted_properties: list[str] | None = None


# ============================================================================
# Combined envelopes
# ============================================================================


class BoardsAndBlocks(WireModel):
    boards: list[CreateBoard] = Field(default_factory=list)
    blocks: list[CreateBlock] = Field(default_factory=list)


class PatchBoardsAndBlocks(WireModel):
    """Parallel arrays: board_ids[i] pairs with board_patches[i], same for blocks."""

    board_ids: list[str] = Field(default_factory=list, alias="boardIDs")
    board_patches: list[BoardPatch] = Field(default_factory=list)
    block_ids: list[str] = Field(default_factory=list, alias="blockIDs")
    block_patches: list[BlockPatch] = Field(default_factory=list)


class DeleteBoardsAndBlocks(WireModel):
    boards: list[str] = Field(default_factory=list)
    blocks: list[str] = Field(default_factory=list)


M = TypeVar("M", bound=BaseModel)


def _describe(error: PydanticValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "input"
        problems.append(f"{location}: {item['msg']}")
    return "; ".join(problems)


def parse(model: type[M], data: Any, context: str | None = None) -> M:
    """Validate data against model, raising ValidationError on mismatch."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        prefix = f"Invalid {context}: " if context else f"Invalid {model.__name__}: "
        raise ValidationError(prefix + _describe(e)) from e


def parse_list(model: type[M], data: Any, context: str | None = None) -> list[M]:
    """Validate a JSON array of records."""
    if not isinstance(data, list):
        raise ValidationError(f"Invalid {context or model.__name__}: expected a list, got {type(data).__name__}")
    return [parse(model, item, context) for item in data]
