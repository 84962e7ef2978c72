"""Compact tool-result shapes for boards, blocks and cards."""

from typing import Any

from pydantic import BaseModel

from .models import Block, Board, Card


def format_board(board: Board) -> dict[str, Any]:
    """Board summary: identity, title, type and the property schema when present."""
    out: dict[str, Any] = {"id": board.id, "title": board.title}
    if board.description:
        out["description"] = board.description
    if board.icon:
        out["icon"] = board.icon
    out["type"] = board.type
    if board.card_properties:
        out["cardProperties"] = [template.to_wire() for template in board.card_properties]
    return out


def format_block(block: Block) -> dict[str, Any]:
    out: dict[str, Any] = {"id": block.id, "boardId": block.board_id, "type": block.type}
    if block.title:
        out["title"] = block.title
    if block.parent_id:
        out["parentId"] = block.parent_id
    if block.fields:
        out["fields"] = block.fields
    return out


def format_card(card: Card) -> dict[str, Any]:
    out: dict[str, Any] = {"id": card.id}
    if card.board_id:
        out["boardId"] = card.board_id
    if card.title:
        out["title"] = card.title
    if card.icon:
        out["icon"] = card.icon
    out["properties"] = card.properties or {}
    if card.content_order:
        out["contentOrder"] = card.content_order
    return out


def to_payload(value: Any) -> Any:
    """Turn models (and containers of them) into plain JSON-compatible data."""
    if isinstance(value, Board):
        return format_board(value)
    if isinstance(value, Block):
        return format_block(value)
    if isinstance(value, Card):
        return format_card(value)
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True)
    if isinstance(value, dict):
        return {key: to_payload(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [to_payload(item) for item in value]
    return value
