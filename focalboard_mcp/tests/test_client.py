"""Tests for the Focalboard API client."""

import json

import httpx
import pytest

from focalboard_mcp.client import (
    MAX_CARDS_PER_PAGE,
    FocalboardClient,
    _is_retryable,
    merge_properties,
    merge_property_templates,
)
from focalboard_mcp.exceptions import (
    AmbiguousReferenceError,
    NotFoundError,
    RemoteApiError,
    ValidationError,
)
from focalboard_mcp.ids import ID_LENGTH
from focalboard_mcp.models import (
    BlockPatch,
    BlockPatchBatch,
    BoardPatch,
    BoardsAndBlocks,
    CardPatch,
    CreateBlock,
    CreateBoard,
    DeleteBoardsAndBlocks,
    PatchBoardsAndBlocks,
    PropertyTemplate,
)

from conftest import BOARD_ID, CARD_ID, UUID_ID, make_block, make_board


def echo(**extra):
    """Handler that answers with the request body, plus extra keys when it is an object."""

    def handler(request):
        body = json.loads(request.content)
        if isinstance(body, dict):
            body = {**body, **extra}
        return httpx.Response(200, json=body)

    return handler


class TestMergeProperties:
    """Tests for the client-side property merge."""

    def test_overlay_keeps_untouched_keys(self):
        """Updated keys overwrite, others survive."""
        merged = merge_properties({"a": "1", "b": "2"}, {"b": "3", "c": "4"}, None)

        assert merged == {"a": "1", "b": "3", "c": "4"}

    def test_delete_after_overlay(self):
        """Deletion is applied after the overlay."""
        merged = merge_properties({"a": "1", "b": "2"}, {"b": "3", "c": "4"}, ["a"])

        assert merged == {"b": "3", "c": "4"}

    def test_key_updated_and_deleted_is_removed(self):
        """A key in both updated and deleted ends up absent."""
        assert merge_properties({"a": "1"}, {"b": "2"}, ["b"]) == {"a": "1"}

    def test_missing_existing_and_unknown_deletes(self):
        """None existing is an empty map; deleting an absent key is a no-op."""
        assert merge_properties(None, {"x": 1}, ["nope"]) == {"x": 1}

    def test_inputs_not_mutated(self):
        """The existing map is left untouched."""
        existing = {"a": "1"}

        merge_properties(existing, {"a": "2"}, ["a"])

        assert existing == {"a": "1"}


class TestMergePropertyTemplates:
    """Tests for merging the cardProperties schema list."""

    def test_replace_append_and_delete_by_id(self):
        """Templates are matched by id, order is kept, deletes drop entries."""
        status = {"id": "p1", "name": "Status", "type": "select"}
        owner = {"id": "p2", "name": "Owner", "type": "person"}
        renamed = {"id": "p1", "name": "State", "type": "select"}
        due = {"id": "p3", "name": "Due", "type": "date"}

        merged = merge_property_templates([status, owner], [renamed, due], ["p2"])

        assert [(t["id"], t["name"]) for t in merged] == [("p1", "State"), ("p3", "Due")]


class TestRequests:
    """Tests for request execution and error mapping."""

    @pytest.mark.asyncio
    async def test_headers_attached(self, fake, client):
        """Every API call carries JSON content type, bearer token and requested-with."""
        fake.on("GET", "/api/v2/teams/0/boards", [])
        client.session.csrf_token = "csrf"

        await client.list_boards()

        headers = fake.calls[0].headers
        assert headers["Content-Type"] == "application/json"
        assert headers["Authorization"] == "Bearer tok"
        assert headers["X-CSRF-Token"] == "csrf"
        assert headers["X-Requested-With"] == "XMLHttpRequest"

    @pytest.mark.asyncio
    async def test_no_token_no_authorization_header(self, fake):
        """An unauthenticated client sends no Authorization header."""
        fake.on("GET", "/api/v2/teams/0/boards", [])
        client = FocalboardClient(base_url="http://focalboard.test", transport=httpx.MockTransport(fake))

        await client.list_boards()
        await client.aclose()

        assert "Authorization" not in fake.calls[0].headers
        assert "X-Requested-With" not in fake.calls[0].headers

    @pytest.mark.asyncio
    async def test_prefix_applied(self, fake):
        """Paths are resolved under the configured prefix."""
        fake.on("GET", "/plugins/focalboard/api/v2/cards/abc", {"id": "abc"})
        client = FocalboardClient(
            base_url="http://mm.test/",
            api_prefix="/plugins/focalboard/api/v2/",
            transport=httpx.MockTransport(fake),
        )

        card = await client.get_card("abc")
        await client.aclose()

        assert card.id == "abc"

    @pytest.mark.asyncio
    async def test_error_carries_server_message(self, fake, client):
        """The server's error and errorCode end up on RemoteApiError."""
        fake.on("GET", f"/api/v2/boards/{BOARD_ID}", {"error": "access denied", "errorCode": 403}, status=403)

        with pytest.raises(RemoteApiError) as exc_info:
            await client.get_board(BOARD_ID)

        error = exc_info.value
        assert error.message == "access denied"
        assert error.status_code == 403
        assert str(error) == "access denied (code: 403) [HTTP 403]"

    @pytest.mark.asyncio
    async def test_error_without_json_uses_reason_phrase(self, fake, client):
        """A non-JSON error body falls back to the status phrase."""
        fake.on("GET", f"/api/v2/boards/{BOARD_ID}", handler=lambda request: httpx.Response(502, text="<html>"))

        with pytest.raises(RemoteApiError) as exc_info:
            await client.get_board(BOARD_ID)

        assert exc_info.value.message == "Bad Gateway"

    @pytest.mark.asyncio
    async def test_error_not_retried(self, fake, client):
        """Error responses are raised after a single attempt."""
        fake.on("GET", f"/api/v2/boards/{BOARD_ID}", {"error": "boom"}, status=500)

        with pytest.raises(RemoteApiError):
            await client.get_board(BOARD_ID)

        assert len(fake.calls) == 1

    @pytest.mark.asyncio
    async def test_empty_body_returns_none(self, fake, client):
        """An empty 2xx body is fine for calls that return nothing."""
        fake.on("DELETE", f"/api/v2/boards/{BOARD_ID}", handler=lambda request: httpx.Response(200))

        assert await client.delete_board(BOARD_ID) is None

    @pytest.mark.asyncio
    async def test_invalid_json_body(self, fake, client):
        """A 2xx body that is not JSON is reported."""
        fake.on("GET", f"/api/v2/boards/{BOARD_ID}", handler=lambda request: httpx.Response(200, text="not json"))

        with pytest.raises(RemoteApiError, match="Invalid JSON response"):
            await client.get_board(BOARD_ID)

    @pytest.mark.asyncio
    async def test_write_transport_error_not_retried(self, fake, client):
        """Connection failures on writes surface once as RemoteApiError."""

        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        fake.on("POST", "/api/v2/boards", handler=refuse)

        with pytest.raises(RemoteApiError) as exc_info:
            await client.create_board(CreateBoard(team_id="0", title="New"))

        assert exc_info.value.code == "REQUEST_ERROR"
        assert len(fake.calls) == 1

    def test_only_read_transport_errors_are_retryable(self):
        """GET connection failures retry; writes and HTTP errors do not."""
        get = httpx.Request("GET", "http://x/boards")
        post = httpx.Request("POST", "http://x/boards")

        assert _is_retryable(httpx.ConnectError("down", request=get))
        assert not _is_retryable(httpx.ConnectError("down", request=post))
        assert not _is_retryable(RemoteApiError("boom", status_code=500))
        assert not _is_retryable(httpx.ConnectError("down"))


class TestResolveBoard:
    """Tests for board name/ID resolution."""

    @pytest.mark.asyncio
    async def test_exact_title_beats_ambiguity(self, fake, client):
        """An exact title match wins over other partial hits."""
        fake.on(
            "GET",
            "/api/v2/teams/0/boards/search",
            [make_board("b1" * 13, "Report Draft"), make_board("b2" * 13, "Report")],
        )

        board = await client.resolve_board("Report")

        assert board.title == "Report"
        assert fake.calls[0].url.params["q"] == "Report"

    @pytest.mark.asyncio
    async def test_ambiguous_lists_all_titles(self, fake, client):
        """Several hits and no exact match is ambiguous."""
        fake.on(
            "GET",
            "/api/v2/teams/0/boards/search",
            [make_board("b1" * 13, "Board A"), make_board("b2" * 13, "Board B")],
        )

        with pytest.raises(AmbiguousReferenceError) as exc_info:
            await client.resolve_board("Board")

        assert exc_info.value.candidates == ["Board A", "Board B"]
        assert "Board A" in str(exc_info.value)
        assert "more specific" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_single_partial_hit_wins(self, fake, client):
        """A lone search result is returned even if its title differs."""
        fake.on("GET", "/api/v2/teams/0/boards/search", [make_board(title="Quarterly Report")])

        board = await client.resolve_board("Quarterly")

        assert board.title == "Quarterly Report"

    @pytest.mark.asyncio
    async def test_id_short_circuits_search(self, fake, client):
        """An ID-shaped identifier is fetched directly with no search call."""
        fake.on("GET", f"/api/v2/boards/{BOARD_ID}", make_board())

        board = await client.resolve_board(BOARD_ID)

        assert board.id == BOARD_ID
        assert fake.paths() == [f"/api/v2/boards/{BOARD_ID}"]

    @pytest.mark.asyncio
    async def test_uuid_treated_as_id(self, fake, client):
        """UUID-shaped identifiers are fetched directly too."""
        fake.on("GET", f"/api/v2/boards/{UUID_ID}", make_board(UUID_ID))

        board = await client.resolve_board(UUID_ID)

        assert board.id == UUID_ID

    @pytest.mark.asyncio
    async def test_failed_id_fetch_falls_back_to_search(self, fake, client):
        """If the direct fetch fails, resolution searches by the same text."""
        fake.on("GET", "/api/v2/teams/0/boards/search", [make_board(title=BOARD_ID)])

        board = await client.resolve_board(BOARD_ID)

        assert board.title == BOARD_ID
        assert fake.paths() == [f"/api/v2/boards/{BOARD_ID}", "/api/v2/teams/0/boards/search"]

    @pytest.mark.asyncio
    async def test_unmodelled_property_type_in_response(self, fake, client):
        """A board whose schema uses a newer property type still resolves."""
        fake.on(
            "GET",
            f"/api/v2/boards/{BOARD_ID}",
            make_board(cardProperties=[{"id": "p1", "name": "Owners", "type": "multiPerson", "options": []}]),
        )

        board = await client.resolve_board(BOARD_ID)

        assert board.card_properties[0].type == "multiPerson"

    @pytest.mark.asyncio
    async def test_malformed_board_response_is_remote_error(self, fake, client):
        """A body that does not look like a board is the server's failure."""
        fake.on("GET", f"/api/v2/boards/{BOARD_ID}", {"id": BOARD_ID})

        with pytest.raises(RemoteApiError) as exc_info:
            await client.get_board(BOARD_ID)

        assert exc_info.value.code == "INVALID_RESPONSE"

    @pytest.mark.asyncio
    async def test_malformed_id_fetch_falls_back_to_search(self, fake, client):
        """An unusable direct fetch falls through to title search."""
        fake.on("GET", f"/api/v2/boards/{BOARD_ID}", {"id": BOARD_ID})
        fake.on("GET", "/api/v2/teams/0/boards/search", [make_board(title=BOARD_ID)])

        board = await client.resolve_board(BOARD_ID)

        assert board.title == BOARD_ID

    @pytest.mark.asyncio
    async def test_no_match(self, fake, client):
        """Zero results is NotFoundError."""
        fake.on("GET", "/api/v2/teams/0/boards/search", [])

        with pytest.raises(NotFoundError, match="Nowhere"):
            await client.resolve_board("Nowhere")

    @pytest.mark.asyncio
    async def test_team_override(self, fake, client):
        """A team id other than the default is searched when given."""
        fake.on("GET", "/api/v2/teams/team7/boards/search", [make_board()])

        await client.resolve_board("Test Board", team_id="team7")

        assert fake.paths() == ["/api/v2/teams/team7/boards/search"]

    @pytest.mark.asyncio
    async def test_blank_identifier(self, fake, client):
        """A blank reference is rejected without a request."""
        with pytest.raises(ValidationError):
            await client.resolve_board("   ")

        assert fake.calls == []


class TestResolveBlock:
    """Tests for block title/ID resolution."""

    BLOCK_ID = "k" * 27

    @pytest.mark.asyncio
    async def test_by_id(self, fake, client):
        """An ID-shaped reference matches the block with that id."""
        fake.on("GET", f"/api/v2/boards/{BOARD_ID}/blocks", [make_block(self.BLOCK_ID, "Notes")])

        block = await client.resolve_block(BOARD_ID, self.BLOCK_ID)

        assert block.id == self.BLOCK_ID

    @pytest.mark.asyncio
    async def test_by_title(self, fake, client):
        """A title matches exactly one block."""
        fake.on(
            "GET",
            f"/api/v2/boards/{BOARD_ID}/blocks",
            [make_block("a" * 27, "Notes"), make_block("b" * 27, "Notes 2")],
        )

        block = await client.resolve_block(BOARD_ID, "Notes")

        assert block.id == "a" * 27

    @pytest.mark.asyncio
    async def test_duplicate_titles_are_ambiguous(self, fake, client):
        """Candidates name both title and id."""
        fake.on(
            "GET",
            f"/api/v2/boards/{BOARD_ID}/blocks",
            [make_block("a" * 27, "Todo"), make_block("b" * 27, "Todo")],
        )

        with pytest.raises(AmbiguousReferenceError) as exc_info:
            await client.resolve_block(BOARD_ID, "Todo")

        assert exc_info.value.candidates == [f"Todo ({'a' * 27})", f"Todo ({'b' * 27})"]

    @pytest.mark.asyncio
    async def test_not_found(self, fake, client):
        """No title or id match is NotFoundError."""
        fake.on("GET", f"/api/v2/boards/{BOARD_ID}/blocks", [make_block("a" * 27, "Todo")])

        with pytest.raises(NotFoundError):
            await client.resolve_block(BOARD_ID, "Done")

    @pytest.mark.asyncio
    async def test_id_shaped_title_falls_back_to_title(self, fake, client):
        """An ID-shaped reference with no matching id is looked up by title."""
        fake.on(
            "GET",
            f"/api/v2/boards/{BOARD_ID}/blocks",
            [make_block("a1b2c3d4e5f6g7h8i9j0k1l2m3n", "implementationbacklogitems")],
        )

        block = await client.resolve_block(BOARD_ID, "implementationbacklogitems")

        assert block.id == "a1b2c3d4e5f6g7h8i9j0k1l2m3n"

    @pytest.mark.asyncio
    async def test_unknown_block_type_in_response(self, fake, client):
        """Block types this client does not know still resolve."""
        fake.on("GET", f"/api/v2/boards/{BOARD_ID}/blocks", [make_block(self.BLOCK_ID, "Legacy", "board")])

        block = await client.resolve_block(BOARD_ID, "Legacy")

        assert block.type == "board"


class TestBoards:
    """Tests for board operations."""

    @pytest.mark.asyncio
    async def test_update_board_without_properties_is_plain_patch(self, fake, client):
        """A title-only patch is sent as-is with no prior read."""
        fake.on("PATCH", f"/api/v2/boards/{BOARD_ID}", handler=lambda request: httpx.Response(200, json=make_board()))

        await client.update_board(BOARD_ID, BoardPatch(title="Renamed"))

        assert fake.paths() == [f"/api/v2/boards/{BOARD_ID}"]
        assert fake.body() == {"title": "Renamed"}

    @pytest.mark.asyncio
    async def test_update_board_merges_properties_and_templates(self, fake, client):
        """Property and template changes are merged into the current board."""
        current = make_board(
            properties={"keep": 1, "drop": 2},
            cardProperties=[{"id": "p1", "name": "Status", "type": "select"}],
        )
        fake.on("GET", f"/api/v2/boards/{BOARD_ID}", current)
        fake.on("PATCH", f"/api/v2/boards/{BOARD_ID}", handler=lambda request: httpx.Response(200, json=current))

        patch = BoardPatch(
            updated_properties={"new": 3},
            deleted_properties=["drop"],
            updated_card_properties=[PropertyTemplate(id="p2", name="Due", type="date")],
        )
        await client.update_board(BOARD_ID, patch)

        body = fake.body()
        assert body["updatedProperties"] == {"keep": 1, "new": 3}
        assert [t["id"] for t in body["updatedCardProperties"]] == ["p1", "p2"]
        assert "deletedProperties" not in body
        assert "cardProperties" not in body

    @pytest.mark.asyncio
    async def test_duplicate_board(self, fake, client):
        """Duplicating returns the created boards and blocks."""
        fake.on(
            "POST",
            f"/api/v2/boards/{BOARD_ID}/duplicate",
            {"boards": [make_board("n" * 27, "Copy")], "blocks": [make_block("c" * 27, "Card", "card")]},
        )

        result = await client.duplicate_board(BOARD_ID, as_template=True)

        assert result["boards"][0].title == "Copy"
        assert result["blocks"][0].type == "card"
        assert fake.calls[0].url.params["asTemplate"] == "true"


class TestBlocks:
    """Tests for block operations."""

    @pytest.mark.asyncio
    async def test_create_blocks_generates_ids(self, fake, client):
        """Blocks without id get a 27-character id and timestamps; given ids are kept."""
        fake.on("POST", f"/api/v2/boards/{BOARD_ID}/blocks", handler=echo())

        blocks = await client.create_blocks(
            BOARD_ID,
            [
                CreateBlock(board_id=BOARD_ID, type="card", title="Parent"),
                CreateBlock(id="child" * 6, board_id=BOARD_ID, type="text", title="Child"),
            ],
        )

        sent = fake.body()
        assert len(sent[0]["id"]) == ID_LENGTH
        assert sent[0]["id"].isalnum() and sent[0]["id"].islower()
        assert sent[1]["id"] == "child" * 6
        assert sent[0]["createAt"] == sent[0]["updateAt"] > 0
        assert [b.title for b in blocks] == ["Parent", "Child"]

    @pytest.mark.asyncio
    async def test_get_blocks_filters(self, fake, client):
        """parent_id and type are passed as query parameters."""
        fake.on("GET", f"/api/v2/boards/{BOARD_ID}/blocks", [])

        await client.get_blocks(BOARD_ID, parent_id="p" * 27, block_type="text")

        params = fake.calls[0].url.params
        assert params["parent_id"] == "p" * 27
        assert params["type"] == "text"

    @pytest.mark.asyncio
    async def test_patch_blocks_length_mismatch(self, fake, client):
        """Unequal id and patch lists are rejected before any request."""
        batch = BlockPatchBatch(block_ids=["a" * 27, "b" * 27], block_patches=[BlockPatch(title="x")])

        with pytest.raises(ValidationError, match="same length"):
            await client.patch_blocks(BOARD_ID, batch)

        assert fake.calls == []

    @pytest.mark.asyncio
    async def test_patch_blocks_payload(self, fake, client):
        """The batch is sent with snake_case envelope keys."""
        fake.on("PATCH", f"/api/v2/boards/{BOARD_ID}/blocks/", {})
        batch = BlockPatchBatch(block_ids=["a" * 27], block_patches=[BlockPatch(updated_fields={"icon": "x"})])

        await client.patch_blocks(BOARD_ID, batch)

        assert fake.body() == {"block_ids": ["a" * 27], "block_patches": [{"updatedFields": {"icon": "x"}}]}


class TestCards:
    """Tests for card operations."""

    @pytest.mark.asyncio
    async def test_update_card_merges_properties(self, fake, client):
        """The sent updatedProperties is the merged map; deletedProperties is dropped."""
        fake.on("GET", f"/api/v2/cards/{CARD_ID}", {"id": CARD_ID, "properties": {"a": "1", "b": "2"}})
        fake.on("PATCH", f"/api/v2/cards/{CARD_ID}", handler=echo(id=CARD_ID))

        await client.update_card(
            CARD_ID,
            CardPatch(updated_properties={"b": "3", "c": "4"}, deleted_properties=["a"]),
        )

        assert fake.body() == {"updatedProperties": {"b": "3", "c": "4"}}

    @pytest.mark.asyncio
    async def test_update_card_preserves_untouched_properties(self, fake, client):
        """Properties not named in the update are carried over."""
        fake.on("GET", f"/api/v2/cards/{CARD_ID}", {"id": CARD_ID, "properties": {"a": "1", "b": "2"}})
        fake.on("PATCH", f"/api/v2/cards/{CARD_ID}", handler=echo(id=CARD_ID))

        await client.update_card(CARD_ID, CardPatch(updated_properties={"b": "3", "c": "4"}))

        assert fake.body()["updatedProperties"] == {"a": "1", "b": "3", "c": "4"}

    @pytest.mark.asyncio
    async def test_update_card_title_only_skips_read(self, fake, client):
        """Without property changes there is no prior GET."""
        fake.on("PATCH", f"/api/v2/cards/{CARD_ID}", handler=echo(id=CARD_ID))

        card = await client.update_card(CARD_ID, CardPatch(title="New title"))

        assert fake.paths() == [f"/api/v2/cards/{CARD_ID}"]
        assert card.title == "New title"

    @pytest.mark.asyncio
    async def test_list_cards_caps_page_size(self, fake, client):
        """per_page above the maximum is clamped."""
        fake.on("GET", f"/api/v2/boards/{BOARD_ID}/cards", [{"id": CARD_ID, "title": "One"}])

        cards = await client.list_cards(BOARD_ID, page=2, per_page=500)

        params = fake.calls[0].url.params
        assert params["per_page"] == str(MAX_CARDS_PER_PAGE)
        assert params["page"] == "2"
        assert cards[0].title == "One"


class TestBoardsAndBlocks:
    """Tests for the combined board/block endpoints."""

    @pytest.mark.asyncio
    async def test_insert_assigns_ids(self, fake, client):
        """Boards and blocks without ids get generated ones."""
        fake.on("POST", "/api/v2/boards-and-blocks", handler=echo())
        envelope = BoardsAndBlocks(
            boards=[CreateBoard(id="tmpboard" * 4, team_id="0", title="New")],
            blocks=[CreateBlock(board_id="tmpboard" * 4, type="card", title="Card")],
        )

        result = await client.insert_boards_and_blocks(envelope)

        sent = fake.body()
        assert sent["boards"][0]["id"] == "tmpboard" * 4
        assert len(sent["blocks"][0]["id"]) == ID_LENGTH
        assert result["boards"][0].title == "New"
        assert result["blocks"][0].board_id == "tmpboard" * 4

    @pytest.mark.asyncio
    async def test_patch_does_not_check_lengths(self, fake, client):
        """Mismatched arrays are passed through to the server unchanged."""
        fake.on("PATCH", "/api/v2/boards-and-blocks", {"boards": [], "blocks": []})
        envelope = PatchBoardsAndBlocks(board_ids=[BOARD_ID], board_patches=[])

        await client.patch_boards_and_blocks(envelope)

        assert fake.body()["boardIDs"] == [BOARD_ID]
        assert fake.body()["boardPatches"] == []


class TestEndpoints:
    """Tests for request paths of the simpler endpoints."""

    @pytest.mark.asyncio
    async def test_membership_and_users(self, fake, client):
        """Membership and user calls hit the board and team routes."""
        fake.on("POST", f"/api/v2/boards/{BOARD_ID}/join", {"boardId": BOARD_ID, "userId": "u1"})
        fake.on("POST", f"/api/v2/boards/{BOARD_ID}/leave", {})
        fake.on("GET", f"/api/v2/boards/{BOARD_ID}/members", [{"boardId": BOARD_ID, "userId": "u1"}])
        fake.on("GET", "/api/v2/teams/0/users", [{"id": "u1", "username": "alice"}])

        member = await client.join_board(BOARD_ID)
        await client.leave_board(BOARD_ID)
        members = await client.get_board_members(BOARD_ID)
        users = await client.list_team_users()

        assert member.user_id == "u1"
        assert members[0].board_id == BOARD_ID
        assert users[0].username == "alice"

    @pytest.mark.asyncio
    async def test_block_restore_and_copy(self, fake, client):
        """undelete tolerates an empty body; duplicate returns the copies."""
        block_id = "k" * 27
        fake.on("POST", f"/api/v2/boards/{BOARD_ID}/blocks/{block_id}/undelete", handler=lambda r: httpx.Response(200))
        fake.on("POST", f"/api/v2/boards/{BOARD_ID}/blocks/{block_id}/duplicate", [make_block("c" * 27, "Copy")])
        fake.on("POST", f"/api/v2/boards/{BOARD_ID}/undelete", handler=lambda r: httpx.Response(200))

        assert await client.undelete_block(BOARD_ID, block_id) is None
        copies = await client.duplicate_block(BOARD_ID, block_id)
        await client.undelete_board(BOARD_ID)

        assert copies[0].title == "Copy"
        assert fake.calls[1].url.params["asTemplate"] == "false"

    @pytest.mark.asyncio
    async def test_delete_boards_and_blocks_sends_body(self, fake, client):
        """The combined delete carries its ids in the request body."""
        fake.on("DELETE", "/api/v2/boards-and-blocks", handler=lambda r: httpx.Response(200))

        await client.delete_boards_and_blocks(DeleteBoardsAndBlocks(boards=[BOARD_ID], blocks=["k" * 27]))

        assert fake.body() == {"boards": [BOARD_ID], "blocks": ["k" * 27]}
