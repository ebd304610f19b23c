"""
Unit tests for the Discussions MCP server tools.

Tool functions are called directly with the store swapped for one backed
by FakeGitHub, so the JSON each tool returns is checked end to end.
"""

import json
from contextlib import asynccontextmanager

import pytest
from mcp.server.fastmcp import FastMCP

from gh_discussions.discussions import server
from gh_discussions.shared.exceptions import (
    EncodingFailureError,
    InvalidArgumentError,
    NotFoundError,
)

READ_TOOLS = {
    "list_discussions",
    "get_discussion",
    "get_discussion_comments",
    "list_discussion_categories",
}


@pytest.fixture(autouse=True)
def fake_store(monkeypatch, store):
    """Route every tool call to the FakeGitHub-backed store."""

    @asynccontextmanager
    async def _open_store():
        yield store

    monkeypatch.setattr(server, "_open_store", _open_store)


# ─── Registration ───────────────────────────────────────────


class TestRegistration:
    async def test_read_tools_are_read_only(self):
        tools = {t.name: t for t in await server.mcp.list_tools()}
        assert READ_TOOLS <= set(tools)
        for name in READ_TOOLS:
            assert tools[name].annotations.readOnlyHint is True

    async def test_write_tools_registered(self):
        fresh = FastMCP("test")
        server.register_write_tools(fresh)
        tools = {t.name: t for t in await fresh.list_tools()}
        assert set(tools) == set(server.WRITE_TOOLS)
        assert tools["create_discussion"].annotations.readOnlyHint is False
        assert tools["delete_discussion_comment"].annotations.destructiveHint is True

    async def test_list_discussions_schema_enums(self):
        tools = {t.name: t for t in await server.mcp.list_tools()}
        schema = json.dumps(tools["list_discussions"].inputSchema)
        assert "CREATED_AT" in schema
        assert "DESC" in schema


# ─── Tool calls ─────────────────────────────────────────────


class TestToolCalls:
    async def test_list_discussions_end_to_end(self):
        first = json.loads(await server.list_discussions(owner="acme", repo="core", per_page=2))
        assert [d["number"] for d in first["discussions"]] == [1, 2]
        assert first["pageInfo"]["hasNextPage"] is True
        assert first["totalCount"] == 5

        second = json.loads(await server.list_discussions(
            owner="acme", repo="core", per_page=2, after=first["pageInfo"]["endCursor"],
        ))
        assert [d["number"] for d in second["discussions"]] == [3, 4]

    async def test_empty_strings_mean_not_given(self, github):
        await server.list_discussions(owner="acme", repo="", category="")
        variables = github.requests[0]["variables"]
        assert variables["repo"] == ".github"
        assert "categoryId" not in variables

    async def test_get_discussion(self):
        result = json.loads(await server.get_discussion("acme", "core", 1))
        assert result["title"] == "Discussion 1"
        assert "answerChosenAt" not in result

    async def test_get_comments(self):
        result = json.loads(await server.get_discussion_comments("acme", "core", 1))
        assert len(result["comments"]) == 3

    async def test_list_categories(self):
        result = json.loads(await server.list_discussion_categories("acme", "core"))
        assert {c["name"] for c in result["categories"]} == {"General", "q&a", "Ideas"}

    async def test_create_discussion(self):
        result = json.loads(await server.create_discussion(
            "acme", "core", "Title", "Body", category_name="Q&A",
        ))
        assert result["number"] == 6

    async def test_update_discussion_requires_a_field(self):
        with pytest.raises(InvalidArgumentError):
            await server.update_discussion("acme", "core", 1)

    async def test_add_and_delete_comment(self):
        added = json.loads(await server.add_discussion_comment("acme", "core", 1, "hello"))
        assert added["id"] == "DC_new"
        deleted = json.loads(await server.delete_discussion_comment(added["id"]))
        assert deleted["deleted"] is True

    async def test_update_comment(self):
        result = json.loads(await server.update_discussion_comment("DC_1", "edited"))
        assert result["id"] == "DC_1"

    async def test_errors_propagate(self):
        with pytest.raises(NotFoundError):
            await server.create_discussion("acme", "core", "T", "B", category_name="Nope")


class TestEncoding:
    async def test_unserialisable_result(self):
        with pytest.raises(EncodingFailureError, match="failed to encode"):
            server._to_json({"when": object()})

    async def test_plain_result(self):
        assert json.loads(server._to_json({"a": [1, 2]})) == {"a": [1, 2]}
