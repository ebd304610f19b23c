"""
Discussions MCP Server

Exposes GitHub Discussions tools backed by the GitHub GraphQL API.  Each
tool's docstring is read by the calling LLM so it knows *when* and *how*
to call it.  Write tools are not registered when ``DISCUSSIONS_READ_ONLY``
is set.

Run as:  python -m gh_discussions.discussions.server
"""

import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Literal

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings
from mcp.types import ToolAnnotations

from gh_discussions.discussions.config import DiscussionsSettings
from gh_discussions.discussions.pagination import PageRequest
from gh_discussions.discussions.store import DiscussionStore
from gh_discussions.shared.exceptions import EncodingFailureError
from gh_discussions.shared.graphql import GitHubGraphQLClient
from gh_discussions.shared.logging import generate_correlation_id, setup_logging

logger = setup_logging("discussions", level="INFO")

# ─── Shared resources (lazy init) ─────────────────────────

# Configure transport security to allow Docker service names
transport_security = TransportSecuritySettings(
    enable_dns_rebinding_protection=False,
    allowed_hosts=["discussions", "discussions:8005", "localhost", "127.0.0.1", "0.0.0.0"],
    allowed_origins=["*"],
)

mcp = FastMCP("GitHubDiscussions", transport_security=transport_security)

_settings: DiscussionsSettings | None = None


def _get_settings() -> DiscussionsSettings:
    """Lazy-initialise settings from environment variables."""
    global _settings
    if _settings is None:
        _settings = DiscussionsSettings()
    return _settings


@asynccontextmanager
async def _open_store() -> AsyncIterator[DiscussionStore]:
    """Open a GraphQL client for one tool call and close it afterwards."""
    async with GitHubGraphQLClient(_get_settings()) as client:
        yield DiscussionStore(client)


def _to_json(result: Any) -> str:
    try:
        return json.dumps(result)
    except (TypeError, ValueError) as exc:
        raise EncodingFailureError(f"failed to encode result: {exc}") from exc


async def _call(
    tool: str,
    operation: Callable[[DiscussionStore], Awaitable[dict[str, Any]]],
    **log_args: Any,
) -> str:
    correlation_id = generate_correlation_id()
    logger.info("[%s] %s INPUT %s", correlation_id, tool, log_args)
    async with _open_store() as store:
        result = await operation(store)
    logger.info("[%s] %s OK", correlation_id, tool)
    return _to_json(result)


# ─── Read tools ───────────────────────────────────────────


@mcp.tool(annotations=ToolAnnotations(title="List discussions", readOnlyHint=True))
async def list_discussions(
    owner: str,
    repo: str = "",
    category: str = "",
    order_by: Literal["CREATED_AT", "UPDATED_AT"] | None = None,
    direction: Literal["ASC", "DESC"] | None = None,
    per_page: int | None = None,
    after: str | None = None,
) -> str:
    """List discussions for a repository or organisation.

    Returns ``discussions`` (number, title, url, author, category,
    createdAt, updatedAt, closed, isAnswered and, only for answered
    discussions, answerChosenAt), plus ``pageInfo`` and ``totalCount``.
    Pass ``pageInfo.endCursor`` back as ``after`` to get the next page.

    Args:
        owner: Repository owner.
        repo: Repository name.  If empty, discussions are listed at the
              organisation level (the owner's ``.github`` repository).
        category: Optional discussion category ID to filter by.  Use
              list_discussion_categories to find IDs.
        order_by: Order discussions by field.  Ignored unless
              ``direction`` is also given.
        direction: Order direction.  Ignored unless ``order_by`` is also
              given.
        per_page: Results per page (1-100, default 30).
        after: Cursor from a previous page's ``pageInfo.endCursor``.
    """
    return await _call(
        "list_discussions",
        lambda store: store.list_discussions(
            owner, repo or None, category or None, order_by, direction,
            PageRequest(per_page=per_page, after=after),
        ),
        owner=owner, repo=repo, category=category, order_by=order_by,
        direction=direction, per_page=per_page, after=after,
    )


@mcp.tool(annotations=ToolAnnotations(title="Get discussion", readOnlyHint=True))
async def get_discussion(owner: str, repo: str, discussion_number: int) -> str:
    """Get a specific discussion by its number.

    Args:
        owner: Repository owner.
        repo: Repository name.
        discussion_number: Discussion number.
    """
    return await _call(
        "get_discussion",
        lambda store: store.get_discussion(owner, repo, discussion_number),
        owner=owner, repo=repo, discussion_number=discussion_number,
    )


@mcp.tool(annotations=ToolAnnotations(title="Get discussion comments", readOnlyHint=True))
async def get_discussion_comments(
    owner: str,
    repo: str,
    discussion_number: int,
    per_page: int | None = None,
    after: str | None = None,
) -> str:
    """Get comments from a discussion.

    Args:
        owner: Repository owner.
        repo: Repository name.
        discussion_number: Discussion number.
        per_page: Results per page (1-100, default 30).
        after: Cursor from a previous page's ``pageInfo.endCursor``.
    """
    return await _call(
        "get_discussion_comments",
        lambda store: store.get_discussion_comments(
            owner, repo, discussion_number, PageRequest(per_page=per_page, after=after),
        ),
        owner=owner, repo=repo, discussion_number=discussion_number,
        per_page=per_page, after=after,
    )


@mcp.tool(annotations=ToolAnnotations(title="List discussion categories", readOnlyHint=True))
async def list_discussion_categories(owner: str, repo: str = "") -> str:
    """List discussion categories with their id and name.

    Args:
        owner: Repository owner.
        repo: Repository name.  If empty, categories are listed at the
              organisation level.
    """
    return await _call(
        "list_discussion_categories",
        lambda store: store.list_discussion_categories(owner, repo or None),
        owner=owner, repo=repo,
    )


# ─── Write tools ──────────────────────────────────────────


async def create_discussion(
    owner: str,
    repo: str,
    title: str,
    body: str,
    category_id: str = "",
    category_name: str = "",
) -> str:
    """Create a new discussion in a repository.

    Args:
        owner: Repository owner.
        repo: Repository name.
        title: Discussion title.
        body: Discussion body (Markdown).
        category_id: Discussion category node ID.  Used as-is if given.
        category_name: Discussion category name, matched case-insensitively.
              Used when category_id is empty.
    """
    return await _call(
        "create_discussion",
        lambda store: store.create_discussion(
            owner, repo, title, body, category_id or None, category_name or None,
        ),
        owner=owner, repo=repo, category_id=category_id, category_name=category_name,
    )


async def update_discussion(
    owner: str,
    repo: str,
    discussion_number: int,
    title: str = "",
    body: str = "",
    category_id: str = "",
    category_name: str = "",
) -> str:
    """Update a discussion's title, body or category.

    At least one of title, body, category_id or category_name is required;
    fields left empty are not changed.

    Args:
        owner: Repository owner.
        repo: Repository name.
        discussion_number: Discussion number.
        title: New title.
        body: New body (Markdown).
        category_id: New category node ID.
        category_name: New category name, resolved to an ID.
    """
    return await _call(
        "update_discussion",
        lambda store: store.update_discussion(
            owner, repo, discussion_number,
            title or None, body or None, category_id or None, category_name or None,
        ),
        owner=owner, repo=repo, discussion_number=discussion_number,
    )


async def add_discussion_comment(
    owner: str,
    repo: str,
    discussion_number: int,
    body: str,
    reply_to_id: str = "",
) -> str:
    """Add a comment to a discussion.

    Args:
        owner: Repository owner.
        repo: Repository name.
        discussion_number: Discussion number.
        body: Comment body (Markdown).
        reply_to_id: Optional discussion comment node ID to reply to.
    """
    return await _call(
        "add_discussion_comment",
        lambda store: store.add_discussion_comment(
            owner, repo, discussion_number, body, reply_to_id or None,
        ),
        owner=owner, repo=repo, discussion_number=discussion_number,
    )


async def update_discussion_comment(comment_id: str, body: str) -> str:
    """Update an existing discussion comment.

    Args:
        comment_id: Discussion comment node ID.
        body: New comment body (Markdown).
    """
    return await _call(
        "update_discussion_comment",
        lambda store: store.update_discussion_comment(comment_id, body),
        comment_id=comment_id,
    )


async def delete_discussion_comment(comment_id: str) -> str:
    """Delete an existing discussion comment.

    Args:
        comment_id: Discussion comment node ID.
    """
    return await _call(
        "delete_discussion_comment",
        lambda store: store.delete_discussion_comment(comment_id),
        comment_id=comment_id,
    )


WRITE_TOOLS: dict[str, tuple[Callable[..., Awaitable[str]], str]] = {
    "create_discussion": (create_discussion, "Create discussion"),
    "update_discussion": (update_discussion, "Update discussion"),
    "add_discussion_comment": (add_discussion_comment, "Add discussion comment"),
    "update_discussion_comment": (update_discussion_comment, "Update discussion comment"),
    "delete_discussion_comment": (delete_discussion_comment, "Delete discussion comment"),
}


def register_write_tools(server: FastMCP) -> None:
    for name, (fn, title) in WRITE_TOOLS.items():
        server.add_tool(
            fn,
            name=name,
            annotations=ToolAnnotations(
                title=title,
                readOnlyHint=False,
                destructiveHint=name == "delete_discussion_comment",
            ),
        )


if not _get_settings().read_only:
    register_write_tools(mcp)


# ─── Entry point ──────────────────────────────────────────


def main() -> None:
    settings = _get_settings()
    setup_logging("discussions", level=settings.log_level)

    if settings.transport == "stdio":
        logger.info("Starting Discussions MCP server (stdio transport)")
        mcp.run()
        return

    import uvicorn

    logger.info(
        "Starting Discussions MCP server (SSE transport on %s:%d)",
        settings.host, settings.port,
    )
    uvicorn.run(mcp.sse_app(), host=settings.host, port=settings.port, log_level="info")


if __name__ == "__main__":
    main()
