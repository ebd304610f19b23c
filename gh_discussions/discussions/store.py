"""
Discussion Store: GitHub Discussions operations over GraphQL.

Each public method corresponds to one MCP tool and returns a plain dict
ready for JSON serialisation.  Every operation makes at most two remote
calls, in sequence: one lookup that resolves the node IDs a mutation
needs (a category name is resolved in the same request), then the query
or mutation itself.  A failed lookup raises before the mutation is sent.
"""

import logging
from typing import Any, Final

from gh_discussions.discussions import queries
from gh_discussions.discussions.fragments import DiscussionDetail, get_path, parse_model
from gh_discussions.discussions.normalizer import (
    normalize_category,
    normalize_comment,
    normalize_connection,
    normalize_discussion_detail,
    normalize_discussions,
)
from gh_discussions.discussions.pagination import (
    GraphQLPageParams,
    PageRequest,
    to_graphql_params,
)
from gh_discussions.discussions.resolvers import (
    get_discussion_id,
    lookup_discussion,
    lookup_repository,
)
from gh_discussions.discussions.variants import VariableBuilder, resolve_ordering
from gh_discussions.shared.exceptions import InvalidArgumentError
from gh_discussions.shared.graphql import GraphQLExecutor

logger = logging.getLogger("discussions.store")

# Discussions at the organisation level live in the owner's .github repository.
ORGANISATION_REPO: Final = ".github"
CATEGORY_LIST_PAGE_SIZE: Final = 25


def _require(value: Any, name: str) -> Any:
    if value is None or value == "":
        raise InvalidArgumentError(f"missing required parameter: {name}")
    return value


def _require_number(value: Any, name: str = "discussion_number") -> int:
    _require(value, name)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgumentError(f"{name} must be a positive integer, got {value!r}")
    return value


class DiscussionStore:
    """Discussions operations bound to one GraphQL executor."""

    def __init__(self, executor: GraphQLExecutor):
        self._executor = executor

    # ─── Tool 1: list_discussions ─────────────────────────

    async def list_discussions(
        self,
        owner: str,
        repo: str | None = None,
        category: str | None = None,
        order_by: str | None = None,
        direction: str | None = None,
        page: PageRequest | None = None,
    ) -> dict[str, Any]:
        """List discussions, optionally filtered by category ID and ordered."""
        _require(owner, "owner")
        repo = repo or ORGANISATION_REPO
        params = to_graphql_params(page)
        ordering = resolve_ordering(
            order_by, direction, allowed_fields=queries.DISCUSSION_ORDER_FIELDS,
        )

        plan = queries.DISCUSSIONS_CONNECTION.plan(
            {"owner": owner, "repo": repo},
            params,
            filter_value=category,
            ordering=ordering,
        )
        logger.info(
            "list_discussions %s/%s variant=%s first=%d",
            owner, repo, plan.variant.name, params.first,
        )
        data = await self._executor.execute(plan.query, plan.variables)
        return normalize_discussions(plan.bind(data))

    # ─── Tool 2: get_discussion ───────────────────────────

    async def get_discussion(
        self, owner: str, repo: str, discussion_number: int,
    ) -> dict[str, Any]:
        """Fetch one discussion by number."""
        _require(owner, "owner")
        _require(repo, "repo")
        _require_number(discussion_number)

        data = await self._executor.execute(
            queries.GET_DISCUSSION,
            {"owner": owner, "repo": repo, "discussionNumber": discussion_number},
        )
        detail = parse_model(DiscussionDetail, data, "repository", "discussion")
        return normalize_discussion_detail(detail)

    # ─── Tool 3: get_discussion_comments ──────────────────

    async def get_discussion_comments(
        self,
        owner: str,
        repo: str,
        discussion_number: int,
        page: PageRequest | None = None,
    ) -> dict[str, Any]:
        """List top-level comments of a discussion."""
        _require(owner, "owner")
        _require(repo, "repo")
        _require_number(discussion_number)

        plan = queries.DISCUSSION_COMMENTS_CONNECTION.plan(
            {"owner": owner, "repo": repo, "discussionNumber": discussion_number},
            to_graphql_params(page),
        )
        data = await self._executor.execute(plan.query, plan.variables)
        return normalize_connection(plan.bind(data), "comments", normalize_comment)

    # ─── Tool 4: list_discussion_categories ───────────────

    async def list_discussion_categories(
        self, owner: str, repo: str | None = None,
    ) -> dict[str, Any]:
        """List discussion categories with their id and name."""
        _require(owner, "owner")
        repo = repo or ORGANISATION_REPO

        plan = queries.DISCUSSION_CATEGORIES_CONNECTION.plan(
            {"owner": owner, "repo": repo},
            GraphQLPageParams(first=CATEGORY_LIST_PAGE_SIZE, after=None),
        )
        data = await self._executor.execute(plan.query, plan.variables)
        return normalize_connection(plan.bind(data), "categories", normalize_category)

    # ─── Tool 5: create_discussion ────────────────────────

    async def create_discussion(
        self,
        owner: str,
        repo: str,
        title: str,
        body: str,
        category_id: str | None = None,
        category_name: str | None = None,
    ) -> dict[str, Any]:
        """Create a discussion; the category may be given by ID or by name."""
        _require(owner, "owner")
        _require(repo, "repo")
        _require(title, "title")
        _require(body, "body")
        if not category_id and not category_name:
            raise InvalidArgumentError("either category_id or category_name is required")

        repository_id, resolved_category = await lookup_repository(
            self._executor, owner, repo, category_id, category_name,
        )

        data = await self._executor.mutate(queries.CREATE_DISCUSSION, {
            "repositoryId": repository_id,
            "title": title,
            "body": body,
            "categoryId": resolved_category,
        })
        discussion = get_path(data, "createDiscussion", "discussion")
        logger.info("Created discussion #%s in %s/%s", discussion.get("number"), owner, repo)
        return {
            "id": str(discussion["id"]),
            "number": int(discussion["number"]),
            "url": discussion.get("url", ""),
        }

    # ─── Tool 6: update_discussion ────────────────────────

    async def update_discussion(
        self,
        owner: str,
        repo: str,
        discussion_number: int,
        title: str | None = None,
        body: str | None = None,
        category_id: str | None = None,
        category_name: str | None = None,
    ) -> dict[str, Any]:
        """Update title, body and/or category; only supplied fields change."""
        _require(owner, "owner")
        _require(repo, "repo")
        _require_number(discussion_number)
        if not any((title, body, category_id, category_name)):
            raise InvalidArgumentError(
                "at least one of title, body, category_id, or category_name must be provided"
            )

        discussion_id, new_category = await lookup_discussion(
            self._executor, owner, repo, discussion_number, category_id, category_name,
        )

        update = (
            VariableBuilder()
            .bind(discussionId=discussion_id)
            .bind_if(bool(title), title=title)
            .bind_if(bool(body), body=body)
            .bind_if(new_category is not None, categoryId=new_category)
            .build()
        )
        data = await self._executor.mutate(queries.UPDATE_DISCUSSION, update)
        discussion = get_path(data, "updateDiscussion", "discussion")
        return {
            "id": str(discussion["id"]),
            "number": int(discussion["number"]),
            "url": discussion.get("url", ""),
        }

    # ─── Tool 7: add_discussion_comment ───────────────────

    async def add_discussion_comment(
        self,
        owner: str,
        repo: str,
        discussion_number: int,
        body: str,
        reply_to_id: str | None = None,
    ) -> dict[str, Any]:
        """Comment on a discussion, optionally as a reply to another comment."""
        _require(owner, "owner")
        _require(repo, "repo")
        _require_number(discussion_number)
        _require(body, "body")

        discussion_id = await get_discussion_id(
            self._executor, owner, repo, discussion_number,
        )
        comment_input = (
            VariableBuilder()
            .bind(discussionId=discussion_id, body=body)
            .bind_if(bool(reply_to_id), replyToId=reply_to_id)
            .build()
        )
        data = await self._executor.mutate(queries.ADD_DISCUSSION_COMMENT, comment_input)
        comment = get_path(data, "addDiscussionComment", "comment")
        return {"id": str(comment["id"]), "url": comment.get("url", "")}

    # ─── Tool 8: update_discussion_comment ────────────────

    async def update_discussion_comment(self, comment_id: str, body: str) -> dict[str, Any]:
        _require(comment_id, "comment_id")
        _require(body, "body")

        data = await self._executor.mutate(
            queries.UPDATE_DISCUSSION_COMMENT, {"commentId": comment_id, "body": body},
        )
        comment = get_path(data, "updateDiscussionComment", "comment")
        return {"id": str(comment["id"]), "url": comment.get("url", "")}

    # ─── Tool 9: delete_discussion_comment ────────────────

    async def delete_discussion_comment(self, comment_id: str) -> dict[str, Any]:
        _require(comment_id, "comment_id")

        await self._executor.mutate(queries.DELETE_DISCUSSION_COMMENT, {"id": comment_id})
        logger.info("Deleted discussion comment %s", comment_id)
        return {"deleted": True, "commentId": comment_id}
