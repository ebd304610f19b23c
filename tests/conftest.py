"""
Shared fixtures: an in-memory GitHub GraphQL endpoint.

``FakeGitHub`` answers the operations the discussions tools send, keyed by
operation name, and serves a fixed five-discussion repository ``acme/core``
with real cursor semantics.  It plugs into ``GitHubGraphQLClient`` through
``httpx.MockTransport`` so the whole stack below the MCP layer is exercised.
"""

import copy
import json
import re
from typing import Any

import httpx
import pytest

from gh_discussions.discussions.store import DiscussionStore
from gh_discussions.shared.config import BaseServerSettings
from gh_discussions.shared.graphql import GitHubGraphQLClient

KNOWN_REPOS = {("acme", "core"), ("acme", ".github")}

CATEGORIES = [
    {"id": "DIC_general", "name": "General"},
    {"id": "DIC_qa", "name": "q&a"},
    {"id": "DIC_ideas", "name": "Ideas"},
]

DISCUSSIONS = [
    {
        "id": f"D_{n}",
        "number": n,
        "title": f"Discussion {n}",
        "body": f"Body of discussion {n}",
        "url": f"https://github.com/acme/core/discussions/{n}",
        "createdAt": f"2024-01-0{n}T10:00:00Z",
        "updatedAt": f"2024-03-0{6 - n}T10:00:00Z",
        "closed": n == 5,
        "isAnswered": n == 2,
        "answerChosenAt": "2024-02-02T12:30:00Z" if n == 2 else None,
        "author": {"login": "octocat"} if n != 4 else None,
        "category": copy.deepcopy(CATEGORIES[1] if n % 2 else CATEGORIES[0]),
    }
    for n in range(1, 6)
]

COMMENTS = {
    1: [
        {"id": f"DC_{i}", "body": f"Comment {i}", "url": f"https://github.com/acme/core/discussions/1#c{i}"}
        for i in range(1, 4)
    ],
}

_OPERATION = re.compile(r"\b(?:query|mutation)\s+(\w+)")


def _not_found(message: str, data: dict[str, Any]) -> dict[str, Any]:
    return {"data": data, "errors": [{"type": "NOT_FOUND", "message": message}]}


def _public(node: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in node.items() if k not in ("id", "body")}


class FakeGitHub:
    """Records every request and answers it from in-memory fixtures."""

    def __init__(self) -> None:
        self.requests: list[dict[str, Any]] = []
        self.discussions = copy.deepcopy(DISCUSSIONS)
        self.categories = copy.deepcopy(CATEGORIES)
        self.comments = copy.deepcopy(COMMENTS)
        self.fail_with: str | None = None

    # ─── Transport ────────────────────────────────────────

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append(payload)
        if self.fail_with is not None:
            return httpx.Response(200, json={"data": None, "errors": [{"message": self.fail_with}]})

        operation = _OPERATION.search(payload["query"]).group(1)
        body = getattr(self, f"op_{operation}")(payload.get("variables") or {})
        if "data" not in body:
            body = {"data": body}
        return httpx.Response(200, json=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def operations(self) -> list[str]:
        return [_OPERATION.search(r["query"]).group(1) for r in self.requests]

    # ─── Helpers ──────────────────────────────────────────

    @staticmethod
    def _connection(items: list[dict[str, Any]], variables: dict[str, Any]) -> dict[str, Any]:
        first = variables["first"]
        after = variables.get("after")
        start = 0 if after is None else int(after.split(":")[1]) + 1
        page = items[start:start + first]
        return {
            "nodes": page,
            "pageInfo": {
                "hasNextPage": start + first < len(items),
                "hasPreviousPage": start > 0,
                "startCursor": f"cursor:{start}" if page else None,
                "endCursor": f"cursor:{start + len(page) - 1}" if page else None,
            },
            "totalCount": len(items),
        }

    def _repo_missing(self, variables: dict[str, Any]) -> dict[str, Any] | None:
        if (variables.get("owner"), variables.get("repo")) in KNOWN_REPOS:
            return None
        return _not_found(
            f"Could not resolve to a Repository with the name "
            f"'{variables.get('owner')}/{variables.get('repo')}'.",
            {"repository": None},
        )

    def _find(self, number: int) -> dict[str, Any] | None:
        return next((d for d in self.discussions if d["number"] == number), None)

    def _with_categories(self, repository: dict[str, Any], variables: dict[str, Any]) -> dict[str, Any]:
        if variables.get("withCategories"):
            limit = variables["categoryLimit"]
            repository["discussionCategories"] = {"nodes": self.categories[:limit]}
        return repository

    # ─── Queries ──────────────────────────────────────────

    def op_ListDiscussions(self, variables: dict[str, Any]) -> dict[str, Any]:
        missing = self._repo_missing(variables)
        if missing:
            return missing
        items = list(self.discussions)
        if "categoryId" in variables:
            items = [d for d in items if d["category"]["id"] == variables["categoryId"]]
        if "orderByField" in variables:
            key = {"CREATED_AT": "createdAt", "UPDATED_AT": "updatedAt"}[variables["orderByField"]]
            items.sort(key=lambda d: d[key], reverse=variables["orderByDirection"] == "DESC")
        connection = self._connection([_public(d) for d in items], variables)
        return {"repository": {"discussions": connection}}

    def op_GetDiscussion(self, variables: dict[str, Any]) -> dict[str, Any]:
        discussion = self._find(variables["discussionNumber"])
        if discussion is None:
            return _not_found(
                f"Could not resolve to a Discussion with the number of {variables['discussionNumber']}.",
                {"repository": {"discussion": None}},
            )
        return {"repository": {"discussion": discussion}}

    def op_GetDiscussionId(self, variables: dict[str, Any]) -> dict[str, Any]:
        discussion = self._find(variables["discussionNumber"])
        repository = {"discussion": {"id": discussion["id"]} if discussion else None}
        return {"repository": self._with_categories(repository, variables)}

    def op_GetRepositoryId(self, variables: dict[str, Any]) -> dict[str, Any]:
        missing = self._repo_missing(variables)
        if missing:
            return missing
        repository = {"id": f"R_{variables['repo']}"}
        return {"repository": self._with_categories(repository, variables)}

    def op_GetDiscussionComments(self, variables: dict[str, Any]) -> dict[str, Any]:
        comments = self.comments.get(variables["discussionNumber"], [])
        return {"repository": {"discussion": {"comments": self._connection(comments, variables)}}}

    def op_ListDiscussionCategories(self, variables: dict[str, Any]) -> dict[str, Any]:
        missing = self._repo_missing(variables)
        if missing:
            return missing
        return {"repository": {"discussionCategories": self._connection(self.categories, variables)}}

    # ─── Mutations ────────────────────────────────────────

    def op_CreateDiscussion(self, variables: dict[str, Any]) -> dict[str, Any]:
        number = len(self.discussions) + 1
        created = {
            "id": f"D_{number}",
            "number": number,
            "url": f"https://github.com/acme/core/discussions/{number}",
        }
        self.discussions.append({**created, **variables["input"]})
        return {"createDiscussion": {"discussion": created}}

    def op_UpdateDiscussion(self, variables: dict[str, Any]) -> dict[str, Any]:
        target = next(d for d in self.discussions if d["id"] == variables["input"]["discussionId"])
        return {"updateDiscussion": {"discussion": {
            "id": target["id"], "number": target["number"], "url": target["url"],
        }}}

    def op_AddDiscussionComment(self, variables: dict[str, Any]) -> dict[str, Any]:
        return {"addDiscussionComment": {"comment": {
            "id": "DC_new", "url": "https://github.com/acme/core/discussions/1#new",
        }}}

    def op_UpdateDiscussionComment(self, variables: dict[str, Any]) -> dict[str, Any]:
        comment_id = variables["input"]["commentId"]
        return {"updateDiscussionComment": {"comment": {
            "id": comment_id, "url": f"https://github.com/acme/core/discussions/1#{comment_id}",
        }}}

    def op_DeleteDiscussionComment(self, variables: dict[str, Any]) -> dict[str, Any]:
        return {"deleteDiscussionComment": {"clientMutationId": None}}


# ─── Fixtures ────────────────────────────────────────────────


@pytest.fixture
def github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def settings() -> BaseServerSettings:
    return BaseServerSettings(
        github_token="test-token",
        github_graphql_url="https://api.github.test/graphql",
    )


@pytest.fixture
async def client(github, settings):
    async with GitHubGraphQLClient(settings, transport=github.transport()) as gql:
        yield gql


@pytest.fixture
def store(client) -> DiscussionStore:
    return DiscussionStore(client)
