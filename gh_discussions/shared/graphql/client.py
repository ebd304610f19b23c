"""
GitHub GraphQL Client

Thin async executor over the GitHub GraphQL endpoint.
Reads the endpoint and token from settings and owns one ``httpx.AsyncClient``
for the lifetime of a single tool call.  Query documents and variable maps
are built by the callers; this module only ships them and unwraps ``data``.
"""

import logging
from typing import Any, Protocol

import httpx

from gh_discussions.shared.config import BaseServerSettings
from gh_discussions.shared.exceptions import NotFoundError, RemoteFailureError

logger = logging.getLogger("shared.graphql.client")


class GraphQLExecutor(Protocol):
    """What the discussions layer needs from a GraphQL transport."""

    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]: ...

    async def mutate(self, mutation: str, input: dict[str, Any]) -> dict[str, Any]: ...


class GitHubGraphQLClient:
    """
    Executes GraphQL queries and mutations against GitHub.

    Usage
    -----
    client = GitHubGraphQLClient(settings)
    data = await client.execute(query, {"owner": "acme", "repo": "core"})
    await client.close()

    The client can also be used as an async context-manager:

        async with GitHubGraphQLClient(settings) as client:
            await client.mutate(mutation, {"body": "..."})
    """

    def __init__(
        self,
        settings: BaseServerSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = settings or BaseServerSettings()
        self._url = settings.github_graphql_url
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "gh-discussions-mcp",
        }
        if settings.github_token:
            headers["Authorization"] = f"Bearer {settings.github_token}"
        self._http = httpx.AsyncClient(
            headers=headers,
            timeout=settings.request_timeout,
            transport=transport,
        )

    # ─── Lifecycle ──────────────────────────────────────────

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    async def __aenter__(self) -> "GitHubGraphQLClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ─── Query helpers ──────────────────────────────────────

    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a GraphQL document and return its ``data`` object.

        Args:
            query: GraphQL query document.
            variables: Variable bindings.  Keys that are present with a
                ``None`` value are sent as explicit JSON ``null``.

        Returns:
            The ``data`` member of the GraphQL response.

        Raises:
            NotFoundError: If GitHub reports a ``NOT_FOUND`` error.
            RemoteFailureError: On transport errors, HTTP errors, malformed
                bodies, or any other GraphQL error.  The remote message is
                passed through unchanged.
        """
        payload = {"query": query, "variables": variables or {}}
        try:
            response = await self._http.post(self._url, json=payload)
        except httpx.HTTPError as exc:
            logger.error("GraphQL request to %s failed: %s", self._url, exc)
            raise RemoteFailureError(str(exc)) from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400:
            message = _error_message(body) or response.text or response.reason_phrase
            raise RemoteFailureError(message, status_code=response.status_code)

        if not isinstance(body, dict):
            raise RemoteFailureError(
                "GitHub returned a non-JSON GraphQL response",
                status_code=response.status_code,
            )

        errors = body.get("errors") or []
        if errors:
            message = "; ".join(str(e.get("message", e)) for e in errors)
            if any(e.get("type") == "NOT_FOUND" for e in errors):
                raise NotFoundError(message)
            raise RemoteFailureError(message, status_code=response.status_code)

        return body.get("data") or {}

    async def mutate(self, mutation: str, input: dict[str, Any]) -> dict[str, Any]:
        """Run a mutation document whose single variable is ``$input``."""
        return await self.execute(mutation, {"input": input})


def _error_message(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    if body.get("message"):
        return str(body["message"])
    errors = body.get("errors") or []
    if errors:
        return "; ".join(str(e.get("message", e)) for e in errors)
    return None
