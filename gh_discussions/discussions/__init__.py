"""Discussions: MCP server for GitHub Discussions over GraphQL."""

from gh_discussions.discussions.store import DiscussionStore

__all__ = [
    "DiscussionStore",
]
