"""
Pagination Translator: generic page requests to GraphQL cursor arguments.

A caller asks for ``per_page`` items after an opaque ``after`` cursor.
GitHub's connections take ``first``/``after``; ``after`` must always be bound,
as an explicit ``null`` when the caller has no cursor, because the documents
declare ``$after: String`` and omit nothing structurally for it.
"""

from dataclasses import dataclass
from typing import Any, Final

from gh_discussions.shared.exceptions import InvalidArgumentError

DEFAULT_GRAPHQL_PAGE_SIZE: Final = 30
MAX_GRAPHQL_PAGE_SIZE: Final = 100


@dataclass(frozen=True)
class PageRequest:
    """A caller's forward-pagination request."""

    per_page: int | None = None
    after: str | None = None


@dataclass(frozen=True)
class GraphQLPageParams:
    """Remote-ready pagination arguments."""

    first: int
    after: str | None

    def as_variables(self) -> dict[str, Any]:
        # ``after`` is always present so an absent cursor is sent as null.
        return {"first": self.first, "after": self.after}


def to_graphql_params(request: PageRequest | None = None) -> GraphQLPageParams:
    """Translate a page request into ``first``/``after`` arguments.

    Args:
        request: The caller's page request.  ``None`` means "first page,
            default size".

    Returns:
        GraphQLPageParams with ``first`` defaulted to
        DEFAULT_GRAPHQL_PAGE_SIZE and ``after`` left as ``None`` when absent.

    Raises:
        InvalidArgumentError: If ``per_page`` is not an integer in
            ``1..MAX_GRAPHQL_PAGE_SIZE``.
    """
    request = request or PageRequest()
    first = request.per_page
    if first is None:
        first = DEFAULT_GRAPHQL_PAGE_SIZE
    elif isinstance(first, bool) or not isinstance(first, int):
        raise InvalidArgumentError(f"perPage must be an integer, got {first!r}")
    elif first <= 0:
        raise InvalidArgumentError(f"perPage value {first} must be a positive integer")
    elif first > MAX_GRAPHQL_PAGE_SIZE:
        raise InvalidArgumentError(
            f"perPage value {first} exceeds maximum of {MAX_GRAPHQL_PAGE_SIZE}"
        )

    after = request.after or None
    return GraphQLPageParams(first=first, after=after)
