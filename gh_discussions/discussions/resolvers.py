"""
Lookup Resolvers: human identifiers to GitHub node IDs.

Mutations take opaque node IDs, so a category name or a discussion number
has to be resolved first.  Every resolver either returns an ID or raises;
nothing here guesses.

``lookup_repository`` and ``lookup_discussion`` resolve a category name in
the same request as the node ID, which keeps every mutation to one lookup
followed by the mutation itself.
"""

import logging
from typing import Any, Final, Iterable

from gh_discussions.discussions.fragments import (
    CategoryList,
    CategoryNode,
    ResultFragment,
    get_path,
    parse_model,
)
from gh_discussions.discussions.pagination import GraphQLPageParams
from gh_discussions.discussions.queries import (
    DISCUSSION_CATEGORIES_CONNECTION,
    GET_DISCUSSION_ID,
    GET_REPOSITORY_ID,
)
from gh_discussions.shared.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    RemoteFailureError,
)
from gh_discussions.shared.graphql import GraphQLExecutor

logger = logging.getLogger("discussions.resolvers")

CATEGORY_LOOKUP_PAGE_SIZE: Final = 100


def match_category(categories: Iterable[CategoryNode], category_name: str) -> str:
    """Return the ID of the category whose name equals ``category_name``, ignoring case."""
    wanted = category_name.casefold()
    for category in categories:
        if category.name.casefold() == wanted:
            logger.debug("Resolved category %r to %s", category_name, category.id)
            return category.id

    raise NotFoundError(
        f"discussion category {category_name!r} not found; "
        "use list_discussion_categories to see available categories"
    )


async def resolve_category_id(
    executor: GraphQLExecutor,
    owner: str,
    repo: str,
    category_id: str | None = None,
    category_name: str | None = None,
) -> str:
    """Return a discussion category node ID.

    An explicit ``category_id`` is trusted and returned unchanged.  Otherwise
    the repository's categories are listed and ``category_name`` must equal
    one of them exactly, ignoring case.

    Raises:
        InvalidArgumentError: If neither an ID nor a name is given.
        NotFoundError: If no category has that name.
    """
    if category_id:
        return category_id
    if not category_name:
        raise InvalidArgumentError("either category_id or category_name is required")

    plan = DISCUSSION_CATEGORIES_CONNECTION.plan(
        {"owner": owner, "repo": repo},
        GraphQLPageParams(first=CATEGORY_LOOKUP_PAGE_SIZE, after=None),
    )
    data = await executor.execute(plan.query, plan.variables)
    fragment = ResultFragment[CategoryNode].from_result(data, *plan.path)
    return match_category(fragment.nodes, category_name)


async def lookup_repository(
    executor: GraphQLExecutor,
    owner: str,
    repo: str,
    category_id: str | None = None,
    category_name: str | None = None,
) -> tuple[str, str | None]:
    """Return ``(repository_id, category_id)`` from a single request.

    The category is ``None`` when neither an ID nor a name was given.
    """
    data = await _lookup(
        executor, GET_REPOSITORY_ID, {"owner": owner, "repo": repo},
        with_categories=_needs_categories(category_id, category_name),
    )
    try:
        repository = get_path(data, "repository")
    except NotFoundError as exc:
        raise NotFoundError(f"repository {owner}/{repo} not found") from exc
    return (
        _node_id(repository, "repository"),
        _pick_category(data, category_id, category_name),
    )


async def lookup_discussion(
    executor: GraphQLExecutor,
    owner: str,
    repo: str,
    discussion_number: int,
    category_id: str | None = None,
    category_name: str | None = None,
) -> tuple[str, str | None]:
    """Return ``(discussion_id, category_id)`` from a single request."""
    data = await _lookup(
        executor, GET_DISCUSSION_ID,
        {"owner": owner, "repo": repo, "discussionNumber": discussion_number},
        with_categories=_needs_categories(category_id, category_name),
    )
    try:
        discussion = get_path(data, "repository", "discussion")
    except NotFoundError as exc:
        raise NotFoundError(
            f"discussion #{discussion_number} not found in {owner}/{repo}"
        ) from exc
    return (
        _node_id(discussion, "discussion"),
        _pick_category(data, category_id, category_name),
    )


async def get_discussion_id(
    executor: GraphQLExecutor, owner: str, repo: str, discussion_number: int,
) -> str:
    """Look up a discussion's node ID by its number."""
    discussion_id, _ = await lookup_discussion(executor, owner, repo, discussion_number)
    return discussion_id


async def get_repository_id(executor: GraphQLExecutor, owner: str, repo: str) -> str:
    """Look up a repository's node ID."""
    repository_id, _ = await lookup_repository(executor, owner, repo)
    return repository_id


def _needs_categories(category_id: str | None, category_name: str | None) -> bool:
    return not category_id and bool(category_name)


async def _lookup(
    executor: GraphQLExecutor,
    query: str,
    variables: dict[str, Any],
    with_categories: bool,
) -> dict[str, Any]:
    if with_categories:
        variables = {
            **variables,
            "withCategories": True,
            "categoryLimit": CATEGORY_LOOKUP_PAGE_SIZE,
        }
    return await executor.execute(query, variables)


def _pick_category(
    data: dict[str, Any], category_id: str | None, category_name: str | None,
) -> str | None:
    if category_id:
        return category_id
    if not category_name:
        return None
    categories = parse_model(CategoryList, data, "repository", "discussionCategories")
    return match_category(categories.nodes, category_name)


def _node_id(obj: object, what: str) -> str:
    if not isinstance(obj, dict) or not obj.get("id"):
        raise RemoteFailureError(f"response for {what} carries no id")
    return str(obj["id"])
