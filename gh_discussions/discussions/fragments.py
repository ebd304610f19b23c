"""
Fragment Model: the shared shape of a paginated GitHub connection.

Every listing query (discussions, comments, categories) selects the same
``{nodes, pageInfo, totalCount}`` fragment.  These models validate the raw
payload once, converting GitHub's JSON scalars into Python types
(``int``, ``datetime``) so that nothing downstream touches transport types.
"""

from datetime import datetime
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, ValidationError
from pydantic.alias_generators import to_camel

from gh_discussions.shared.exceptions import NotFoundError, RemoteFailureError

NodeT = TypeVar("NodeT")


class RemoteModel(BaseModel):
    """Base for models parsed from GitHub's camelCase payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class PageInfo(RemoteModel):
    """Relay page info.  Cursors are null on an empty connection."""

    has_next_page: bool = False
    has_previous_page: bool = False
    start_cursor: str | None = None
    end_cursor: str | None = None


class Actor(RemoteModel):
    login: str


class CategoryRef(RemoteModel):
    name: str


class DiscussionNode(RemoteModel):
    """One discussion as selected by the listing variants."""

    number: int
    title: str
    url: str = ""
    created_at: datetime
    updated_at: datetime
    closed: bool = False
    is_answered: bool | None = None
    answer_chosen_at: datetime | None = None
    author: Actor | None = None
    category: CategoryRef | None = None


class DiscussionDetail(RemoteModel):
    """A single discussion fetched by number."""

    number: int
    title: str
    body: str = ""
    url: str = ""
    created_at: datetime
    closed: bool = False
    is_answered: bool | None = None
    answer_chosen_at: datetime | None = None
    category: CategoryRef | None = None


class CommentNode(RemoteModel):
    id: str
    body: str = ""
    url: str = ""


class CategoryNode(RemoteModel):
    id: str
    name: str


class CategoryList(RemoteModel):
    nodes: list[CategoryNode] = Field(default_factory=list)


class ResultFragment(RemoteModel, Generic[NodeT]):
    """``{nodes, pageInfo, totalCount}`` for any node type."""

    nodes: list[NodeT] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo)
    total_count: NonNegativeInt = 0

    @classmethod
    def from_result(cls, data: dict[str, Any], *path: str) -> "ResultFragment[NodeT]":
        """Instantiate from nested GraphQL ``data`` under the given path.

        Raises:
            NotFoundError: If an object along the path is ``null`` (GitHub
                reports a missing repository or discussion this way).
            RemoteFailureError: If the payload is missing keys or fails
                validation.
        """
        payload = get_path(data, *path)
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise RemoteFailureError(
                f"unexpected response shape for {cls.__name__}: {exc}"
            ) from exc


@runtime_checkable
class FragmentSource(Protocol):
    """Anything that yields a ResultFragment, regardless of the query that ran."""

    def get_fragment(self) -> ResultFragment[Any]: ...


def get_path(data: Any, *path: str) -> Any:
    """Walk ``data`` by key, failing loudly on a missing or null segment."""
    current = data
    walked: list[str] = []
    for key in path:
        walked.append(key)
        if not isinstance(current, dict) or key not in current:
            raise RemoteFailureError(
                f"response is missing '{'.'.join(walked)}'"
            )
        current = current[key]
        if current is None:
            raise NotFoundError(f"'{'.'.join(walked)}' was not found")
    return current


def parse_model(model: type[RemoteModel], data: dict[str, Any], *path: str) -> Any:
    """Validate a single object found under ``path`` into ``model``."""
    payload = get_path(data, *path)
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise RemoteFailureError(
            f"unexpected response shape for {model.__name__}: {exc}"
        ) from exc
