"""
Response Normalizer: one output contract for every listing variant.

The functions here only depend on ``FragmentSource``; whichever of the four
discussion query shapes ran, the caller gets the same record layout.
Optional remote fields are left out of the record when absent instead of
being emitted as null.
"""

from datetime import datetime, timezone
from typing import Any, Callable

from gh_discussions.discussions.fragments import (
    CategoryNode,
    CommentNode,
    DiscussionDetail,
    DiscussionNode,
    FragmentSource,
    PageInfo,
)


def iso_instant(value: datetime) -> str:
    """Render a timestamp as an ISO-8601 UTC instant (``...Z``)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def normalize_page_info(page_info: PageInfo) -> dict[str, Any]:
    return {
        "hasNextPage": page_info.has_next_page,
        "hasPreviousPage": page_info.has_previous_page,
        "startCursor": page_info.start_cursor or "",
        "endCursor": page_info.end_cursor or "",
    }


def normalize_discussion(node: DiscussionNode) -> dict[str, Any]:
    record: dict[str, Any] = {
        "number": int(node.number),
        "title": node.title,
        "url": node.url,
        "createdAt": iso_instant(node.created_at),
        "updatedAt": iso_instant(node.updated_at),
        "closed": node.closed,
        "isAnswered": bool(node.is_answered),
    }
    if node.author is not None:
        record["author"] = {"login": node.author.login}
    if node.category is not None:
        record["category"] = {"name": node.category.name}
    if node.answer_chosen_at is not None:
        record["answerChosenAt"] = iso_instant(node.answer_chosen_at)
    return record


def normalize_discussion_detail(detail: DiscussionDetail) -> dict[str, Any]:
    record: dict[str, Any] = {
        "number": int(detail.number),
        "title": detail.title,
        "body": detail.body,
        "url": detail.url,
        "closed": detail.closed,
        "isAnswered": bool(detail.is_answered),
        "createdAt": iso_instant(detail.created_at),
        "category": {"name": detail.category.name if detail.category else ""},
    }
    if detail.answer_chosen_at is not None:
        record["answerChosenAt"] = iso_instant(detail.answer_chosen_at)
    return record


def normalize_comment(node: CommentNode) -> dict[str, Any]:
    return {"id": node.id, "body": node.body, "url": node.url}


def normalize_category(node: CategoryNode) -> dict[str, Any]:
    return {"id": node.id, "name": node.name}


def normalize_connection(
    source: FragmentSource,
    items_key: str,
    node_mapper: Callable[[Any], dict[str, Any]],
) -> dict[str, Any]:
    """Map any fragment-producing result into ``{items, pageInfo, totalCount}``.

    Args:
        source: Result of whichever query variant executed.
        items_key: Output key for the node list (e.g. ``"discussions"``).
        node_mapper: Converts one validated node into an output record.

    Returns:
        Records in server order, page info, and the collection's total count.
    """
    fragment = source.get_fragment()
    return {
        items_key: [node_mapper(node) for node in fragment.nodes],
        "pageInfo": normalize_page_info(fragment.page_info),
        "totalCount": int(fragment.total_count),
    }


def normalize_discussions(source: FragmentSource) -> dict[str, Any]:
    return normalize_connection(source, "discussions", normalize_discussion)
