"""
Query Variant Selector: pick one of four structurally distinct query shapes.

GitHub rejects an empty ``orderBy`` or ``categoryId`` argument, so an absent
filter or ordering has to be absent from the document itself, not bound to
null.  Two independent axes (has filter, has ordering) give four variants;
``ConnectionQuery`` renders each one for any connection that supports an
optional filter and an optional ordering, and ``QueryPlan`` carries the
chosen document together with its variable bindings.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from gh_discussions.discussions.fragments import ResultFragment
from gh_discussions.discussions.pagination import GraphQLPageParams
from gh_discussions.shared.exceptions import InvalidArgumentError

logger = logging.getLogger("discussions.variants")


class QueryVariant(Enum):
    """Variants keyed by ``(has_filter, has_ordering)``."""

    BASIC = (False, False)
    BASIC_ORDERED = (False, True)
    CATEGORY_FILTERED = (True, False)
    CATEGORY_FILTERED_ORDERED = (True, True)

    @property
    def filtered(self) -> bool:
        return self.value[0]

    @property
    def ordered(self) -> bool:
        return self.value[1]


def select_variant(has_filter: bool, has_ordering: bool) -> QueryVariant:
    """Table lookup over the two axes.  Total and exclusive by construction."""
    return QueryVariant((bool(has_filter), bool(has_ordering)))


@dataclass(frozen=True)
class Ordering:
    field: str
    direction: str


def resolve_ordering(
    order_field: str | None,
    direction: str | None,
    allowed_fields: frozenset[str] = frozenset(),
    allowed_directions: frozenset[str] = frozenset({"ASC", "DESC"}),
) -> Ordering | None:
    """Return an Ordering only when both halves were supplied.

    A lone field or a lone direction is treated as "no ordering".  A
    complete ordering with a value outside the allowed enums is rejected.
    """
    if not order_field or not direction:
        if order_field or direction:
            logger.warning(
                "Ignoring incomplete ordering (field=%r, direction=%r); "
                "both are required",
                order_field, direction,
            )
        return None

    order_field = order_field.upper()
    direction = direction.upper()
    if allowed_fields and order_field not in allowed_fields:
        raise InvalidArgumentError(
            f"invalid order field {order_field!r}; valid: {sorted(allowed_fields)}"
        )
    if direction not in allowed_directions:
        raise InvalidArgumentError(
            f"invalid order direction {direction!r}; valid: {sorted(allowed_directions)}"
        )
    return Ordering(order_field, direction)


class VariableBuilder:
    """Builds a variable map where optional keys are inserted, never nulled."""

    def __init__(self) -> None:
        self._variables: dict[str, Any] = {}

    def bind(self, **values: Any) -> "VariableBuilder":
        self._variables.update(values)
        return self

    def bind_if(self, condition: bool, **values: Any) -> "VariableBuilder":
        if condition:
            self._variables.update(values)
        return self

    def build(self) -> dict[str, Any]:
        return dict(self._variables)


@dataclass(frozen=True)
class VariantResult:
    """Raw ``data`` of one executed plan.  Satisfies FragmentSource."""

    variant: QueryVariant
    data: dict[str, Any]
    path: tuple[str, ...]
    node_model: type

    def get_fragment(self) -> ResultFragment[Any]:
        return ResultFragment[self.node_model].from_result(self.data, *self.path)


@dataclass(frozen=True)
class QueryPlan:
    """A rendered variant document and its variables, ready to execute."""

    variant: QueryVariant
    query: str
    variables: dict[str, Any]
    path: tuple[str, ...]
    node_model: type

    def bind(self, data: dict[str, Any]) -> VariantResult:
        return VariantResult(self.variant, data, self.path, self.node_model)


@dataclass(frozen=True)
class ConnectionQuery:
    """A paginated connection with an optional filter and an optional ordering.

    Attributes:
        operation: GraphQL operation name.
        scope: ``(field, argument-string)`` pairs leading to the connection,
            e.g. ``(("repository", "owner: $owner, name: $repo"),)``.
        scope_variables: ``(name, type)`` declarations for the scope.
        connection: Connection field name, e.g. ``"discussions"``.
        node_selection: Selection set for each node.
        node_model: Pydantic model for one node.
        filter_argument: Connection argument used for filtering, if any.
        filter_type: GraphQL type of the filter variable.
        order_field_type: GraphQL enum type of the order field, if ordering
            is supported.
        order_fields: Accepted order field values.
    """

    operation: str
    scope: tuple[tuple[str, str], ...]
    scope_variables: tuple[tuple[str, str], ...]
    connection: str
    node_selection: str
    node_model: type
    filter_argument: str | None = None
    filter_type: str = "ID!"
    order_field_type: str | None = None
    order_fields: frozenset[str] = field(default_factory=frozenset)

    @property
    def path(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.scope) + (self.connection,)

    def supports(self, variant: QueryVariant) -> bool:
        if variant.filtered and not self.filter_argument:
            return False
        if variant.ordered and not self.order_field_type:
            return False
        return True

    def render(self, variant: QueryVariant) -> str:
        """Render the document for ``variant``; optional arguments are structural."""
        if not self.supports(variant):
            raise InvalidArgumentError(
                f"{self.connection} does not support the {variant.name} query shape"
            )

        declarations = [f"${name}: {gql_type}" for name, gql_type in self.scope_variables]
        declarations += ["$first: Int!", "$after: String"]
        arguments = ["first: $first", "after: $after"]

        if variant.filtered:
            declarations.append(f"${self.filter_argument}: {self.filter_type}")
            arguments.append(f"{self.filter_argument}: ${self.filter_argument}")
        if variant.ordered:
            declarations += [
                f"$orderByField: {self.order_field_type}",
                "$orderByDirection: OrderDirection!",
            ]
            arguments.append("orderBy: {field: $orderByField, direction: $orderByDirection}")

        opening = " ".join(f"{name}({args}) {{" for name, args in self.scope)
        closing = " }" * len(self.scope)
        return (
            f"query {self.operation}({', '.join(declarations)}) {{ "
            f"{opening} "
            f"{self.connection}({', '.join(arguments)}) {{ "
            f"nodes {{ {self.node_selection} }} "
            f"pageInfo {{ hasNextPage hasPreviousPage startCursor endCursor }} "
            f"totalCount }}"
            f"{closing} }}"
        )

    def plan(
        self,
        scope_values: dict[str, Any],
        page: GraphQLPageParams,
        filter_value: str | None = None,
        ordering: Ordering | None = None,
    ) -> QueryPlan:
        """Select the variant and build its variables in one step."""
        has_filter = bool(filter_value)
        has_ordering = ordering is not None
        variant = select_variant(has_filter, has_ordering)
        query = self.render(variant)

        variables = (
            VariableBuilder()
            .bind(**scope_values)
            .bind(**page.as_variables())
            .bind_if(has_filter, **{str(self.filter_argument): filter_value})
            .bind_if(
                has_ordering,
                orderByField=ordering.field if ordering else None,
                orderByDirection=ordering.direction if ordering else None,
            )
            .build()
        )

        return QueryPlan(
            variant=variant,
            query=query,
            variables=variables,
            path=self.path,
            node_model=self.node_model,
        )
