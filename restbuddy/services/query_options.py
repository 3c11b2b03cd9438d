"""
RestBuddy: Query Options
==========================

What:  Per-request ordering, pagination and filtering for one SELECT.
How:   `build_query_options()` reads the `order`, `items` and `page` query
       parameters plus the filter conditions and returns a QueryOptions,
       which `apply()` turns into clauses on a `select(model)` statement.
When:  Built and discarded within a single request.

Query parameters:
    order   "name" (ascending) or "-name" (descending). Unknown fields are
            ignored without an error.
    items   Page size, clamped to `max_items`. Invalid, zero or negative
            means no limit.
    page    Zero-based page index. offset = page * limit. Only used when a
            limit is in effect.
"""

from dataclasses import dataclass
from typing import Any, Mapping, NamedTuple, Optional, Tuple

from sqlalchemy import Select, asc, desc
from sqlalchemy.sql.elements import ColumnElement

from restbuddy.registry import SQL_INTEGER_MAX, ResourceSchema
from restbuddy.services.conditions import Transformer, build_conditions


class OrderSpec(NamedTuple):
    field: str
    descending: bool = False

    def __str__(self) -> str:
        return f"{self.field} DESC" if self.descending else self.field

    def clause(self, schema: ResourceSchema) -> ColumnElement:
        column = schema.column(self.field)
        return desc(column) if self.descending else asc(column)


@dataclass
class QueryOptions:
    order: Optional[OrderSpec] = None
    limit: Optional[int] = None
    offset: Optional[int] = None
    where: Optional[ColumnElement] = None

    def apply(self, stmt: Select, schema: ResourceSchema) -> Select:
        if self.where is not None:
            stmt = stmt.where(self.where)
        if self.order is not None:
            stmt = stmt.order_by(self.order.clause(schema))
        if self.limit is not None:
            stmt = stmt.limit(self.limit)
        if self.offset is not None:
            stmt = stmt.offset(self.offset)
        return stmt


def _parse_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def parse_order(order: Optional[str], schema: ResourceSchema) -> Optional[OrderSpec]:
    if not order:
        return None
    descending = order.startswith("-")
    name = order[1:] if descending else order
    if not schema.has_field(name):
        return None
    return OrderSpec(name, descending)


def parse_pagination(
    items: Any,
    page: Any,
    max_items: int,
) -> Tuple[Optional[int], Optional[int]]:
    """
    Returns (limit, offset); either may be None.

    >>> parse_pagination("10", "2", 100)
    (10, 20)
    >>> parse_pagination("500", None, 100)
    (100, None)
    """
    size = _parse_int(items)
    if not size or size < 1:
        return None, None
    limit = min(size, max_items)
    index = _parse_int(page)
    if not index or index < 0:
        return limit, None
    # Past the end either way; an unbounded offset cannot be bound
    return limit, min(index * limit, SQL_INTEGER_MAX)


def build_query_options(
    query_params: Mapping[str, Any],
    path_params: Mapping[str, Any],
    schema: ResourceSchema,
    max_items: int,
    transformers: Mapping[str, Transformer],
) -> QueryOptions:
    limit, offset = parse_pagination(
        query_params.get("items"), query_params.get("page"), max_items
    )
    return QueryOptions(
        order=parse_order(query_params.get("order"), schema),
        limit=limit,
        offset=offset,
        where=build_conditions(query_params, path_params, schema, transformers),
    )
