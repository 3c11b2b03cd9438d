"""
RestBuddy: Condition Builder
==============================

What:  Turns query-string and path parameters into one SQLAlchemy WHERE
       expression.
How:   Four steps, each a plain function so they can be tested alone:

    query + path params
        │  merge_parameters()            path params win on key collision
        ▼
    {field: raw value}
        │  filter_unknown_conditions()   keep model fields + transformer keys
        ▼
    {field: raw value}
        │  apply_condition_transformers()
        │      transformer key  → transformer(raw)   (None is dropped)
        │      model field      → column == coerced value
        ▼
    [clause, clause, ...]
        │  and_()
        ▼
    WHERE expression (or None when there is nothing to filter on)

Parameters such as `order`, `items` and `page` fall out at the filter step
unless a model happens to have a field with the same name.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from sqlalchemy import and_, false
from sqlalchemy.sql.elements import ColumnElement

from restbuddy.registry import ResourceSchema

logger = logging.getLogger(__name__)

Transformer = Callable[[Any], Optional[ColumnElement]]


def merge_parameters(
    query_params: Mapping[str, Any],
    path_params: Mapping[str, Any],
) -> Dict[str, Any]:
    merged = dict(query_params)
    merged.update(path_params)
    return merged


def filter_unknown_conditions(
    conditions: Mapping[str, Any],
    schema: ResourceSchema,
    transformers: Mapping[str, Transformer],
) -> Dict[str, Any]:
    """Drop every key that is neither a model field nor a transformer key."""
    return {
        key: value
        for key, value in conditions.items()
        if key in transformers or schema.has_field(key)
    }


def _equality(schema: ResourceSchema, key: str, raw: Any) -> ColumnElement:
    value = schema.coerce(key, raw)
    # No row can hold it, and the driver would refuse to bind it
    if not schema.fields[key].in_range(value):
        return false()
    return schema.column(key) == value


def apply_condition_transformers(
    conditions: Mapping[str, Any],
    schema: ResourceSchema,
    transformers: Mapping[str, Transformer],
) -> List[ColumnElement]:
    """
    Build the list of clauses for already filtered conditions.

    A key with a transformer is handed to it, even if it is also a model
    field; the plain equality for that key is not added.
    """
    transformed: List[ColumnElement] = []
    equalities: List[ColumnElement] = []
    for key, value in conditions.items():
        transformer = transformers.get(key)
        if transformer is not None:
            clause = transformer(value)
            if clause is not None:
                transformed.append(clause)
        else:
            equalities.append(_equality(schema, key, value))
    return transformed + equalities


def combine_conditions(clauses: List[ColumnElement]) -> Optional[ColumnElement]:
    if not clauses:
        return None
    if len(clauses) == 1:
        return clauses[0]
    return and_(*clauses)


def build_conditions(
    query_params: Mapping[str, Any],
    path_params: Mapping[str, Any],
    schema: ResourceSchema,
    transformers: Mapping[str, Transformer],
) -> Optional[ColumnElement]:
    parameters = merge_parameters(query_params, path_params)
    logger.debug("%s parameters: %s", schema.resource, parameters)
    conditions = filter_unknown_conditions(parameters, schema, transformers)
    where = combine_conditions(apply_condition_transformers(conditions, schema, transformers))
    logger.debug("%s conditions: %s", schema.resource, conditions)
    return where
