"""
RestBuddy: Condition Transformers
===================================

What:  Ready-made transformers for DispatcherOptions.condition_transformers.
How:   Each factory takes a model column and returns a callable mapping the
       raw query value to a SQLAlchemy clause. An empty raw value maps to
       None, which the condition builder drops.

    options = DispatcherOptions(condition_transformers={
        "search": icontains(User.name),         # ?search=ali
        "age": between(User.age),               # ?age=18,30  ?age=18,  ?age=,30
        "status": one_of(Post.status),          # ?status=draft,published
    })

Transformer keys do not have to be model fields; "search" above is not.
Any callable with the same shape can be used in place of these.
"""

from typing import Any, Callable, List, Optional

from sqlalchemy.sql.elements import ColumnElement

from restbuddy.registry import FieldSpec
from restbuddy.services.conditions import Transformer


def _field_for(column: Any) -> FieldSpec:
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        python_type = None
    return FieldSpec(name=column.key, python_type=python_type)


def _is_blank(raw: Any) -> bool:
    return raw is None or str(raw).strip() == ""


def _split(raw: Any) -> List[str]:
    return [part.strip() for part in str(raw).split(",")]


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _pattern(build: Callable[[str], str], method: str, column: Any) -> Transformer:
    def transform(raw: Any) -> Optional[ColumnElement]:
        if _is_blank(raw):
            return None
        return getattr(column, method)(build(_escape_like(str(raw))), escape="\\")
    return transform


def contains(column: Any) -> Transformer:
    """Case-sensitive substring match (LIKE %value%)."""
    return _pattern(lambda v: f"%{v}%", "like", column)


def icontains(column: Any) -> Transformer:
    """Case-insensitive substring match (ILIKE %value%)."""
    return _pattern(lambda v: f"%{v}%", "ilike", column)


def starts_with(column: Any) -> Transformer:
    return _pattern(lambda v: f"{v}%", "like", column)


def one_of(column: Any) -> Transformer:
    """Comma-separated values → IN (...)."""
    field = _field_for(column)

    def transform(raw: Any) -> Optional[ColumnElement]:
        if _is_blank(raw):
            return None
        values = [field.coerce_storable(v) for v in _split(raw) if v]
        return column.in_(values) if values else None
    return transform


def at_least(column: Any) -> Transformer:
    field = _field_for(column)

    def transform(raw: Any) -> Optional[ColumnElement]:
        if _is_blank(raw):
            return None
        return column >= field.coerce_storable(str(raw).strip())
    return transform


def at_most(column: Any) -> Transformer:
    field = _field_for(column)

    def transform(raw: Any) -> Optional[ColumnElement]:
        if _is_blank(raw):
            return None
        return column <= field.coerce_storable(str(raw).strip())
    return transform


def between(column: Any) -> Transformer:
    """
    Inclusive range "low,high". Either bound may be left empty for an open
    range; a value without a comma is treated as the lower bound.
    """
    field = _field_for(column)

    def transform(raw: Any) -> Optional[ColumnElement]:
        if _is_blank(raw):
            return None
        parts = _split(raw)
        low = parts[0]
        high = parts[1] if len(parts) > 1 else ""
        if low and high:
            return column.between(field.coerce_storable(low), field.coerce_storable(high))
        if low:
            return column >= field.coerce_storable(low)
        if high:
            return column <= field.coerce_storable(high)
        return None
    return transform
