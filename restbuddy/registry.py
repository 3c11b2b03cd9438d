"""
RestBuddy: Resource Registry
==============================

What:  Explicit mapping of resource name (URL segment) to a typed schema
       descriptor for one SQLAlchemy model.
How:   Models are registered once at startup. Registration introspects the
       SQLAlchemy mapper and freezes the field list, so requests never
       reflect on models at request time.
Who:   Built by the app factory; read by the dispatcher and the routes.

    registry = ResourceRegistry()
    registry.register(User)                 # resource "users" (__tablename__)
    registry.register(Post, resource="articles")
    registry.resolve("users").model_name    # "User"
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterator, Mapping, Optional, Type

from sqlalchemy import inspect

from restbuddy.exceptions import UnknownResourceError, ValidationError

logger = logging.getLogger(__name__)

# Signed 64-bit range; drivers cannot bind Python ints outside it
SQL_INTEGER_MIN = -(2 ** 63)
SQL_INTEGER_MAX = 2 ** 63 - 1

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def _to_bool(raw: Any) -> bool:
    text = str(raw).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _to_int(raw: Any) -> int:
    if isinstance(raw, bool):
        raise ValueError(f"not an integer: {raw!r}")
    if isinstance(raw, float):
        if not raw.is_integer():
            raise ValueError(f"not an integer: {raw!r}")
        return int(raw)
    return int(str(raw).strip())


def _to_datetime(raw: Any) -> datetime:
    text = str(raw).strip()
    # fromisoformat() only accepts a trailing "Z" from Python 3.11 on
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


_CONVERTERS = {
    int: _to_int,
    bool: _to_bool,
    datetime: _to_datetime,
    date: lambda raw: date.fromisoformat(str(raw).strip()),
    uuid.UUID: lambda raw: uuid.UUID(str(raw)),
    Decimal: lambda raw: Decimal(str(raw)),
}


@dataclass(frozen=True)
class FieldSpec:
    """One mapped column of a resource."""

    name: str
    python_type: Optional[type]
    primary_key: bool = False
    nullable: bool = True

    def coerce(self, raw: Any) -> Any:
        """
        Convert a raw request value to this field's Python type.

        Query and path parameters arrive as strings; JSON bodies may
        already carry the right type, which is returned unchanged.

        Raises:
            ValidationError: The value does not convert.
        """
        if raw is None or self.python_type is None:
            return raw
        # bool is an int subclass; let it go through the converter
        if isinstance(raw, self.python_type) and not isinstance(raw, bool):
            return raw
        converter = _CONVERTERS.get(self.python_type, self.python_type)
        try:
            return converter(raw)
        except (TypeError, ValueError, InvalidOperation) as e:
            raise ValidationError(
                message=f"Invalid value for '{self.name}': {raw!r}",
                field=self.name,
                context={"expected": self.python_type.__name__, "reason": str(e)},
            ) from e

    def in_range(self, value: Any) -> bool:
        if isinstance(value, int) and not isinstance(value, bool):
            return SQL_INTEGER_MIN <= value <= SQL_INTEGER_MAX
        return True

    def coerce_storable(self, raw: Any) -> Any:
        """Like coerce(), but also rejects integers no column can store."""
        value = self.coerce(raw)
        if not self.in_range(value):
            raise ValidationError(
                message=f"Value for '{self.name}' is out of range",
                field=self.name,
                context={"reason": "out of range", "min": SQL_INTEGER_MIN, "max": SQL_INTEGER_MAX},
            )
        return value


@dataclass(frozen=True)
class ResourceSchema:
    """
    Typed descriptor of a registered model.

    Attributes:
        resource:    URL segment the model is exposed under ("users")
        model:       The SQLAlchemy declarative class
        model_name:  Class name, used in "<Model> not found" messages
        fields:      Field name → FieldSpec, in mapper order
    """

    resource: str
    model: Type[Any]
    model_name: str
    fields: Mapping[str, FieldSpec] = field(default_factory=dict)

    @classmethod
    def from_model(cls, model: Type[Any], resource: Optional[str] = None) -> "ResourceSchema":
        mapper = inspect(model)
        fields: Dict[str, FieldSpec] = {}
        for attr in mapper.column_attrs:
            column = attr.columns[0]
            try:
                python_type = column.type.python_type
            except NotImplementedError:
                python_type = None
            fields[attr.key] = FieldSpec(
                name=attr.key,
                python_type=python_type,
                primary_key=bool(column.primary_key),
                nullable=bool(column.nullable),
            )
        return cls(
            resource=resource or model.__tablename__,
            model=model,
            model_name=model.__name__,
            fields=fields,
        )

    def has_field(self, name: str) -> bool:
        return name in self.fields

    def column(self, name: str) -> Any:
        """Return the instrumented attribute used to build SQL expressions."""
        return getattr(self.model, name)

    def coerce(self, name: str, raw: Any) -> Any:
        return self.fields[name].coerce(raw)

    def coerce_storable(self, name: str, raw: Any) -> Any:
        return self.fields[name].coerce_storable(raw)

    def serialize(self, record: Any) -> Dict[str, Any]:
        return {name: getattr(record, name) for name in self.fields}


class ResourceRegistry:
    """
    Read-only after startup: register everything before the app serves.
    """

    def __init__(self) -> None:
        self._schemas: Dict[str, ResourceSchema] = {}

    def register(self, model: Type[Any], resource: Optional[str] = None) -> ResourceSchema:
        schema = ResourceSchema.from_model(model, resource)
        if schema.resource in self._schemas:
            raise ValueError(f"Resource '{schema.resource}' is already registered")
        self._schemas[schema.resource] = schema
        logger.debug(
            "Registered resource %s → %s (%d fields)",
            schema.resource, schema.model_name, len(schema.fields),
        )
        return schema

    def resolve(self, resource: str) -> ResourceSchema:
        try:
            return self._schemas[resource]
        except KeyError:
            raise UnknownResourceError(resource) from None

    def __contains__(self, resource: object) -> bool:
        return resource in self._schemas

    def __iter__(self) -> Iterator[str]:
        return iter(self._schemas)

    def __len__(self) -> int:
        return len(self._schemas)
