"""
RestBuddy: Dispatcher Options
===============================

What:  Configuration a RequestDispatcher is constructed with.
How:   Frozen Pydantic model; validated once, then shared read-only by all
       concurrent requests served by that dispatcher.

Fields:
    max_items               Upper bound for `items` (default: settings.max_items, 100)
    formatter               Called with the serialized record (dict) or the
                            list of records; its return value is the JSON body.
                            Default: identity.
    condition_transformers  Query key → transformer callable. See
                            restbuddy.services.transformers.
    link_header_pagination  Accepted, not implemented. A warning is logged
                            when it is switched on.
"""

from typing import Any, Callable, Dict

from pydantic import BaseModel, ConfigDict, Field

from restbuddy.config import settings


def identity(value: Any) -> Any:
    return value


class DispatcherOptions(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    max_items: int = Field(default_factory=lambda: settings.max_items, ge=1)
    formatter: Callable[[Any], Any] = Field(default=identity)
    condition_transformers: Dict[str, Callable[[Any], Any]] = Field(default_factory=dict)
    link_header_pagination: bool = Field(default_factory=lambda: settings.link_header_pagination)
