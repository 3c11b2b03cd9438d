"""
RestBuddy: Request Classifier
===============================

What:  Decides which CRUD operation a request asks for.
How:   HTTP method plus the route's item/collection shape. The shape is
       decided once, when the route is registered, and travels with the
       endpoint as `is_item_route`.

    GET     + item        → show
    GET     + collection  → list
    POST    + collection  → create
    PUT     + item        → update
    PATCH   + item        → update
    DELETE  + item        → destroy
    anything else         → unknown
"""

from enum import Enum


class RequestType(str, Enum):
    LIST = "list"
    SHOW = "show"
    UPDATE = "update"
    CREATE = "create"
    DESTROY = "destroy"
    UNKNOWN = "unknown"


def is_param_segment(segment: str) -> bool:
    """
    True for a path placeholder segment.

    Both the colon form (":id") and FastAPI's brace form ("{id}",
    "{id:int}") are accepted.
    """
    if not isinstance(segment, str) or not segment:
        return False
    return segment[0] == ":" or (segment[0] == "{" and segment[-1] == "}")


def is_item_path(path: str) -> bool:
    """True when the last segment of a route template is a placeholder."""
    segments = [s for s in path.split("/") if s]
    return bool(segments) and is_param_segment(segments[-1])


def classify_request(method: str, is_item_route: bool) -> RequestType:
    method = method.upper()
    if method == "GET":
        return RequestType.SHOW if is_item_route else RequestType.LIST
    if method == "POST" and not is_item_route:
        return RequestType.CREATE
    if method in ("PUT", "PATCH") and is_item_route:
        return RequestType.UPDATE
    if method == "DELETE" and is_item_route:
        return RequestType.DESTROY
    return RequestType.UNKNOWN
