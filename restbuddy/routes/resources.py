"""
RestBuddy: Resource Route Registration
========================================

What:  Registers dispatcher endpoints on a FastAPI app or APIRouter.
How:   The item/collection shape of each route is decided here, from the
       path template, and handed to the endpoint as `is_item_route`.

Route Inventory (per resource):
    resources():   GET|PATCH|PUT  /{resource}/{id}   (show, update)
    collection():  GET            /{resource}        (list; wired explicitly)
    route():       any path/method combination
"""

import logging
from typing import Any, Iterable, Sequence, Union

from fastapi import APIRouter, FastAPI

from restbuddy.schemas.responses import ErrorResponse, MessageResponse
from restbuddy.services.dispatcher import RequestDispatcher
from restbuddy.services.request_classifier import is_item_path

logger = logging.getLogger(__name__)

Router = Union[FastAPI, APIRouter]

ITEM_METHODS: Sequence[str] = ("GET", "PATCH", "PUT")


def route(
    router: Router,
    dispatcher: RequestDispatcher,
    resource: str,
    path: str,
    methods: Iterable[str],
    **route_kwargs: Any,
) -> None:
    is_item_route = is_item_path(path)
    schema = dispatcher.registry.resolve(resource)
    methods = [m.upper() for m in methods]
    route_kwargs.setdefault("tags", [schema.model_name])
    router.add_api_route(
        path,
        dispatcher.endpoint(resource, is_item_route=is_item_route),
        methods=methods,
        **route_kwargs,
    )
    logger.debug("Route %s %s → %s (%s)", ",".join(methods), path, resource,
                 "item" if is_item_route else "collection")


def resources(
    router: Router,
    dispatcher: RequestDispatcher,
    resource: str,
    prefix: str = "",
) -> None:
    """Register show and update routes for `resource`."""
    schema = dispatcher.registry.resolve(resource)
    route(
        router,
        dispatcher,
        resource,
        f"{prefix}/{resource}/{{id}}",
        ITEM_METHODS,
        summary=f"Show or update a {schema.model_name}",
        responses={
            400: {"description": "Invalid filter or body value", "model": ErrorResponse},
            404: {"description": f"{schema.model_name} not found", "model": MessageResponse},
        },
    )


def collection(
    router: Router,
    dispatcher: RequestDispatcher,
    resource: str,
    prefix: str = "",
    methods: Iterable[str] = ("GET",),
) -> None:
    """Register the collection route for `resource` (list by default)."""
    schema = dispatcher.registry.resolve(resource)
    route(
        router,
        dispatcher,
        resource,
        f"{prefix}/{resource}",
        methods,
        summary=f"List {schema.resource}",
        responses={
            400: {"description": "Invalid filter value", "model": ErrorResponse},
        },
    )
