"""
RestBuddy: Request Dispatcher
===============================

What:  Generic handler that serves list / show / update for any registered
       resource.
How:   One pass per request:

    ┌──────────┐   ┌──────────┐   ┌──────────────┐   ┌──────────┐   ┌──────────┐
    │ Resolve  │──▶│ Classify │──▶│ Build query  │──▶│ Execute  │──▶│ Format & │
    │ resource │   │ request  │   │ options      │   │ (1 query)│   │ respond  │
    └──────────┘   └──────────┘   └──────────────┘   └──────────┘   └──────────┘

Who:   Endpoints produced by `RequestDispatcher.endpoint()` call `dispatch()`;
       `restbuddy.routes.resources` registers those endpoints on a router.
When:  For every request on a registered resource route.

Outcomes:
    show     200 formatted record | 404 {"message": "<Model> not found"}
    list     200 formatted array
    update   200 formatted record | NotFoundError (→ 404 error envelope)
    other    UnsupportedRequestError (→ 405), no query is run

Errors from SQLAlchemy are not caught here; they reach the app's exception
handlers unchanged, and the session dependency rolls the transaction back.
"""

import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from restbuddy.database import get_db_session
from restbuddy.exceptions import NotFoundError, UnsupportedRequestError, ValidationError
from restbuddy.registry import ResourceRegistry, ResourceSchema
from restbuddy.schemas.options import DispatcherOptions
from restbuddy.services.query_options import QueryOptions, build_query_options
from restbuddy.services.request_classifier import RequestType, classify_request

logger = logging.getLogger(__name__)

Endpoint = Callable[..., Awaitable[Response]]


class RequestDispatcher:
    """
    Serves CRUD requests for the resources of one registry.

    A dispatcher holds no per-request state. Its options are frozen at
    construction, so one instance may back any number of routes.
    """

    def __init__(
        self,
        registry: ResourceRegistry,
        options: Optional[DispatcherOptions] = None,
    ):
        self.registry = registry
        self.options = options or DispatcherOptions()
        if self.options.link_header_pagination:
            logger.warning("link_header_pagination is not supported and will be ignored")

    def endpoint(self, resource: str, is_item_route: bool) -> Endpoint:
        """
        Build a FastAPI endpoint for `resource`.

        The resource is resolved now so a route for an unregistered resource
        fails at startup instead of on its first request.
        """
        self.registry.resolve(resource)

        async def handle(
            request: Request,
            db: AsyncSession = Depends(get_db_session),
        ) -> Response:
            return await self.dispatch(request, db, resource, is_item_route)

        handle.__name__ = f"{resource}_{'item' if is_item_route else 'collection'}"
        return handle

    async def dispatch(
        self,
        request: Request,
        db: AsyncSession,
        resource: str,
        is_item_route: bool,
    ) -> Response:
        schema = self.registry.resolve(resource)
        request_type = classify_request(request.method, is_item_route)
        logger.debug("%s %s → %s", request.method, request.url.path, request_type.value)
        # Read by the access log
        request.state.resource = schema.resource
        request.state.request_type = request_type.value

        if request_type not in (RequestType.SHOW, RequestType.LIST, RequestType.UPDATE):
            raise UnsupportedRequestError(
                request_type.value,
                context={"method": request.method, "resource": resource},
            )

        query_options = build_query_options(
            query_params=dict(request.query_params),
            path_params=dict(request.path_params),
            schema=schema,
            max_items=self.options.max_items,
            transformers=self.options.condition_transformers,
        )

        if request_type is RequestType.SHOW:
            return await self.show(db, schema, query_options)
        if request_type is RequestType.LIST:
            return await self.list_all(db, schema, query_options)
        return await self.update(db, schema, query_options, await self._read_body(request))

    # ── Operations ────────────────────────────────────────────────────────

    async def show(
        self,
        db: AsyncSession,
        schema: ResourceSchema,
        query_options: QueryOptions,
    ) -> Response:
        record = await self._find_one(db, schema, query_options)
        if record is None:
            return JSONResponse(
                status_code=404,
                content={"message": f"{schema.model_name} not found"},
            )
        return self._respond(schema.serialize(record))

    async def list_all(
        self,
        db: AsyncSession,
        schema: ResourceSchema,
        query_options: QueryOptions,
    ) -> Response:
        stmt = query_options.apply(select(schema.model), schema)
        result = await db.execute(stmt)
        records = result.scalars().all()
        logger.debug("%s list returned %d records", schema.resource, len(records))
        return self._respond([schema.serialize(record) for record in records])

    async def update(
        self,
        db: AsyncSession,
        schema: ResourceSchema,
        query_options: QueryOptions,
        changes: Dict[str, Any],
    ) -> Response:
        """
        Apply the body's known fields to the first matching record.

        Fields absent from the body are left untouched; body keys that are
        not model fields are ignored. The commit happens in the session
        dependency once the endpoint returns.
        """
        record = await self._find_one(db, schema, query_options)
        if record is None:
            raise NotFoundError(schema.model_name, context={"path": schema.resource})

        applied = []
        for key, value in changes.items():
            if schema.has_field(key):
                setattr(record, key, schema.coerce_storable(key, value))
                applied.append(key)
        await db.flush()
        await db.refresh(record)
        logger.info("Updated %s: %s", schema.model_name, ", ".join(applied) or "no fields")
        return self._respond(schema.serialize(record))

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _find_one(
        self,
        db: AsyncSession,
        schema: ResourceSchema,
        query_options: QueryOptions,
    ) -> Any:
        stmt = query_options.apply(select(schema.model), schema)
        result = await db.execute(stmt)
        return result.scalars().first()

    async def _read_body(self, request: Request) -> Dict[str, Any]:
        raw = await request.body()
        if not raw.strip():
            return {}
        try:
            body = json.loads(raw)
        except ValueError as e:
            raise ValidationError(message="Request body is not valid JSON") from e
        if not isinstance(body, dict):
            raise ValidationError(
                message="Request body must be a JSON object",
                context={"received": type(body).__name__},
            )
        return body

    def _respond(self, payload: Any) -> Response:
        return JSONResponse(content=jsonable_encoder(self.options.formatter(payload)))
