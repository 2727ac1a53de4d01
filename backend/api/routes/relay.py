"""Relay endpoints: inbound automation writes and dashboard reads.

Two single-record relays share one shape:

    OPTIONS  -> 200, empty body, CORS headers
    POST     -> normalize + replace the stored record
    GET      -> latest record, or a placeholder with hasNewData=false
    other    -> 405 {"error": "Method not allowed"} (see core.middleware)

All responses (errors included) carry the relay CORS headers so a
browser dashboard can read them from any origin.
"""

import logging
from typing import Callable

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.dependencies import get_consumer_store, get_dashboard_store
from core.constants import CONSUMER_RELAY_ROUTE, DASHBOARD_RELAY_ROUTE, RELAY_CORS_HEADERS
from core.exceptions import MalformedPayloadError
from core.security import require_bearer_presence
from relay.handlers import BaseRelayHandler, ConsumerRelayHandler, DashboardRelayHandler
from relay.store import RelayStore

logger = logging.getLogger(__name__)


async def _read_payload(request: Request) -> dict:
    try:
        payload = await request.json()
    except ValueError:
        raise MalformedPayloadError()
    if not isinstance(payload, dict):
        raise MalformedPayloadError("JSON body must be an object")
    return payload


def build_relay_router(
    path: str,
    handler: BaseRelayHandler,
    store_dependency: Callable[..., RelayStore],
) -> APIRouter:
    """Build the OPTIONS/POST/GET router for one relay entry point."""
    router = APIRouter()

    @router.options(path)
    async def preflight() -> Response:
        return Response(status_code=200, headers=RELAY_CORS_HEADERS)

    @router.post(path)
    async def write(
        request: Request,
        store: RelayStore = Depends(store_dependency),
    ) -> JSONResponse:
        if get_settings().RELAY_REQUIRE_AUTH:
            require_bearer_presence(request)

        payload = await _read_payload(request)
        logger.info(f"Relay {handler.kind} write received", extra={"keys": sorted(payload)[:20]})
        body = await handler.write(store, payload)
        return JSONResponse(status_code=200, content=body, headers=RELAY_CORS_HEADERS)

    @router.get(path)
    async def read(store: RelayStore = Depends(store_dependency)) -> JSONResponse:
        result = await handler.read(store)
        return JSONResponse(status_code=200, content=result.to_response(), headers=RELAY_CORS_HEADERS)

    return router


dashboard_router = build_relay_router(
    DASHBOARD_RELAY_ROUTE,
    DashboardRelayHandler(image_min_length=get_settings().RELAY_IMAGE_MIN_LENGTH),
    get_dashboard_store,
)

consumer_router = build_relay_router(
    CONSUMER_RELAY_ROUTE,
    ConsumerRelayHandler(),
    get_consumer_store,
)
