"""FastAPI middleware for request tracking, timing, and error handling.

Adds:
- X-Request-ID header (generated if not provided)
- X-Process-Time header (request duration)
- Structured logging per request
- CORS for the API, with the relay entry points left to answer their own preflights
- Exception handlers for the LocaLink error taxonomy
"""

import logging
import time
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import Receive, Scope, Send

from app.config import get_settings
from core.constants import RELAY_CORS_HEADERS
from core.exceptions import (
    LocaLinkException,
    MalformedPayloadError,
    MethodNotAllowedError,
    PersistenceError,
    UnauthenticatedError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

_QUIET_PATHS = ("/api/health", "/api/v1/health", "/metrics")


class RequestTrackingMiddleware(BaseHTTPMiddleware):
    """Add request ID and timing to every request/response."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.monotonic()

        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.monotonic() - start_time) * 1000
            logger.error(
                "Unhandled exception",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": round(duration_ms, 2),
                    "error": str(exc),
                },
                exc_info=True,
            )
            # In production, don't expose error details to client
            if get_settings().is_production:
                error_detail = "Internal server error"
            else:
                error_detail = str(exc) or "Internal server error"

            return JSONResponse(
                status_code=500,
                content={"detail": error_detail, "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        duration_ms = (time.monotonic() - start_time) * 1000
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{duration_ms:.2f}ms"

        log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
        if request.url.path not in _QUIET_PATHS:
            logger.log(
                log_level,
                f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.0f}ms)",
                extra={
                    "request_id": request_id,
                    "status_code": response.status_code,
                    "client_ip": request.client.host if request.client else None,
                },
            )

        return response


class RelayExemptCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that passes relay paths straight through.

    The relays allow any origin and reply to OPTIONS with an empty body,
    which the configured origin list must not override.
    """

    def __init__(self, app, exempt_paths: tuple = (), **kwargs):
        super().__init__(app, **kwargs)
        self.exempt_paths = frozenset(exempt_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["path"].rstrip("/") in self.exempt_paths:
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


def setup_exception_handlers(app: FastAPI, relay_paths: tuple = ()) -> None:
    """Register handlers mapping LocaLink exceptions onto JSON responses.

    Requests served by a relay entry point get the relay's body shapes
    (``{success: false, error, details}``) and CORS headers; everything
    else gets ``{detail, request_id}``.
    """
    relay_paths = frozenset(relay_paths)

    def _is_relay_request(request: Request) -> bool:
        return request.url.path.rstrip("/") in relay_paths

    def _body(request: Request, exc: LocaLinkException) -> dict:
        if _is_relay_request(request):
            return {"success": False, "error": exc.message}
        return {"detail": exc.message, "request_id": getattr(request.state, "request_id", None)}

    def _headers(request: Request, extra: dict = None) -> dict:
        headers = dict(RELAY_CORS_HEADERS) if _is_relay_request(request) else {}
        headers.update(extra or {})
        return headers

    @app.exception_handler(UnauthenticatedError)
    async def unauthenticated_handler(request: Request, exc: UnauthenticatedError):
        return JSONResponse(
            status_code=401,
            content=_body(request, exc),
            headers=_headers(request, {"WWW-Authenticate": "Bearer"}),
        )

    @app.exception_handler(UnauthorizedError)
    async def unauthorized_handler(request: Request, exc: UnauthorizedError):
        return JSONResponse(
            status_code=401,
            content=_body(request, exc),
            headers=_headers(request, {"WWW-Authenticate": "Bearer"}),
        )

    @app.exception_handler(MalformedPayloadError)
    async def malformed_handler(request: Request, exc: MalformedPayloadError):
        return JSONResponse(status_code=400, content=_body(request, exc), headers=_headers(request))

    @app.exception_handler(MethodNotAllowedError)
    async def method_not_allowed_handler(request: Request, exc: MethodNotAllowedError):
        return JSONResponse(
            status_code=405,
            content={"error": exc.message},
            headers=_headers(request),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # Unrouted verbs on a relay path get the relay 405 shape
        if exc.status_code == 405 and _is_relay_request(request):
            return await method_not_allowed_handler(request, MethodNotAllowedError())
        return await http_exception_handler(request, exc)

    @app.exception_handler(PersistenceError)
    async def persistence_handler(request: Request, exc: PersistenceError):
        logger.error(f"Persistence failure: {exc.message}", extra={"details": exc.details})
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": exc.message, "details": exc.details},
            headers=_headers(request),
        )

    @app.exception_handler(LocaLinkException)
    async def generic_handler(request: Request, exc: LocaLinkException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_body(request, exc),
            headers=_headers(request),
        )
