"""LocaLink Insights - FastAPI Application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import get_settings
from api.v1.router import api_v1_router
from api.routes import health
from db.database import close_db, init_db
from notifications.manager import get_notification_manager
from core.logging_config import setup_logging
from core.constants import CONSUMER_RELAY_ROUTE, DASHBOARD_RELAY_ROUTE
from core.middleware import RelayExemptCORSMiddleware, RequestTrackingMiddleware, setup_exception_handlers
from core.metrics import MetricsMiddleware, metrics_router

SHUTDOWN_DRAIN_SECONDS = 5.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    # Startup
    settings = get_settings()
    setup_logging()

    # Refuse to start in production without a token secret
    try:
        settings.validate_secrets()
    except RuntimeError as e:
        print(f"[startup] FATAL: {e}")
        raise

    await init_db()

    notif_mgr = get_notification_manager()
    print(f"[startup] Notification manager ready ({notif_mgr.channel.url})")

    print(f"[startup] {settings.APP_NAME} v{settings.APP_VERSION} started ({settings.ENVIRONMENT})")
    yield
    # Shutdown
    if notif_mgr.pending:
        print(f"[shutdown] Waiting for {notif_mgr.pending} notification(s)...")
        await notif_mgr.drain(timeout=SHUTDOWN_DRAIN_SECONDS)
    await close_db()
    print("[shutdown] Application shutting down...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    relay_paths = tuple(
        settings.API_V1_PREFIX + route for route in (DASHBOARD_RELAY_ROUTE, CONSUMER_RELAY_ROUTE)
    )

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        description="Relay and onboarding backend connecting LocaLink dashboards "
                    "to the AI automation platform.",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    # Prometheus metrics middleware
    app.add_middleware(MetricsMiddleware)

    # Request tracking middleware
    app.add_middleware(RequestTrackingMiddleware)

    # CORS middleware (relays send their own headers)
    app.add_middleware(
        RelayExemptCORSMiddleware,
        exempt_paths=relay_paths,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type", "x-request-id"],
    )

    # Global exception handlers
    setup_exception_handlers(app, relay_paths)

    # Root health check (unversioned, for load balancers / k8s probes)
    app.include_router(health.router, prefix="/api", tags=["Health"])

    # Versioned API under /api/v1
    app.include_router(api_v1_router, prefix=settings.API_V1_PREFIX)

    # Prometheus metrics (unauthenticated, for scrapers)
    app.include_router(metrics_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)
