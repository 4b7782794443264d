"""
FastAPI application factory.

The app owns the database lifecycle: the engine and the incidents schema are
set up on startup and the pool is disposed of on shutdown. Health routes sit
at the root, incident routes under ``settings.api_prefix``.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..config import Settings, configure_logging, get_logger, get_settings
from ..infrastructure.database import database_manager
from .middleware import configure_cors, request_logging_middleware
from .responses import register_exception_handlers
from .routers import health, incidents

OPENAPI_TAGS = [
    {"name": "incidents", "description": "Create, list, fetch and update incidents"},
    {"name": "health", "description": "Liveness and database connectivity"},
]


def create_lifespan_manager(settings: Settings):
    """Lifespan bound to ``settings``: connect and create the schema, then dispose on exit."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger = get_logger("app.lifespan")
        try:
            database_manager.initialize(settings)
        except Exception as e:
            logger.error("Database initialization failed", error=str(e), exc_info=True)
            raise
        logger.info("Incident Tracker API ready", environment=settings.environment, api_prefix=settings.api_prefix)

        yield

        database_manager.close()
        logger.info("Incident Tracker API stopped")

    return lifespan


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application; settings default to the cached environment settings."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Track operational incidents: create, list, filter and update them.",
        lifespan=create_lifespan_manager(settings),
        debug=settings.debug,
        openapi_tags=OPENAPI_TAGS,
    )

    configure_cors(app, settings)
    app.middleware("http")(request_logging_middleware)
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(incidents.router, prefix=settings.api_prefix)

    get_logger("app.factory").debug("Application created", app_name=settings.app_name, version=settings.app_version)
    return app
