"""
Server launcher.

Runs the API under uvicorn, either with auto-reload for development or as a
single long-lived server. uvicorn turns SIGTERM/SIGINT into a graceful stop,
after which the registered cleanup callbacks run.
"""

from typing import Any, Callable

import uvicorn
from fastapi import FastAPI

from .api.app import create_app
from .config import Settings, get_logger, get_settings
from .infrastructure.database import database_manager

logger = get_logger("app.launcher")

# Import path uvicorn uses to rebuild the app in reload workers.
APP_FACTORY = "incident_tracker.main:get_application"


class ApplicationManager:
    """Owns the application instance, the running server and the cleanup to run on exit."""

    def __init__(self) -> None:
        self.app: FastAPI | None = None
        self.server: uvicorn.Server | None = None
        self._cleanup: list[Callable[[], None]] = []

    def get_app(self) -> FastAPI:
        if self.app is None:
            self.app = create_app()
        return self.app

    def on_shutdown(self, callback: Callable[[], None]) -> None:
        self._cleanup.append(callback)

    def shutdown(self) -> None:
        """Run cleanup callbacks newest first and make sure the server stops."""
        for callback in reversed(self._cleanup):
            try:
                callback()
            except Exception as e:
                logger.error(
                    "Shutdown callback failed",
                    callback=getattr(callback, "__qualname__", repr(callback)),
                    error=str(e),
                    exc_info=True,
                )
        self._cleanup.clear()

        if self.server is not None:
            self.server.should_exit = True
        logger.info("Shutdown complete")


app_manager = ApplicationManager()


def server_options(settings: Settings, host: str | None = None, port: int | None = None, **overrides: Any) -> dict[str, Any]:
    """uvicorn keyword arguments, with host and port falling back to settings."""
    options: dict[str, Any] = {
        "host": host or settings.api_host,
        "port": port or settings.api_port,
        "log_level": "debug" if settings.debug else "info",
        "access_log": settings.is_development,
        "server_header": False,
    }
    options.update(overrides)
    return options


def run_development_server(host: str | None = None, port: int | None = None, reload: bool = True, **overrides: Any) -> None:
    settings = get_settings()
    options = server_options(settings, host, port, **overrides)
    logger.info("Starting development server", host=options["host"], port=options["port"], reload=reload)

    try:
        if reload:
            uvicorn.run(APP_FACTORY, factory=True, reload=True, reload_dirs=["src"], **options)
        else:
            uvicorn.run(app_manager.get_app(), **options)
    except KeyboardInterrupt:
        logger.info("Development server stopped")


def run_production_server(host: str | None = None, port: int | None = None, **overrides: Any) -> None:
    """Serve without reload; the database pool is released once the server exits."""
    settings = get_settings()
    options = server_options(settings, host, port, **overrides)
    logger.info(
        "Starting production server", host=options["host"], port=options["port"], environment=settings.environment
    )

    app_manager.on_shutdown(database_manager.close)
    app_manager.server = uvicorn.Server(uvicorn.Config(app_manager.get_app(), **options))
    try:
        app_manager.server.run()
    finally:
        app_manager.shutdown()


def get_application() -> FastAPI:
    """Application instance for ASGI servers and the reload factory."""
    return app_manager.get_app()


if __name__ == "__main__":
    run_development_server()
