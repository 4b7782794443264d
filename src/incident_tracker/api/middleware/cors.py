"""CORS configuration for browser clients."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ...config import Settings, get_logger, get_settings


def configure_cors(app: FastAPI, settings: Settings | None = None) -> None:
    """Attach CORSMiddleware with environment-specific settings."""
    settings = settings or get_settings()
    cors_settings = settings.get_cors_settings()

    app.add_middleware(CORSMiddleware, **cors_settings)

    get_logger("api.cors").debug("CORS configured", allow_origins=cors_settings["allow_origins"])
