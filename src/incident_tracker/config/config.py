"""Application settings for the incident tracker."""

from functools import lru_cache

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENVIRONMENT_ALIASES = {
    "development": "development",
    "dev": "development",
    "local": "development",
    "test": "test",
    "staging": "staging",
    "stage": "staging",
    "production": "production",
    "prod": "production",
}
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Settings shared by the API server, the seed command and the CLI client.

    Every field can be set through the environment variable of the same name
    (``DATABASE_URL``, ``API_PORT``, ...) or through a ``.env`` file.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    # Service identity
    app_name: str = Field(default="Incident Tracker API", description="Name shown in the OpenAPI docs and logs")
    app_version: str = Field(default="0.1.0", description="Version reported by /health/detailed")
    environment: str = Field(default="development", description="development, test, staging or production")
    debug: bool = Field(default=False, description="FastAPI debug mode and verbose server logs")

    # HTTP server
    api_host: str = Field(default="0.0.0.0", description="Interface the server binds to")
    api_port: int = Field(default=5000, description="Port the server listens on")
    api_prefix: str = Field(default="/api", description="Mount point of the incident routes")
    cors_origins: list[str] = Field(default=["http://localhost:3000"], description="Origins allowed in production")

    # Database
    database_url: str = Field(default="sqlite:///./incidents.db", description="SQLAlchemy database URL")
    database_echo: bool = Field(default=False, description="Log every SQL statement")
    database_pool_size: int = Field(default=5, description="Pooled connections kept open")
    database_max_overflow: int = Field(default=10, description="Extra connections allowed beyond the pool")

    # Listing
    default_page_size: int = Field(default=10, ge=1, description="Page size when the request sets none")
    max_page_size: int = Field(default=100, ge=1, description="Largest page size a request may ask for")

    # CLI client
    api_base_url: str = Field(default="http://localhost:5000/api", description="Incident API root used by the CLI")
    client_timeout: float = Field(default=10.0, description="CLI request timeout in seconds")

    # Logging
    log_level: str = Field(default="INFO", description="Minimum level for application and library logs")
    log_format: str = Field(default="json", description="json or text, outside development")
    log_file: str | None = Field(default=None, description="Also write logs to this file")
    log_rotation: bool = Field(default=True, description="Rotate log_file once it reaches log_max_size")
    log_max_size: str = Field(default="100MB", description="Rotation threshold such as 512KB or 100MB")
    log_backup_count: int = Field(default=5, description="Rotated log files to keep")

    @field_validator("environment")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        """Map aliases such as ``dev`` or ``prod`` onto their canonical name."""
        try:
            return ENVIRONMENT_ALIASES[v.strip().lower()]
        except KeyError:
            raise ValueError(f"Unknown environment {v!r}, expected one of: {', '.join(ENVIRONMENT_ALIASES)}") from None

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {v!r}, expected one of: {', '.join(LOG_LEVELS)}")
        return level

    @computed_field
    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @computed_field
    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_settings(self) -> dict:
        """
        Keyword arguments for CORSMiddleware.

        Outside production any origin may call the API. In production only
        ``cors_origins`` may, with the methods the incident routes use.
        """
        if not self.is_production:
            return {"allow_origins": ["*"], "allow_credentials": False, "allow_methods": ["*"], "allow_headers": ["*"]}
        return {
            "allow_origins": self.cors_origins,
            "allow_credentials": True,
            "allow_methods": ["GET", "POST", "PATCH", "OPTIONS"],
            "allow_headers": ["Content-Type", "X-Request-ID"],
            "expose_headers": ["X-Request-ID"],
        }


@lru_cache
def get_settings() -> Settings:
    return Settings()
