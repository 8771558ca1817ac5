"""
Postboard Backend: Application Configuration
==============================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a default `settings` object.
Who:   Passed to create_app(); routes read it back from app.state.
When:  Loaded once at process start and never mutated afterwards.

The shared secret (API_KEY) and the storage handle (DATABASE_URL) are the only
values the request path depends on. Everything else tunes the pool, logging
and server bind.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import make_url


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults. Production deployments MUST set
    API_KEY; without it every mutating request is rejected with 401.
    """

    # ── Authentication ────────────────────────────────────────────────────
    # Compared verbatim against the X-API-Key header on POST/PUT/DELETE.
    api_key: str = Field(
        default="",
        description="Shared secret required in X-API-Key for mutating requests",
    )

    # ── Database ──────────────────────────────────────────────────────────
    # Format: sqlite+aiosqlite:///./file.db or postgresql+asyncpg://user:pw@host/db
    database_url: str = Field(
        default="sqlite+aiosqlite:///./postboard.db",
        description="Async SQLAlchemy connection URL",
    )

    # Pool sizing only applies to server backends; sqlite uses its own pool.
    db_pool_size: int = Field(default=20, ge=1, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # Create the posts/comments tables on startup when they are missing.
    # Not a migration system: existing tables are never altered.
    db_create_tables: bool = Field(default=False)

    # ── Responses ─────────────────────────────────────────────────────────
    # False: every failed outcome except 401 is reported as HTTP 400.
    # True:  not found -> 404, method not allowed -> 405, faults -> 500.
    strict_status_codes: bool = Field(default=False)

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1, le=65535)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.database_url).get_backend_name() == "sqlite"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    def validate_required_for_production(self) -> None:
        """
        Checks that critical settings are configured.

        Raises ValueError listing every problem found. Called from the
        lifespan, which logs the error instead of aborting startup: reads
        keep working without a key.
        """
        errors = []
        if not self.api_key:
            errors.append(
                "API_KEY is not set. All POST/PUT/DELETE requests will be rejected with 401."
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Default instance used when create_app() is called without explicit settings.
settings = Settings()
