"""
Keep API — Application Configuration
======================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a module-level `settings` object.
Who:   Imported by the app factory, the database layer and the security layer.
When:  Loaded once at module import time; never reloaded while the process runs.

Database URL:
    Either supply DATABASE_URL directly, or let it be assembled from the
    discrete DB_HOST / DB_PORT / DB_USER / DB_PASSWORD / DB_NAME variables.
    The discrete form matches how most hosting panels hand out credentials.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL

DEV_JWT_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Production deployments MUST override JWT_SECRET and the database
    credentials. Attributes are grouped by concern.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Full SQLAlchemy URL; when empty the URL is built from the parts below
    database_url: Optional[str] = Field(default=None)

    db_driver: str = Field(default="postgresql+asyncpg")
    db_host: str = Field(default="localhost")
    db_port: int = Field(default=5432, ge=1, le=65535)
    db_user: str = Field(default="keep")
    db_password: str = Field(default="keep_secret")
    db_name: str = Field(default="keep")

    # Connection pool sizing: each request holds one connection for its duration
    db_pool_size: int = Field(default=10, ge=1, le=100)
    db_max_overflow: int = Field(default=5, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # Issue CREATE TABLE IF NOT EXISTS for all models at startup
    db_create_tables: bool = Field(default=True)

    @property
    def sqlalchemy_url(self) -> str:
        """Resolved connection URL (explicit DATABASE_URL wins)."""
        if self.database_url:
            return self.database_url
        return URL.create(
            drivername=self.db_driver,
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        ).render_as_string(hide_password=False)

    # ── Authentication ────────────────────────────────────────────────────
    # Symmetric HS256 signing secret for admin bearer tokens
    jwt_secret: str = Field(default=DEV_JWT_SECRET)
    jwt_algorithm: str = Field(default="HS256")
    jwt_expires_in_seconds: int = Field(default=3600, ge=60, le=86400)

    # bcrypt work factor; 4 is the library minimum (used by the test suite)
    bcrypt_rounds: int = Field(default=10, ge=4, le=15)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated origins; "*" allows any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Server ────────────────────────────────────────────────────────────
    app_host: str = Field(default="0.0.0.0")
    app_port: int = Field(default=3000, ge=1, le=65535)

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

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        """Only symmetric HMAC algorithms make sense with a shared secret."""
        upper = v.upper()
        if upper not in {"HS256", "HS384", "HS512"}:
            raise ValueError(f"Unsupported jwt_algorithm '{v}'. Use HS256, HS384 or HS512")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that security-critical settings are configured.
        When:  Called during app startup (lifespan).
        How:   Raises ValueError listing every problem found.
        """
        errors = []
        if not self.jwt_secret or self.jwt_secret == DEV_JWT_SECRET:
            errors.append(
                "JWT_SECRET is not set. Tokens are being signed with the development default."
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


settings = Settings()
