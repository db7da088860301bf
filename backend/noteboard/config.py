"""
NoteBoard — Application Configuration
======================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; validated before the app starts.

Backend selection:
    RECORD_STORE_BACKEND=graphql → managed GraphQL API (GRAPHQL_ENDPOINT)
    RECORD_STORE_BACKEND=sql     → local SQLAlchemy store (DATABASE_URL)
    BLOB_STORE_BACKEND=local     → files under STORAGE_ROOT, signed URLs
    BLOB_STORE_BACKEND=http      → managed storage gateway (STORAGE_ENDPOINT)
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development (SQL record
    store on SQLite, blobs on the local disk). Production deployments point
    the two stores at the managed platform.
    """

    # ── Record Store ──────────────────────────────────────────────────────
    record_store_backend: str = Field(default="sql")

    # What: GraphQL endpoint of the managed API and its API key
    # Format: https://<api-id>.appsync-api.<region>.amazonaws.com/graphql
    graphql_endpoint: str = Field(default="")
    graphql_api_key: str = Field(default="")

    # What: Async SQLAlchemy URL for the local record store
    database_url: str = Field(
        default="sqlite+aiosqlite:///./noteboard.db",
        description="Async SQLAlchemy connection URL for the local record store",
    )
    db_pool_size: int = Field(default=20, ge=5, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # ── Blob Store ────────────────────────────────────────────────────────
    blob_store_backend: str = Field(default="local")

    # What: Root directory for blobs stored by the local blob store
    storage_root: str = Field(default="./storage")

    # What: Base URL and key for the managed storage gateway
    storage_endpoint: str = Field(default="")
    storage_api_key: str = Field(default="")

    # What: HMAC secret and lifetime for locally signed object URLs
    # Default lifetime matches the managed platform's pre-signed URLs (15 min)
    url_signing_secret: str = Field(default="dev-signing-secret")
    url_expires_seconds: int = Field(default=900, ge=10, le=604_800)

    # What: Prefix prepended to locally signed URLs ("" keeps them relative)
    public_base_url: str = Field(default="")

    # Default: 10MB = 10 * 1024 * 1024 = 10485760
    max_file_size: int = Field(default=10_485_760, ge=1_048_576, le=52_428_800)

    # What: Timeout in seconds for every remote store call
    request_timeout: float = Field(default=10.0, gt=0, le=120)

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Sessions ──────────────────────────────────────────────────────────
    session_cookie_name: str = Field(default="noteboard_session")

    # What: Upper bound on in-memory boards; the oldest session is evicted
    max_sessions: int = Field(default=1000, ge=1, le=100_000)

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
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

    @field_validator("record_store_backend")
    @classmethod
    def validate_record_store_backend(cls, v: str) -> str:
        """Only the GraphQL and SQL record stores exist."""
        lower = v.lower()
        if lower not in {"graphql", "sql"}:
            raise ValueError(f"Invalid record_store_backend '{v}'. Must be 'graphql' or 'sql'")
        return lower

    @field_validator("blob_store_backend")
    @classmethod
    def validate_blob_store_backend(cls, v: str) -> str:
        """Only the local and HTTP blob stores exist."""
        lower = v.lower()
        if lower not in {"local", "http"}:
            raise ValueError(f"Invalid blob_store_backend '{v}'. Must be 'local' or 'http'")
        return lower

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that the selected backends are fully configured.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them.
        """
        errors = []
        if self.record_store_backend == "graphql" and not self.graphql_endpoint:
            errors.append("GRAPHQL_ENDPOINT is not set but RECORD_STORE_BACKEND=graphql.")
        if self.blob_store_backend == "http" and not self.storage_endpoint:
            errors.append("STORAGE_ENDPOINT is not set but BLOB_STORE_BACKEND=http.")
        if self.blob_store_backend == "local" and self.url_signing_secret == "dev-signing-secret":
            errors.append(
                "URL_SIGNING_SECRET is the development default. "
                "Set a random secret before exposing the server."
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance — imported throughout the application
settings = Settings()
