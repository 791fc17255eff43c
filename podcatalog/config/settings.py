"""podcatalog application settings loaded from environment variables."""

from enum import StrEnum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    """Deployment environment."""

    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"


class LogLevel(StrEnum):
    """Supported log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StoreBackend(StrEnum):
    """Document store implementation used by the application."""

    MEMORY = "memory"
    HTTP = "http"


class Settings(BaseSettings):
    """Application-wide settings loaded from environment variables / .env file.

    Credentials and deployment-specific URLs live here. Never hardcode them.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Document store ---
    STORE_BACKEND: StoreBackend = Field(
        default=StoreBackend.MEMORY,
        description="Document store backend (memory for dev/tests, http for pods).",
    )
    STORE_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout handed to the HTTP store client.",
    )
    STORE_ACCESS_TOKEN: str = Field(
        default="",
        description="Bearer credential sent with every store request (empty = none).",
    )
    DOCUMENT_EXTENSION: str = Field(
        default=".jsonld",
        description="File extension of catalog and audit documents.",
    )

    # --- Audit ---
    AUDIT_CONTAINER_URL: str = Field(
        default="http://localhost:3000/org/audit/ldes/",
        description="Shared, multi-tenant container receiving audit event documents.",
    )
    AUDIT_QUEUE_MAXSIZE: int = Field(
        default=1000,
        ge=0,
        description="Max pending audit events before publish drops (0 = unbounded).",
    )

    # --- Retrieval ---
    RETRIEVAL_DEFAULT_LIMIT: int = Field(
        default=0,
        ge=0,
        description="Default asset limit for bulk retrieval (0 = no limit).",
    )

    # --- Logging ---
    LOG_LEVEL: LogLevel = Field(
        default=LogLevel.INFO,
        description="Application log level.",
    )

    # --- Environment ---
    ENVIRONMENT: Environment = Field(
        default=Environment.DEV,
        description="Deployment environment (dev/staging/prod).",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.ENVIRONMENT == Environment.PROD


def get_settings() -> Settings:
    """Factory function for dependency injection via FastAPI Depends."""
    return Settings()
