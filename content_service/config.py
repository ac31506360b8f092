"""Application configuration with Pydantic Settings.

Settings are loaded from environment variables and an optional .env file.

Examples:
    >>> from content_service.config import get_settings
    >>> settings = get_settings()
    >>> settings.STORAGE_PROVIDER
    <StorageProvider.LOCAL: 'local'>

Tests:
    - tests/unit/test_config.py::TestSettings
    - tests/unit/test_config.py::TestApiKeys
"""

from __future__ import annotations

import json
from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class StorageProvider(str, Enum):
    """Blob storage providers.

    - LOCAL: Filesystem under STORAGE_ROOT
    - MEMORY: Process-local dictionaries (tests, throwaway dev servers)
    - HTTP: Swift-style object store REST API at STORAGE_ENDPOINT
    """

    LOCAL = "local"
    MEMORY = "memory"
    HTTP = "http"


class Settings(BaseSettings):
    """Content service settings.

    Attributes:
        STORAGE_PROVIDER: Which blob store backend to build
        CONTENT_CONTAINER: Container holding metadata envelopes
        ASSET_CONTAINER: Container holding fingerprinted assets
        INDEX_DATABASE_URL: Database for the search index and asset directory
        BACKEND_TIMEOUT_SECONDS: Deadline for each backend call (0 disables)
        API_KEYS: Comma separated name:key pairs or a JSON object
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    DEBUG: bool = Field(default=True, description="Enable debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Root log level")

    # Blob storage
    STORAGE_PROVIDER: StorageProvider = Field(
        default=StorageProvider.LOCAL,
        description="Blob storage backend",
    )
    STORAGE_ROOT: str = Field(
        default="./output/blobs",
        description="Root directory for the local provider",
    )
    STORAGE_ENDPOINT: str | None = Field(
        default=None,
        description="Object store base URL for the http provider",
    )
    STORAGE_AUTH_TOKEN: str | None = Field(
        default=None,
        description="Token sent as X-Auth-Token to the object store",
    )
    CONTENT_CONTAINER: str = Field(default="content", description="Envelope container")
    ASSET_CONTAINER: str = Field(default="assets", description="Asset container")
    ASSET_PUBLIC_BASE_URL: str | None = Field(
        default=None,
        description="Public (CDN) base URL for published assets",
    )

    # Search index
    INDEX_DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./content_index.db",
        description="Search index database connection string",
    )

    # Core behaviour
    BACKEND_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        ge=0,
        description="Per-backend-call deadline in seconds (0 disables)",
    )
    ASSET_CHUNK_SIZE: int = Field(
        default=64 * 1024,
        ge=1,
        description="Read size when streaming uploaded assets",
    )
    ASSET_SPOOL_MAX_BYTES: int = Field(
        default=8 * 1024 * 1024,
        ge=0,
        description="Bytes kept in memory before an asset spools to disk",
    )

    # Auth
    API_KEYS: str = Field(
        default="",
        description="Accepted API keys as name:key pairs or a JSON object",
    )

    @field_validator("INDEX_DATABASE_URL")
    @classmethod
    def validate_index_database_url(cls, v: str) -> str:
        """Validate database URL format."""
        valid_prefixes = ("sqlite", "postgresql", "postgres")
        if not any(v.startswith(prefix) for prefix in valid_prefixes):
            raise ValueError(
                f"INDEX_DATABASE_URL must start with one of: {valid_prefixes}"
            )
        return v

    @model_validator(mode="after")
    def validate_storage(self) -> "Settings":
        """Ensure the http provider has an endpoint."""
        if self.STORAGE_PROVIDER == StorageProvider.HTTP and not self.STORAGE_ENDPOINT:
            raise ValueError("STORAGE_ENDPOINT is required when STORAGE_PROVIDER=http")
        return self

    @property
    def backend_timeout(self) -> float | None:
        """Backend deadline in seconds, or None when disabled."""
        return self.BACKEND_TIMEOUT_SECONDS or None

    @property
    def auth_enabled(self) -> bool:
        """API keys are only enforced once at least one is configured."""
        return bool(self.api_keys)

    @property
    def api_keys(self) -> dict[str, str]:
        """Parse API_KEYS into a key -> name mapping.

        Accepts either ``{"name": "key", ...}`` JSON or ``name:key,name2:key2``.
        A bare key without a name is named after its position.

        Returns:
            dict: Mapping of secret key to the key's display name.
        """
        raw = self.API_KEYS.strip()
        if not raw:
            return {}

        if raw.startswith("{"):
            try:
                pairs = json.loads(raw)
            except json.JSONDecodeError as e:
                raise ValueError(f"API_KEYS is not valid JSON: {e}") from e
            return {str(key): str(name) for name, key in pairs.items()}

        keys: dict[str, str] = {}
        for position, item in enumerate(raw.split(",")):
            item = item.strip()
            if not item:
                continue
            name, sep, key = item.partition(":")
            if not sep:
                name, key = f"key-{position}", item
            keys[key.strip()] = name.strip()
        return keys


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: The application settings.
    """
    return Settings()
