"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables (or `.env` /
`.env.local` for local development). No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache

from pydantic import AliasChoices, Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.exceptions import ConfigurationError

ENV_FILES = (".env", ".env.local")


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class EmbeddingSettings(BaseSettings):
    """Embedding provider configuration.

    Targets any OpenAI-compatible `/embeddings` endpoint.
    """

    model_config = SettingsConfigDict(
        env_prefix="EMBEDDING_",
        env_file=ENV_FILES,
        extra="ignore",
        populate_by_name=True,
    )

    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Embedding API base URL",
    )
    model: str = Field(
        default="text-embedding-3-small",
        description="Embedding model name",
    )
    api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("EMBEDDING_API_KEY", "OPENAI_API_KEY"),
        description="Provider API key (required)",
    )
    timeout: float = Field(
        default=30.0,
        description="Request timeout in seconds",
    )


class QdrantSettings(BaseSettings):
    """Qdrant similarity store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="QDRANT_",
        env_file=ENV_FILES,
        extra="ignore",
    )

    url: str = Field(
        default="http://localhost:6333",
        description="Qdrant server URL",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Qdrant API key (required)",
    )
    collection_name: str = Field(
        default="Phase2Website",
        description="Collection holding the embedded documents",
    )
    pool_size: int = Field(
        default=10,
        ge=1,
        description="Maximum concurrent store leases",
    )


class SearchSettings(BaseSettings):
    """Search tool limits."""

    model_config = SettingsConfigDict(
        env_prefix="SEARCH_",
        env_file=ENV_FILES,
        extra="ignore",
    )

    default_limit: int = Field(
        default=5,
        ge=0,
        description="Result limit used when the caller omits one",
    )
    max_limit: int = Field(
        default=20,
        ge=0,
        description="Largest accepted result limit",
    )

    @model_validator(mode="after")
    def _default_within_max(self) -> "SearchSettings":
        if self.default_limit > self.max_limit:
            raise ValueError(
                f"default_limit ({self.default_limit}) exceeds max_limit ({self.max_limit})"
            )
        return self


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Server bind host",
    )
    port: int = Field(
        default=3000,
        description="Server port",
    )

    # Search settings
    match_threshold: float = Field(
        default=0.5,
        ge=-1.0,
        le=1.0,
        description="Minimum (exclusive) cosine similarity for a match",
    )

    # Nested settings
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    qdrant: QdrantSettings = Field(default_factory=QdrantSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)

    def require_credentials(self) -> None:
        """Check that both external-service credentials are present.

        Raises:
            ConfigurationError: If either credential is missing or empty.
        """
        missing: list[str] = []
        if not _has_secret(self.qdrant.api_key):
            missing.append("QDRANT_API_KEY")
        if not _has_secret(self.embedding.api_key):
            missing.append("EMBEDDING_API_KEY")

        if missing:
            raise ConfigurationError(
                f"Missing required environment variable: {', '.join(missing)}",
                details={"missing": missing},
            )


def _has_secret(value: SecretStr | None) -> bool:
    return value is not None and bool(value.get_secret_value().strip())


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
