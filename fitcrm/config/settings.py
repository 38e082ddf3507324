"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

The default storage backend is in-memory, so the API runs locally
without any external services.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like cors_origins), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "FitCRM API"
    api_version: str = "v1"

    # Client storage
    storage_backend: Literal["memory", "file", "r2"] = Field(
        default="memory",
        description="Where client records live. 'memory' is volatile and resets on restart."
    )
    storage_key: str = Field(
        default="fitcrm_clients",
        description="Fixed key under which the serialized client array is stored"
    )
    data_dir: str = Field(
        default="data",
        description="Directory for the 'file' storage backend"
    )

    # R2/S3 Storage Configuration
    r2_account_id: str = Field(
        default="",
        description="Cloudflare account ID for R2"
    )
    r2_access_key_id: str = Field(
        default="",
        description="R2 access key ID"
    )
    r2_secret_access_key: str = Field(
        default="",
        description="R2 secret access key"
    )
    r2_bucket_name: str = Field(
        default="fitcrm-data",
        description="R2 bucket name for the client blob"
    )
    r2_endpoint_url: Optional[str] = Field(
        default=None,
        description="R2 endpoint URL. Auto-constructed from account_id if not provided."
    )
    r2_mock_mode: bool = Field(
        default=False,
        description="Use in-memory mock instead of real R2. Enables local dev without object storage."
    )

    # Exercise API (wger)
    wger_base_url: str = Field(
        default="https://wger.de/api/v2",
        description="Base URL of the wger REST API"
    )
    wger_language: int = Field(
        default=2,
        description="wger language id. 2 is English."
    )
    wger_fetch_limit: int = Field(
        default=50,
        description="Page size requested from wger"
    )
    wger_timeout_seconds: float = Field(
        default=5.0,
        description="Timeout for exercise API calls. The static fallback is used on timeout."
    )
    wger_mock_mode: bool = Field(
        default=False,
        description="Serve canned exercises instead of calling wger."
    )
    suggestion_count: int = Field(
        default=5,
        description="Number of exercises suggested for a client's next session"
    )

    # Application Behavior
    seed_sample_data: bool = Field(
        default=False,
        description="Seed sample clients at startup when the collection is empty"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins. Use * for development only."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def r2_endpoint(self) -> str:
        """
        Construct R2 endpoint URL from account ID.

        R2 endpoints follow the pattern: https://{account_id}.r2.cloudflarestorage.com
        """
        if self.r2_endpoint_url:
            return self.r2_endpoint_url
        return f"https://{self.r2_account_id}.r2.cloudflarestorage.com"

    def validate_required_fields(self) -> list[str]:
        """
        Validate that required fields are set for the selected backend.

        Returns list of missing required fields.
        This is separate from Pydantic validation because requirements
        depend on which storage backend is in use.
        """
        missing = []

        if self.storage_backend == "r2" and not self.r2_mock_mode:
            if not self.r2_account_id and not self.r2_endpoint_url:
                missing.append("R2_ACCOUNT_ID or R2_ENDPOINT_URL")
            if not self.r2_access_key_id:
                missing.append("R2_ACCESS_KEY_ID")
            if not self.r2_secret_access_key:
                missing.append("R2_SECRET_ACCESS_KEY")

        if self.storage_backend == "file" and not self.data_dir:
            missing.append("DATA_DIR")

        if self.suggestion_count < 1:
            missing.append("SUGGESTION_COUNT (must be positive)")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once per process.
    For tests, call get_settings.cache_clear() to reset.
    """
    return Settings()
