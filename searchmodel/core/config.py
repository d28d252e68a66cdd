"""Library configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support; every variable is prefixed with SEARCHMODEL_
(e.g. SEARCHMODEL_FETCH_CONCURRENCY). Backend-specific settings
(database_url, firebase_*) are only checked when that backend is used.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_TELEMETRY_EXPORTERS = ("console", "otlp", "none")


class Settings(BaseSettings):
    """Library settings loaded from environment and .env.

    All settings are optional with defaults; validate_telemetry rejects
    unknown exporters and an OTLP exporter without an endpoint.
    """

    # App
    app_name: str = "searchmodel"
    app_version: str = "1.0.0"
    debug: bool = False

    # Reassembly
    fetch_concurrency: int = Field(default=8, ge=1)
    fetch_timeout_seconds: float | None = Field(default=None, gt=0)
    # Ids per backend round trip; fetchers split larger id lists into chunks.
    fetch_batch_size: int = Field(default=1000, ge=1)
    allow_partial_results: bool = False
    # Share (index, type) resolutions across calls; invalidated on registry mutation.
    shared_type_cache: bool = False

    # Relational backend (SQLAlchemy async URL, e.g. postgresql+asyncpg://...)
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None

    # Document backend (Firestore): use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = Field(default=1.0, ge=0.0, le=1.0)
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_prefix="SEARCHMODEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_telemetry(self) -> "Settings":
        """Validate exporter name and OTLP endpoint."""
        if self.telemetry_exporter not in _TELEMETRY_EXPORTERS:
            raise ValueError(
                f"telemetry_exporter must be one of {', '.join(_TELEMETRY_EXPORTERS)}, "
                f"got: {self.telemetry_exporter!r}"
            )
        if self.telemetry_exporter == "otlp" and not self.telemetry_otlp_endpoint:
            raise ValueError(
                "SEARCHMODEL_TELEMETRY_OTLP_ENDPOINT is required when telemetry_exporter is 'otlp'."
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
