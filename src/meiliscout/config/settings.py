"""Driver settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified)
  2. Environment variables (MEILISCOUT_ prefix) and .env
  3. Default values

Fields absent from the YAML file still fall back to the environment.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class MeiliSearchSettings(BaseModel):
    """Connection settings for the MeiliSearch instance."""

    host: str = Field(default="http://localhost:7700", description="MeiliSearch base URL")
    api_key: str | None = Field(default=None, description="Master key or API key")
    timeout: float = Field(default=30.0, gt=0, description="HTTP request timeout in seconds")
    task_timeout: float = Field(default=5.0, gt=0, description="Default wait_for_task timeout in seconds")
    task_interval: float = Field(default=0.05, gt=0, description="Polling interval for wait_for_task in seconds")

    @field_validator("host")
    @classmethod
    def _strip_host(cls, v: str) -> str:
        return v.rstrip("/")


class SyncSettings(BaseModel):
    """Index synchronization behavior."""

    soft_delete: bool = Field(
        default=False,
        description="Push soft-delete metadata for entity types that declare soft_deletes",
    )
    chunk_size: int = Field(default=500, ge=1, description="Entities per push when importing a whole type")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root driver settings.

    Configuration is loaded from environment variables with the MEILISCOUT_ prefix.
    Nested settings use double underscores: MEILISCOUT_MEILISEARCH__HOST=http://meili:7700

    Example:
        MEILISCOUT_MEILISEARCH__API_KEY=masterKey
        MEILISCOUT_SYNC__SOFT_DELETE=true
        MEILISCOUT_OBSERVABILITY__LOG_FORMAT=console
    """

    model_config = {
        "env_prefix": "MEILISCOUT_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    meilisearch: MeiliSearchSettings = Field(default_factory=MeiliSearchSettings)
    sync: SyncSettings = Field(default_factory=SyncSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are passed as init arguments, so they win
        over environment variables. Fields the file leaves out are filled
        from the environment, then from defaults.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
