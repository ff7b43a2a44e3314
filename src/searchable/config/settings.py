"""Application settings: Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (SEARCHABLE_ prefix)
  2. YAML config file (if specified)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class DatabaseSettings(BaseModel):
    """Relational backend used by pattern-match searches."""

    url: str = Field(default="sqlite:///./searchable.db", description="SQLAlchemy database URL")
    echo: bool = Field(default=False, description="Log emitted SQL statements")


class MeiliSearchSettings(BaseModel):
    """MeiliSearch connection used by delegated-index searches."""

    base_url: str = Field(default="http://localhost:7700", description="MeiliSearch instance URL")
    api_key: str | None = Field(default=None, description="Master key or API key")
    timeout: float = Field(default=30.0, gt=0, description="HTTP request timeout in seconds")
    max_hits: int = Field(default=1000, ge=1, description="Hit limit for searches without a limit")
    wait_for_tasks: bool = Field(default=True, description="Wait for settings tasks to finish before searching")
    task_poll_interval: float = Field(default=0.05, gt=0, description="Seconds between task status polls")
    task_timeout: float = Field(default=5.0, gt=0, description="Seconds to wait for a settings task")


class SearchSettings(BaseModel):
    """Search behavior configuration."""

    default_limit: int | None = Field(default=None, ge=1, description="Per-aspect result cap (None = unbounded)")
    escape_sequences: dict[str, str] = Field(
        default_factory=dict,
        description="Dialect name -> replacement for a literal backslash in LIKE patterns",
    )

    @field_validator("escape_sequences")
    @classmethod
    def _check_sequences(cls, v: dict[str, str]) -> dict[str, str]:
        for dialect, sequence in v.items():
            if not sequence or set(sequence) != {"\\"}:
                raise ValueError(f"Escape sequence for '{dialect}' must consist of backslashes only")
        return v


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")
    library_log_level: str | None = Field(
        default=None,
        description="Level for the 'searchable' logger (None = same as log_level)",
    )


class Settings(BaseSettings):
    """Root settings.

    Configuration is loaded from environment variables with the SEARCHABLE_ prefix.
    Nested settings use double underscores: SEARCHABLE_DATABASE__URL=postgresql://...

    Example:
        SEARCHABLE_DATABASE__URL=sqlite:///app.db
        SEARCHABLE_MEILISEARCH__API_KEY=masterKey
        SEARCHABLE_SEARCH__DEFAULT_LIMIT=20
    """

    model_config = {
        "env_prefix": "SEARCHABLE_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    debug: bool = Field(default=False, description="Debug mode")

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    meilisearch: MeiliSearchSettings = Field(default_factory=MeiliSearchSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are used as defaults; environment variables
        still take precedence.

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
