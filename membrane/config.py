"""Library Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - Settings only shape observability; merge semantics never depend on them

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - MEMBRANE_ prefix and extra="ignore": a host application's .env never breaks import
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings from MEMBRANE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MEMBRANE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    # Log every completed pipeline stage at DEBUG (default for PermeatorOptions)
    trace_stages: bool = False

    @field_validator("log_format", mode="before")
    @classmethod
    def normalize_log_format(cls, v: str) -> str:
        if isinstance(v, str):
            v = v.strip().lower()
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
