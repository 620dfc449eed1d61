"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Secrets (chain private key) come from environment variables, never hardcoded
    - get_settings() is cached (lru_cache) — single instance per process
    - chain_rpc_url unset means blockchain notifications are disabled, not an error

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - cors_origins accepts a comma-separated string (ALLOWED_ORIGINS style) or a JSON list
"""

import json
from functools import lru_cache
from typing import Annotated

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8080",
    "https://trace.capiroso.site",
    "https://digisaka.capiroso.site",
]


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Runtime
    environment: str = "production"
    host: str = "0.0.0.0"
    port: int = 3001

    # API
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_CORS_ORIGINS),
        validation_alias=AliasChoices("cors_origins", "allowed_origins"),
    )
    max_body_bytes: int = 10 * 1024 * 1024

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v: object) -> object:
        """ALLOWED_ORIGINS-style env values are comma separated."""
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                return json.loads(v)
            return [o.strip() for o in v.split(",") if o.strip()]
        return v

    # Storage
    data_dir: str = "./data"
    persist_snapshots: bool = True
    enforce_unique_qr_codes: bool = False

    # Blockchain (best-effort marker transfers)
    chain_rpc_url: str | None = None
    chain_private_key: str | None = None
    chain_marker_value_wei: int = 10**15
    chain_timeout_seconds: int = 30
    outbox_max_size: int = 1000

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def chain_enabled(self) -> bool:
        return bool(self.chain_rpc_url and self.chain_private_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()
