"""
puttr configuration.

Settings are read from (highest precedence first):
- keyword arguments passed to Settings()
- PUTTR_* environment variables
- a .env file in the working directory
- a TOML file (puttr.toml, or the path in PUTTR_CONFIG_FILE)
- the defaults below
"""
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Tuple, Type

from pydantic import field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

logger = logging.getLogger("puttr.config")

DEFAULT_CONFIG_FILE = "puttr.toml"


class Settings(BaseSettings):
    """puttr service settings."""

    # Service identification
    APP_NAME: str = "puttr"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Network settings
    HOST: str = "127.0.0.1"
    PORT: int = 3000

    # Uploads are written below this directory
    UPLOAD_ROOT: str = "./uploads"

    # Largest accepted form part (the "content" field), in bytes
    MAX_CONTENT_BYTES: int = 1024 * 1024 * 1024  # 1 GiB

    # Token lifetime
    TOKEN_TTL_SECONDS: int = 300  # 5 minutes

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    model_config = SettingsConfigDict(
        env_prefix="PUTTR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """Add the TOML file as the lowest-precedence source."""
        toml_file = os.environ.get("PUTTR_CONFIG_FILE", DEFAULT_CONFIG_FILE)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            file_secret_settings,
        )

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        """Accept lowercase keys (upload_root = "...") from the TOML file."""
        if isinstance(data, dict):
            return {
                k.upper() if isinstance(k, str) else k: v
                for k, v in data.items()
            }
        return data

    @field_validator("UPLOAD_ROOT")
    @classmethod
    def validate_upload_root(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("UPLOAD_ROOT must not be empty")
        return v.strip()

    @field_validator("TOKEN_TTL_SECONDS")
    @classmethod
    def validate_token_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("TOKEN_TTL_SECONDS must be positive")
        return v

    @field_validator("MAX_CONTENT_BYTES")
    @classmethod
    def validate_max_content_bytes(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("MAX_CONTENT_BYTES must be positive")
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def parse_log_level(cls, v: Any) -> Any:
        """Strip whitespace and uppercase, so 'debug ' works from .env files."""
        if isinstance(v, str):
            v = v.strip().upper()
            if v not in logging.getLevelNamesMapping():
                raise ValueError(f"Unknown log level: {v}")
        return v

    @property
    def upload_root_path(self) -> Path:
        return Path(self.UPLOAD_ROOT)


@lru_cache
def get_settings() -> Settings:
    """Get the process settings (loaded once)."""
    return Settings()
