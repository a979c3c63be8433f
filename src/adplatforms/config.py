"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (ADPLATFORMS__CACHE__TTL_SECONDS=60)
  2. adplatforms.yaml       (searched in cwd, then the user config dir)
  3. Hardcoded defaults

The config file is optional; every field has a default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_CONFIG_DIR = platformdirs.user_config_dir("adplatforms")
_CONFIG_FILE_NAME = "adplatforms.yaml"


def _find_config_file() -> str | None:
    """Return the path of the first adplatforms.yaml found, or None."""
    candidates = [
        Path(_CONFIG_FILE_NAME),
        Path(_DEFAULT_CONFIG_DIR) / _CONFIG_FILE_NAME,
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class CacheSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ttl_seconds: float = Field(default=300.0, gt=0)
    soft_capacity: int = Field(default=1000, gt=0)
    eviction_batch: int = Field(default=100, gt=0)

    @model_validator(mode="after")
    def check_batch_fits(self) -> CacheSettings:
        if self.eviction_batch > self.soft_capacity:
            raise ValueError("eviction_batch must not exceed soft_capacity")
        return self


class IngestSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    max_file_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    allowed_extensions: list[str] = [".txt"]
    encoding: str = "utf-8"
    # "replace" turns undecodable bytes into U+FFFD so only the affected line is
    # rejected; "strict" fails the whole file with FILE_READ_FAILED
    decode_errors: Literal["replace", "strict"] = "replace"


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: ADPLATFORMS__CACHE__SOFT_CAPACITY=500
        env_prefix="ADPLATFORMS__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    cache: CacheSettings = CacheSettings()
    ingest: IngestSettings = IngestSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
