"""Configuration management for git-pet."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated
import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _default_state_path() -> Path:
    return Path.home() / ".config" / "git-pet" / "state.json"


class GitPetSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    state_path: Path = Field(default_factory=_default_state_path, validation_alias="GIT_PET_STATE_PATH")
    git_path: str | None = Field(default=None, validation_alias="GIT_PET_GIT_PATH")
    git_timeout: float = Field(default=10.0, validation_alias="GIT_PET_GIT_TIMEOUT")
    catalog_paths: Annotated[tuple[Path, ...], NoDecode] = Field(
        default=(), validation_alias="GIT_PET_CATALOG_PATHS"
    )
    log_level: str = Field(default="WARNING", validation_alias="GIT_PET_LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "GIT_PET_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("catalog_paths", mode="before")
    @classmethod
    def _parse_catalog_paths(cls, value):
        if value is None or value == "":
            return ()
        if isinstance(value, (list, tuple)):
            return tuple(Path(str(item)) for item in value)
        if isinstance(value, str):
            parts = [part.strip() for part in value.split(os.pathsep) if part.strip()]
            return tuple(Path(part) for part in parts)
        raise TypeError("GIT_PET_CATALOG_PATHS must be a list of paths or a path-separated string")

    @field_validator("git_timeout")
    @classmethod
    def _validate_git_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("GIT_PET_GIT_TIMEOUT must be > 0")
        return value


@lru_cache(maxsize=1)
def get_settings() -> GitPetSettings:
    """Return cached settings instance."""

    settings = GitPetSettings()
    settings.state_path = settings.state_path.expanduser().resolve()
    settings.catalog_paths = tuple(path.expanduser().resolve() for path in settings.catalog_paths)
    return settings


__all__ = ["GitPetSettings", "get_settings"]
