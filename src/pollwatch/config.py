"""Configuration management for pollwatch."""

import logging
from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .watcher.entities import DEFAULT_INTERVAL_MS

LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class Settings(BaseSettings):
    """Watcher settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="POLLWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    root: Path = Field(
        default_factory=Path.cwd,
        description="Directory to watch",
    )
    interval_ms: int = Field(
        default=DEFAULT_INTERVAL_MS,
        description="Polling interval in milliseconds (non-positive means default)",
    )
    skip_dirs: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: [".git"],
        description="Directory names to skip anywhere in the tree (comma-separated)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    @field_validator("skip_dirs", mode="before")
    @classmethod
    def parse_skip_dirs(cls, v: str | list[str]) -> list[str]:
        """Split comma-separated directory names, dropping blanks and duplicates."""
        names = v.split(",") if isinstance(v, str) else v
        return list(dict.fromkeys(name.strip() for name in names if name.strip()))

    @field_validator("root", mode="before")
    @classmethod
    def validate_root(cls, v: str | Path) -> Path:
        """Convert string to Path and validate it is an existing directory."""
        path = Path(v).expanduser() if isinstance(v, str) else v
        if not path.exists():
            raise ValueError(f"Watched path does not exist: {path}")
        if not path.is_dir():
            raise ValueError(f"Watched path is not a directory: {path}")
        return path.resolve()

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize the level name and reject unknown ones."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {sorted(LOG_LEVELS)}")
        return level


def setup_logging(level: str) -> None:
    """Configure root logging for a process embedding the watcher.

    Args:
        level: Level name as validated by Settings.log_level
    """
    logging.basicConfig(
        level=logging.getLevelName(level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
