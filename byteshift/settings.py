from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from byteshift.transform import CHUNK_SIZE

ENV_PREFIX = "BYTESHIFT_"


@dataclass(frozen=True)
class Settings:
    log_level: int = logging.INFO
    log_file: Optional[Path] = None
    chunk_size: int = CHUNK_SIZE


def env_get(key: str, default: str | None = None) -> str | None:
    """Get a BYTESHIFT_* environment variable or return default."""
    value = os.getenv(ENV_PREFIX + key)
    return default if value is None or value.strip() == "" else value.strip()


def _parse_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name!r}")
    return level


def _parse_chunk_size(text: str) -> int:
    try:
        size = int(text)
    except ValueError:
        raise ValueError(f"Chunk size must be an integer, got {text!r}") from None
    if size <= 0:
        raise ValueError(f"Chunk size must be positive, got {size}")
    return size


def load_settings(dotenv: bool = True) -> Settings:
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))  # take environment variables from .env

    log_file = env_get("LOG_FILE")
    return Settings(
        log_level=_parse_level(env_get("LOG_LEVEL", "INFO")),
        log_file=Path(log_file) if log_file else None,
        chunk_size=_parse_chunk_size(env_get("CHUNK_SIZE", str(CHUNK_SIZE))),
    )
