"""Configuration management for chrisvfs.

Loads environment variables (and a ``.env`` file if present).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from chrisvfs.fetcher import DEFAULT_PAGE_LIMIT

# Load environment variables from .env file
load_dotenv()

DEFAULT_CONTEXT_PATH = Path.home() / ".chrisvfs" / "context.json"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    """Settings read from the environment."""

    url: str | None
    username: str | None
    password: str | None
    token: str | None
    page_limit: int
    timeout: float
    context_path: Path


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        parsed = int(value)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e
    if parsed <= 0:
        raise ValueError(f"{name} must be positive, got {parsed}")
    return parsed


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e


def get_config() -> Settings:
    """Load configuration from environment variables.

    Raises ValueError if a numeric variable doesn't parse.
    """
    context_path = os.getenv("CHRISVFS_CONTEXT")
    return Settings(
        url=os.getenv("CHRIS_URL") or None,
        username=os.getenv("CHRIS_USERNAME") or None,
        password=os.getenv("CHRIS_PASSWORD") or None,
        token=os.getenv("CHRIS_TOKEN") or None,
        page_limit=_int_env("CHRIS_PAGE_LIMIT", DEFAULT_PAGE_LIMIT),
        timeout=_float_env("CHRIS_TIMEOUT", DEFAULT_TIMEOUT),
        context_path=Path(context_path).expanduser() if context_path else DEFAULT_CONTEXT_PATH,
    )
