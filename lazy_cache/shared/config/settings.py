"""
Centralized settings

Single source of environment variables and their defaults.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from lazy_cache.shared.exceptions import ConfigurationError

_ROOT_MARKERS = ("pyproject.toml", ".git")


def _find_project_root(start: Path) -> Path | None:
    for current in (start, *start.parents):
        if any((current / marker).exists() for marker in _ROOT_MARKERS):
            return current
    return None


_project_root = _find_project_root(Path.cwd())
_dotenv_path = _project_root / ".env" if _project_root is not None else None
if _dotenv_path is not None:
    load_dotenv(_dotenv_path, override=False)


class Settings(BaseModel):
    """Application settings"""

    # Seconds a debounce window stays open; 0 flushes on the next loop tick
    debounce_delay: float = Field(
        default=0.0, ge=0.0, alias="LAZY_CACHE_DEBOUNCE_DELAY"
    )
    log_level: str = Field(default="WARNING", alias="LOG_LEVEL")

    model_config = {"populate_by_name": True}


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings."""
    try:
        return Settings.model_validate(dict(os.environ))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid lazy cache settings: {exc}") from exc


def reload_settings() -> Settings:
    """Re-read the environment."""
    get_settings.cache_clear()
    return get_settings()
