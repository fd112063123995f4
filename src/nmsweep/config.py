"""Persistent settings for nmsweep."""

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from nmsweep.models import MAX_DEPTH_LIMIT
from nmsweep.recursive_scanner import DEFAULT_MAX_DEPTH
from nmsweep.scanner import expand_path

log = logging.getLogger(__name__)

CONFIG_ENV_VAR = "NMSWEEP_CONFIG"
CONFIG_DIR = expand_path("~/.nmsweep")
CONFIG_FILE = CONFIG_DIR / "config.json"


class AgeCapError(ValueError):
    """The age cap is not a positive whole number of months."""


class Settings(BaseModel):
    """Settings read from the config file."""

    age_cap_months: int | None = Field(
        None, gt=0, description="Default age cap in months (asked for if unset)"
    )
    roots: list[str] = Field(default_factory=lambda: ["."], description="Directories to scan")
    max_depth: int = Field(
        DEFAULT_MAX_DEPTH, gt=0, le=MAX_DEPTH_LIMIT, description="Recursion limit per root"
    )


def config_path(path: str | Path | None = None) -> Path:
    """Resolve the config file location: explicit path, then env var, then default."""
    if path:
        return expand_path(str(path))
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return expand_path(env)
    return CONFIG_FILE


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from disk, falling back to defaults."""
    config_file = config_path(path)
    if not config_file.exists():
        return Settings()

    try:
        with open(config_file) as f:
            return Settings.model_validate(json.load(f))
    except (json.JSONDecodeError, OSError, ValidationError) as e:
        log.warning("Ignoring invalid config file %s: %s", config_file, e)
        return Settings()


def save_settings(settings: Settings, path: str | Path | None = None) -> bool:
    """Save settings to disk."""
    config_file = config_path(path)
    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config_file, "w") as f:
            json.dump(settings.model_dump(), f, indent=2)
        return True
    except OSError as e:
        log.warning("Could not write config file %s: %s", config_file, e)
        return False


def validate_age_cap(value: str | int) -> int:
    """
    Parse an age cap entered by the user.

    Args:
        value: Raw input, e.g. "6"

    Returns:
        The age cap in months

    Raises:
        AgeCapError: If value is not a positive integer
    """
    try:
        months = int(str(value).strip())
    except ValueError:
        raise AgeCapError(f"Age must be a whole number of months, got {value!r}") from None

    if months <= 0:
        raise AgeCapError(f"Age must be at least 1 month, got {months}")
    return months
