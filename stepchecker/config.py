"""
StepChecker — Checker settings.

Settings are a plain dict. They can be loaded from a JSON file whose path
is given directly or through the ``STEPCHECKER_SETTINGS`` environment
variable; anything missing falls back to :data:`DEFAULT_SETTINGS`.
"""

import json
import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

ENV_VAR = "STEPCHECKER_SETTINGS"

# ── Default settings ────────────────────────────────────────────────────
DEFAULT_SETTINGS = {
    "max_depth": 64,                # nested check_step calls before giving up
    "max_factor_value": 10 ** 12,   # largest number split into primes
    "numeric_tolerance": 0.0,       # 0 means exact rational comparison
    "log_level": "WARNING",
}


def _validate(settings: dict) -> dict:
    for key in ("max_depth", "max_factor_value"):
        value = settings[key]
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError(f"{key} must be a positive integer, got {value!r}")
    tolerance = settings["numeric_tolerance"]
    if isinstance(tolerance, bool) or not isinstance(tolerance, (int, float)):
        raise ValueError(f"numeric_tolerance must be a number, got {tolerance!r}")
    if tolerance < 0:
        raise ValueError("numeric_tolerance cannot be negative.")
    settings["numeric_tolerance"] = float(tolerance)
    level = settings["log_level"]
    if not isinstance(level, str) or not isinstance(
        logging.getLevelName(level.upper()), int
    ):
        raise ValueError(f"Unknown log_level {level!r}")
    settings["log_level"] = level.upper()
    return settings


def merge_settings(overrides: Optional[dict] = None) -> dict:
    """Return a validated copy of the defaults with *overrides* applied.

    Unknown keys are ignored.
    """
    settings = dict(DEFAULT_SETTINGS)
    for key, value in (overrides or {}).items():
        if key in DEFAULT_SETTINGS:
            settings[key] = value
        else:
            logger.debug("Ignoring unknown setting %r", key)
    return _validate(settings)


def load_settings(path: Optional[str] = None) -> dict:
    path = path or os.environ.get(ENV_VAR)
    if not path:
        return merge_settings()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Could not read settings from %s (%s); using defaults", path, e)
        return merge_settings()
    if not isinstance(data, dict):
        logger.warning("Settings file %s does not hold an object; using defaults", path)
        return merge_settings()
    return merge_settings(data)


def configure_logging(settings: dict) -> None:
    """Apply ``log_level`` to the ``stepchecker`` logger tree."""
    logging.getLogger("stepchecker").setLevel(settings["log_level"])
