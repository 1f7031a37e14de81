"""
YAML → Settings loader.

Reads ``settings.yaml`` from the tracker's data directory and merges it over
the defaults in config.py:

    default_rounds: 4
    dwell_seconds: 2.0
    require_rating: true

If the file is missing every value comes from config.py. If it exists but
cannot be parsed or holds invalid values, a warning is emitted and the
defaults are used.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .config import COMPLETION_DWELL_SECONDS, DEFAULT_ROUNDS, SETTINGS_FILE_NAME


@dataclass(frozen=True)
class Settings:
    """User-tunable behaviour of the tracker."""

    default_rounds: int = DEFAULT_ROUNDS
    dwell_seconds: float = COMPLETION_DWELL_SECONDS
    require_rating: bool = False

    def __post_init__(self) -> None:
        if self.default_rounds < 1:
            raise ValueError("default_rounds must be at least 1")
        if self.dwell_seconds < 0:
            raise ValueError("dwell_seconds must be non-negative")


def _check_type(key: str, raw: Any, kinds: tuple[type, ...]) -> Any:
    # bool is an int subclass; YAML true/false must not pass as numbers
    if isinstance(raw, bool) and bool not in kinds:
        raise ValueError(f"{key} must be a number, got {raw!r}")
    if not isinstance(raw, kinds):
        expected = " or ".join(k.__name__ for k in kinds)
        raise ValueError(f"{key} must be {expected}, got {raw!r}")
    return raw


def settings_from_dict(d: dict[str, Any]) -> Settings:
    """
    Build Settings from a raw dict, ignoring unknown keys.

    Values are not coerced: ``require_rating: "no"`` or
    ``default_rounds: 2.7`` are rejected rather than reinterpreted.

    Raises:
        ValueError: If a value has the wrong type or is out of range
    """
    known = {f.name for f in fields(Settings)}
    values: dict[str, Any] = {}
    for key, raw in d.items():
        if key not in known:
            continue
        if key == "default_rounds":
            values[key] = _check_type(key, raw, (int,))
        elif key == "dwell_seconds":
            values[key] = float(_check_type(key, raw, (int, float)))
        elif key == "require_rating":
            values[key] = _check_type(key, raw, (bool,))
    return Settings(**values)


def load_settings(data_dir: Path) -> Settings:
    """
    Load settings.yaml from ``data_dir``.

    Args:
        data_dir: Directory holding the tracker data file

    Returns:
        Settings with user overrides applied
    """
    path = Path(data_dir) / SETTINGS_FILE_NAME
    if not path.exists():
        return Settings()

    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"gym-tracker: ignoring unreadable {path} ({exc})", stacklevel=2)
        return Settings()

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        warnings.warn(f"gym-tracker: ignoring {path}, expected a mapping", stacklevel=2)
        return Settings()

    try:
        return settings_from_dict(data)
    except (TypeError, ValueError) as exc:
        warnings.warn(f"gym-tracker: ignoring invalid {path} ({exc})", stacklevel=2)
        return Settings()
