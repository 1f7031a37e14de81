"""
YAML → ExerciseTemplate catalog.

The catalog is the shared, admin-curated list of exercise templates that
users clone into their series. Each template lives in its own YAML file in
the bundled ``src/gym_tracker/catalog/`` directory (e.g. push_up.yaml).

User overrides: place matching files in ``~/.gym-tracker/catalog/``. A user
file is deep-merged over the bundled template with the same file stem, so
only changed keys need to be listed. A user file without a bundled
counterpart adds a new template.

The catalog is read-only from the tracker's point of view: templates are
cloned, never edited through it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol

import yaml

from .config import APP_DIR_NAME
from .models import ExerciseTemplate

_REQUIRED_TEMPLATE_FIELDS: frozenset[str] = frozenset({"id", "name", "muscle_group"})


class CatalogError(Exception):
    """Raised when the exercise catalog cannot be read."""

    pass


class CatalogService(Protocol):
    """Read-only source of exercise templates."""

    def get_all(self) -> list[ExerciseTemplate]: ...


def template_from_dict(d: dict) -> ExerciseTemplate:
    """Convert a raw dict (from YAML) to an ExerciseTemplate.

    Raises ValueError if any required field is absent or a value is invalid.
    """
    missing = _REQUIRED_TEMPLATE_FIELDS - set(d)
    if missing:
        raise ValueError(f"ExerciseTemplate missing fields: {sorted(missing)}")

    return ExerciseTemplate(
        id=str(d["id"]),
        name=str(d["name"]),
        description=str(d.get("description", "")),
        muscle_group=str(d["muscle_group"]),
        equipment=tuple(str(x) for x in d.get("equipment") or ()),
        difficulty=str(d.get("difficulty", "beginner")),  # type: ignore[arg-type]
        instructions=tuple(str(x) for x in d.get("instructions") or ()),
        video_url=str(d.get("video_url", "")),
        image_url=str(d.get("image_url", "")),
        bilateral=bool(d.get("bilateral", True)),
        reps=int(d.get("reps", 0)),
        duration=int(d.get("duration", 0)),
        load=float(d.get("load", 0.0)),
    )


def _load_yaml_file(path: Path) -> dict:
    """
    Load a YAML mapping from ``path``.

    Raises:
        CatalogError: If the file cannot be read, parsed, or is not a mapping
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        raise CatalogError(f"Cannot read catalog file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise CatalogError(f"Catalog file {path} must contain a mapping")
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def get_bundled_catalog_dir() -> Path | None:
    """Return path to the bundled catalog/ data directory, or None if not found."""
    # catalog.py lives at src/gym_tracker/core/catalog.py
    candidate = Path(__file__).parent.parent / "catalog"
    return candidate if candidate.is_dir() else None


def get_user_catalog_dir() -> Path | None:
    """Return ~/.gym-tracker/catalog/ if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / APP_DIR_NAME / "catalog"
    return p if p.is_dir() else None


class YamlCatalog:
    """
    Catalog backed by per-template YAML files.

    Args:
        bundled_dir: Directory of shipped templates (default: package data)
        user_dir: Directory of user overrides (default: ~/.gym-tracker/catalog)
    """

    def __init__(self, bundled_dir: Path | None = None, user_dir: Path | None = None):
        self.bundled_dir = bundled_dir if bundled_dir is not None else get_bundled_catalog_dir()
        self.user_dir = user_dir if user_dir is not None else get_user_catalog_dir()

    def get_all(self) -> list[ExerciseTemplate]:
        """
        Load every template, user overrides merged over bundled files.

        Returns:
            Templates sorted by name

        Raises:
            CatalogError: If any file is unreadable or describes an invalid
                template
        """
        stems: dict[str, dict] = {}
        if self.bundled_dir is not None:
            for p in sorted(self.bundled_dir.glob("*.yaml")):
                stems[p.stem] = _load_yaml_file(p)

        if self.user_dir is not None:
            for p in sorted(self.user_dir.glob("*.yaml")):
                user_raw = _load_yaml_file(p)
                stems[p.stem] = _deep_merge(stems.get(p.stem, {}), user_raw)

        templates: list[ExerciseTemplate] = []
        for stem, raw in stems.items():
            try:
                templates.append(template_from_dict(raw))
            except (TypeError, ValueError) as exc:
                raise CatalogError(f"Invalid catalog template '{stem}': {exc}") from exc

        templates.sort(key=lambda t: t.name.lower())
        return templates


def find_template(templates: list[ExerciseTemplate], template_id: str) -> ExerciseTemplate | None:
    """Return the template with the given id, or None."""
    return next((t for t in templates if t.id == template_id), None)


def by_muscle_group(templates: list[ExerciseTemplate], muscle_group: str) -> list[ExerciseTemplate]:
    """Templates targeting the given muscle group (case-insensitive)."""
    wanted = muscle_group.strip().lower()
    return [t for t in templates if t.muscle_group.lower() == wanted]
