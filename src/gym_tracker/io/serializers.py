"""
JSON serialization for tracker data models.

Handles conversion between dataclasses and JSON-compatible dicts. The dict
form uses camelCase keys (``seriesIds``, ``completedReps``, ...) so that
documents written by earlier versions of the tracker load unchanged.
"""

import re
from datetime import datetime
from typing import Any

from ..core.models import Day, Exercise, Series, TrackerDocument


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> str:
    """
    Validate and normalize a day date to ISO format.

    Full ISO datetimes (``2026-02-18T09:30:00.000Z``) are accepted and
    truncated to their date part.

    Args:
        date_str: Date string to validate

    Returns:
        Normalized YYYY-MM-DD string

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str):
        raise ValidationError(f"Invalid date: {date_str!r}")

    date_part = date_str[:10]
    if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_part):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_part, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e

    return date_part


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def _require(data: dict[str, Any], key: str, kind: str) -> Any:
    if key not in data:
        raise ValidationError(f"{kind} record missing field: {key}")
    return data[key]


def _records(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    records = data.get(key, [])
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise ValidationError(f"Document field {key!r} must be a list of objects")
    return records


def _id_list(data: dict[str, Any], key: str) -> tuple[str, ...]:
    raw = data.get(key) or []
    if not isinstance(raw, list):
        raise ValidationError(f"{key} must be a list, got {type(raw).__name__}")
    return tuple(str(i) for i in raw)


def exercise_to_dict(exercise: Exercise) -> dict[str, Any]:
    """Convert Exercise to JSON-compatible dict."""
    data: dict[str, Any] = {
        "id": exercise.id,
        "name": exercise.name,
        "videoUrl": exercise.video_url,
        "bilateral": exercise.bilateral,
        "reps": exercise.reps,
        "duration": exercise.duration,
        "load": exercise.load,
        "completed": exercise.completed,
        "completedReps": exercise.completed_reps,
        "createdAt": exercise.created_at,
        "updatedAt": exercise.updated_at,
    }
    if exercise.rating is not None:
        data["rating"] = exercise.rating
    return data


def dict_to_exercise(data: dict[str, Any]) -> Exercise:
    """
    Convert dict to Exercise.

    Accepts the legacy ``isBilateral`` key and records without
    ``completedReps`` (treated as 0).

    Raises:
        ValidationError: If data is invalid
    """
    bilateral = data.get("bilateral", data.get("isBilateral", True))
    rating = data.get("rating")

    try:
        completed_reps = int(data.get("completedReps") or 0)
        validate_non_negative(completed_reps, "completedReps")
        return Exercise(
            id=str(_require(data, "id", "Exercise")),
            name=str(data.get("name", "")),
            video_url=str(data.get("videoUrl") or ""),
            bilateral=bool(bilateral),
            reps=int(data.get("reps") or 0),
            duration=int(data.get("duration") or 0),
            load=float(data.get("load", data.get("weight")) or 0.0),
            completed=bool(data.get("completed", False)),
            completed_reps=completed_reps,
            rating=int(rating) if rating is not None else None,
            created_at=str(data.get("createdAt") or ""),
            updated_at=str(data.get("updatedAt") or ""),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid exercise {data.get('id')!r}: {e}") from e


def series_to_dict(series: Series) -> dict[str, Any]:
    """Convert Series to JSON-compatible dict."""
    return {
        "id": series.id,
        "name": series.name,
        "rounds": series.rounds,
        "exerciseIds": list(series.exercise_ids),
        "icon": series.icon,
        "progress": series.progress,
        "createdAt": series.created_at,
        "updatedAt": series.updated_at,
    }


def dict_to_series(data: dict[str, Any]) -> Series:
    """
    Convert dict to Series.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        return Series(
            id=str(_require(data, "id", "Series")),
            name=str(data.get("name", "")),
            rounds=int(_require(data, "rounds", "Series")),
            exercise_ids=_id_list(data, "exerciseIds"),
            icon=str(data.get("icon") or "layers"),
            progress=float(data.get("progress") or 0.0),
            created_at=str(data.get("createdAt") or ""),
            updated_at=str(data.get("updatedAt") or ""),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid series {data.get('id')!r}: {e}") from e


def day_to_dict(day: Day) -> dict[str, Any]:
    """Convert Day to JSON-compatible dict."""
    return {
        "id": day.id,
        "name": day.name,
        "date": day.date,
        "seriesIds": list(day.series_ids),
    }


def dict_to_day(data: dict[str, Any]) -> Day:
    """
    Convert dict to Day.

    Raises:
        ValidationError: If data is invalid
    """
    day_date = validate_date(_require(data, "date", "Day"))
    try:
        return Day(
            id=str(_require(data, "id", "Day")),
            name=str(data.get("name", "")),
            date=day_date,
            series_ids=_id_list(data, "seriesIds"),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid day {data.get('id')!r}: {e}") from e


def document_to_dict(doc: TrackerDocument) -> dict[str, Any]:
    """Convert the whole tracker document to a JSON-compatible dict."""
    return {
        "days": [day_to_dict(d) for d in doc.days],
        "series": [series_to_dict(s) for s in doc.series],
        "exercises": [exercise_to_dict(e) for e in doc.exercises],
    }


def dict_to_document(data: dict[str, Any]) -> TrackerDocument:
    """
    Convert dict to TrackerDocument.

    Raises:
        ValidationError: If the structure or any record is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Document must be an object, got {type(data).__name__}")

    return TrackerDocument(
        days=tuple(dict_to_day(d) for d in _records(data, "days")),
        series=tuple(dict_to_series(s) for s in _records(data, "series")),
        exercises=tuple(dict_to_exercise(e) for e in _records(data, "exercises")),
    )
