"""
Data models for the workout tracker.

The tracker document is a three-level owned hierarchy: days reference
series by id, series reference exercises by id. All models are frozen so
the reducers in hierarchy.py and progress.py can only produce new values.
"""

import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Literal

from .config import (
    DEFAULT_ICON,
    DEFAULT_ROUNDS,
    DIFFICULTIES,
    RATING_MAX,
    RATING_MIN,
    SERIES_ICONS,
)

Difficulty = Literal["beginner", "intermediate", "advanced"]


def _validate_date(date_str: str) -> None:
    """Validate date string is ISO format YYYY-MM-DD."""
    if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValueError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_str}") from e


@dataclass(frozen=True)
class Exercise:
    """
    A single movement instance inside one series.

    ``completed_reps`` counts the rounds of the owning series this exercise
    has been executed; ``completed`` mirrors ``completed_reps >= rounds``.
    """

    id: str
    name: str
    video_url: str = ""
    bilateral: bool = True
    reps: int = 0
    duration: int = 0  # seconds; 0 when the exercise is rep-based
    load: float = 0.0  # kg
    completed: bool = False
    completed_reps: int = 0
    rating: int | None = None  # 1..5, set after finishing the exercise
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self) -> None:
        """Validate exercise data."""
        if not self.id:
            raise ValueError("Exercise id must be non-empty")
        if self.reps < 0:
            raise ValueError("reps must be non-negative")
        if self.duration < 0:
            raise ValueError("duration must be non-negative")
        if self.load < 0:
            raise ValueError("load must be non-negative")
        if self.completed_reps < 0:
            raise ValueError("completed_reps must be non-negative")
        if self.rating is not None and not RATING_MIN <= self.rating <= RATING_MAX:
            raise ValueError(
                f"rating must be between {RATING_MIN} and {RATING_MAX}, got {self.rating}"
            )


@dataclass(frozen=True)
class Series:
    """
    A group of exercises performed together for ``rounds`` rounds.

    ``progress`` is a cached value maintained by the progress engine; it is
    never the source of truth for completion.
    """

    id: str
    name: str
    rounds: int = DEFAULT_ROUNDS
    exercise_ids: tuple[str, ...] = ()
    icon: str = DEFAULT_ICON
    progress: float = 0.0
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self) -> None:
        """Validate series data."""
        if not self.id:
            raise ValueError("Series id must be non-empty")
        if self.rounds < 1:
            raise ValueError("rounds must be at least 1")
        if self.progress < 0:
            raise ValueError("progress must be non-negative")
        if self.icon not in SERIES_ICONS:
            valid = ", ".join(SERIES_ICONS)
            raise ValueError(f"Invalid icon: {self.icon!r}. Valid icons: {valid}")


@dataclass(frozen=True)
class Day:
    """A named, dated workout session holding an ordered list of series."""

    id: str
    name: str
    date: str  # ISO format: YYYY-MM-DD
    series_ids: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate day data."""
        if not self.id:
            raise ValueError("Day id must be non-empty")
        _validate_date(self.date)


@dataclass(frozen=True)
class ExerciseTemplate:
    """
    Admin-curated catalog entry.

    Templates are cloned into series as independent exercises; the clone
    never points back at the template.
    """

    id: str
    name: str
    description: str = ""
    muscle_group: str = ""
    equipment: tuple[str, ...] = ()
    difficulty: Difficulty = "beginner"
    instructions: tuple[str, ...] = ()
    video_url: str = ""
    image_url: str = ""
    bilateral: bool = True
    reps: int = 0
    duration: int = 0
    load: float = 0.0

    def __post_init__(self) -> None:
        """Validate template data."""
        if not self.id:
            raise ValueError("Template id must be non-empty")
        if self.difficulty not in DIFFICULTIES:
            raise ValueError(f"Invalid difficulty: {self.difficulty}")
        if self.reps < 0 or self.duration < 0 or self.load < 0:
            raise ValueError("reps, duration and load must be non-negative")


@dataclass(frozen=True)
class TrackerDocument:
    """
    The whole persisted tracker state.

    Entity order within each tuple is insertion order; the order that
    matters for navigation is ``Day.series_ids``.
    """

    days: tuple[Day, ...] = field(default_factory=tuple)
    series: tuple[Series, ...] = field(default_factory=tuple)
    exercises: tuple[Exercise, ...] = field(default_factory=tuple)

    def find_day(self, day_id: str) -> Day | None:
        """Return the day with the given id, or None."""
        return next((d for d in self.days if d.id == day_id), None)

    def find_series(self, series_id: str) -> Series | None:
        """Return the series with the given id, or None."""
        return next((s for s in self.series if s.id == series_id), None)

    def find_exercise(self, exercise_id: str) -> Exercise | None:
        """Return the exercise with the given id, or None."""
        return next((e for e in self.exercises if e.id == exercise_id), None)

    def series_for_exercise(self, exercise_id: str) -> Series | None:
        """Return the series whose exercise_ids references the exercise."""
        return next((s for s in self.series if exercise_id in s.exercise_ids), None)

    def day_for_series(self, series_id: str) -> Day | None:
        """Return the day whose series_ids references the series."""
        return next((d for d in self.days if series_id in d.series_ids), None)

    def exercises_in(self, series: Series) -> list[Exercise]:
        """Exercises of a series, in the series' declared order."""
        by_id = {e.id: e for e in self.exercises}
        return [by_id[eid] for eid in series.exercise_ids if eid in by_id]

    def series_in(self, day: Day) -> list[Series]:
        """Series of a day, in the day's declared order."""
        by_id = {s.id: s for s in self.series}
        return [by_id[sid] for sid in day.series_ids if sid in by_id]

    def with_day(self, day: Day) -> "TrackerDocument":
        """Return a copy with the same-id day swapped for ``day``."""
        return replace(self, days=tuple(day if d.id == day.id else d for d in self.days))

    def with_series(self, series: Series) -> "TrackerDocument":
        """Return a copy with the same-id series swapped for ``series``."""
        return replace(
            self, series=tuple(series if s.id == series.id else s for s in self.series)
        )

    def with_exercise(self, exercise: Exercise) -> "TrackerDocument":
        """Return a copy with the same-id exercise swapped for ``exercise``."""
        return replace(
            self,
            exercises=tuple(exercise if e.id == exercise.id else e for e in self.exercises),
        )


def timestamp() -> str:
    """Current local time as an ISO string, used for created_at/updated_at."""
    return datetime.now().isoformat(timespec="seconds")
