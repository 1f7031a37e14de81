"""
Round-completion and series-progress engine.

Progress of a series is the fraction of exercise-rounds done:

    progress = sum(completed_reps) / (exercise_count * rounds)

with 0 for a series without exercises. The value is cached on the series
and recomputed by every operation that touches its exercises, so readers
never need the exercise list to know how far along a series is.
"""

import math
from dataclasses import replace

from .config import RATING_MAX, RATING_MIN
from .models import Series, TrackerDocument, timestamp


def series_progress(doc: TrackerDocument, series: Series) -> float:
    """
    Compute the completion fraction of a series from its exercises.

    Args:
        doc: Tracker document holding the exercises
        series: Series to measure

    Returns:
        Fraction of exercise-rounds completed; 0.0 for an empty series.
        May exceed 1.0 when exercises were completed past ``rounds``.
    """
    members = doc.exercises_in(series)
    if not members:
        return 0.0
    total_done = sum(e.completed_reps for e in members)
    return total_done / (len(members) * series.rounds)


def progress_percent(progress: float) -> int:
    """Display percentage for a progress fraction (truncated, not rounded)."""
    return math.floor(progress * 100)


def completed_rounds(doc: TrackerDocument, series: Series) -> int:
    """Rounds every exercise of the series has reached (0 for empty series)."""
    members = doc.exercises_in(series)
    if not members:
        return 0
    return min(e.completed_reps for e in members)


def is_series_complete(doc: TrackerDocument, series_id: str) -> bool:
    """
    True when the series has at least one exercise and all are completed.

    An empty series is never complete.
    """
    series = doc.find_series(series_id)
    if series is None:
        return False
    members = doc.exercises_in(series)
    return bool(members) and all(e.completed for e in members)


def first_unrated_exercise(doc: TrackerDocument, series_id: str) -> str | None:
    """Id of the first exercise of the series without a rating, if any."""
    series = doc.find_series(series_id)
    if series is None:
        return None
    return next((e.id for e in doc.exercises_in(series) if e.rating is None), None)


def recompute_series_progress(doc: TrackerDocument, series_id: str) -> TrackerDocument:
    """
    Refresh the cached ``progress`` of one series.

    Unknown series ids leave the document unchanged.
    """
    series = doc.find_series(series_id)
    if series is None:
        return doc
    progress = series_progress(doc, series)
    if progress == series.progress:
        return doc
    return doc.with_series(replace(series, progress=progress))


def record_round_completion(doc: TrackerDocument, exercise_id: str) -> TrackerDocument:
    """
    Record one executed round of an exercise.

    Increments ``completed_reps`` by exactly one, re-derives ``completed``
    against the owning series' ``rounds`` and refreshes the series progress.
    Overshooting past ``rounds`` keeps counting; ``completed`` stays True.

    Args:
        doc: Tracker document
        exercise_id: Exercise that just finished a round

    Returns:
        Updated document, or ``doc`` itself if the exercise is unknown or
        not referenced by any series.
    """
    exercise = doc.find_exercise(exercise_id)
    series = doc.series_for_exercise(exercise_id)
    if exercise is None or series is None:
        return doc

    done = exercise.completed_reps + 1
    updated = replace(
        exercise,
        completed_reps=done,
        completed=done >= series.rounds,
        updated_at=timestamp(),
    )
    return recompute_series_progress(doc.with_exercise(updated), series.id)


def rate_exercise(doc: TrackerDocument, exercise_id: str, rating: int) -> TrackerDocument:
    """
    Store a 1..5 rating on an exercise.

    Raises:
        ValueError: If rating is outside RATING_MIN..RATING_MAX
    """
    if not RATING_MIN <= rating <= RATING_MAX:
        raise ValueError(f"rating must be between {RATING_MIN} and {RATING_MAX}, got {rating}")
    exercise = doc.find_exercise(exercise_id)
    if exercise is None:
        return doc
    return doc.with_exercise(replace(exercise, rating=rating, updated_at=timestamp()))
