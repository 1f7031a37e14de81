"""
Structural reducers over the tracker document.

Every function takes a TrackerDocument and returns a new one; the input is
never modified. An id that is not present in the document makes the call a
no-op (the same document is returned), since the caller only ever passes
ids it is currently displaying.

Ownership is strict: a day owns the series listed in ``series_ids`` and a
series owns the exercises listed in ``exercise_ids``. Deletes cascade down
that hierarchy so nothing is left unreachable.
"""

import uuid
from collections.abc import Callable, Mapping
from dataclasses import fields, replace
from datetime import date
from typing import Any

from .config import DEFAULT_DAY_NAME, DEFAULT_EXERCISE_NAME, DEFAULT_ROUNDS, DEFAULT_SERIES_NAME
from .models import Day, Exercise, ExerciseTemplate, Series, TrackerDocument, timestamp
from .progress import recompute_series_progress

IdFactory = Callable[[], str]

# Derived fields are maintained by the engine and cannot be set directly.
_DERIVED_FIELDS: frozenset[str] = frozenset({"id", "progress", "completed", "created_at"})


def new_id() -> str:
    """Generate a globally unique entity id."""
    return str(uuid.uuid4())


def _merge(entity: Any, partial: Mapping[str, Any], ordered_field: str | None = None) -> Any:
    """
    Merge ``partial`` into a frozen entity.

    ``ordered_field`` names the child-id tuple of the entity; it may only be
    reordered here, adding or removing children goes through add_*/delete_*.

    Raises:
        ValueError: On unknown or derived fields, or a non-permutation of
            the child-id tuple
    """
    known = {f.name for f in fields(entity)}
    unknown = set(partial) - known
    if unknown:
        raise ValueError(f"Unknown field(s) for {type(entity).__name__}: {sorted(unknown)}")
    derived = set(partial) & _DERIVED_FIELDS
    if derived:
        raise ValueError(f"Field(s) cannot be set directly: {sorted(derived)}")

    changes = dict(partial)
    if ordered_field is not None and ordered_field in changes:
        new_order = tuple(changes[ordered_field])
        current = getattr(entity, ordered_field)
        if sorted(new_order) != sorted(current):
            raise ValueError(
                f"{ordered_field} can only be reordered; use add/delete to change members"
            )
        changes[ordered_field] = new_order

    if "updated_at" in known:
        changes["updated_at"] = timestamp()
    return replace(entity, **changes)


# =============================================================================
# CREATE
# =============================================================================


def add_day(
    doc: TrackerDocument,
    *,
    id_factory: IdFactory = new_id,
    day_date: str | None = None,
) -> TrackerDocument:
    """
    Append a new, empty day.

    Args:
        doc: Tracker document
        id_factory: Source of the new day id
        day_date: ISO date (default: today)

    Returns:
        Document with the day appended, named after its position
    """
    day = Day(
        id=id_factory(),
        name=DEFAULT_DAY_NAME.format(n=len(doc.days) + 1),
        date=day_date or date.today().isoformat(),
    )
    return replace(doc, days=doc.days + (day,))


def add_series(
    doc: TrackerDocument,
    day_id: str,
    *,
    rounds: int = DEFAULT_ROUNDS,
    id_factory: IdFactory = new_id,
) -> TrackerDocument:
    """
    Append a new empty series to a day.

    No-op if the day does not exist.
    """
    day = doc.find_day(day_id)
    if day is None:
        return doc

    now = timestamp()
    series = Series(
        id=id_factory(),
        name=DEFAULT_SERIES_NAME.format(n=len(day.series_ids) + 1),
        rounds=rounds,
        created_at=now,
        updated_at=now,
    )
    doc = replace(doc, series=doc.series + (series,))
    return doc.with_day(replace(day, series_ids=day.series_ids + (series.id,)))


def clone_template(template: ExerciseTemplate, exercise_id: str) -> Exercise:
    """
    Copy a catalog template into a fresh exercise.

    The clone gets its own id and zeroed completion state; the template is
    not referenced afterwards.
    """
    now = timestamp()
    return Exercise(
        id=exercise_id,
        name=template.name,
        video_url=template.video_url,
        bilateral=template.bilateral,
        reps=template.reps,
        duration=template.duration,
        load=template.load,
        completed=False,
        completed_reps=0,
        rating=None,
        created_at=now,
        updated_at=now,
    )


def add_exercise(
    doc: TrackerDocument,
    series_id: str,
    template: ExerciseTemplate | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
    id_factory: IdFactory = new_id,
) -> TrackerDocument:
    """
    Append an exercise to a series, from scratch or cloned from a template.

    No-op if the series does not exist. The series progress is refreshed,
    since a new zero-round exercise lowers it.

    Args:
        doc: Tracker document
        series_id: Series to append to
        template: Catalog template to clone (default: blank exercise)
        overrides: Fields set on the new exercise, same rules as
            update_exercise
        id_factory: Source of the new exercise id

    Raises:
        ValueError: If ``overrides`` is invalid; ``doc`` is left as it was
    """
    series = doc.find_series(series_id)
    if series is None:
        return doc

    if template is not None:
        exercise = clone_template(template, id_factory())
    else:
        now = timestamp()
        exercise = Exercise(
            id=id_factory(),
            name=DEFAULT_EXERCISE_NAME.format(n=len(doc.exercises) + 1),
            created_at=now,
            updated_at=now,
        )
    if overrides:
        exercise = _merge(exercise, overrides)
        exercise = replace(exercise, completed=exercise.completed_reps >= series.rounds)

    doc = replace(doc, exercises=doc.exercises + (exercise,))
    doc = doc.with_series(replace(series, exercise_ids=series.exercise_ids + (exercise.id,)))
    return recompute_series_progress(doc, series_id)


# =============================================================================
# UPDATE
# =============================================================================


def update_day(doc: TrackerDocument, day_id: str, partial: Mapping[str, Any]) -> TrackerDocument:
    """Merge partial fields into a day (``series_ids`` may only be reordered)."""
    day = doc.find_day(day_id)
    if day is None:
        return doc
    return doc.with_day(_merge(day, partial, ordered_field="series_ids"))


def update_series(
    doc: TrackerDocument, series_id: str, partial: Mapping[str, Any]
) -> TrackerDocument:
    """
    Merge partial fields into a series.

    Changing ``rounds`` re-derives ``completed`` on every member exercise
    so the completion rule keeps holding, then refreshes progress.
    """
    series = doc.find_series(series_id)
    if series is None:
        return doc

    updated = _merge(series, partial, ordered_field="exercise_ids")
    doc = doc.with_series(updated)

    if updated.rounds != series.rounds:
        for exercise in doc.exercises_in(updated):
            done = exercise.completed_reps >= updated.rounds
            if done != exercise.completed:
                doc = doc.with_exercise(replace(exercise, completed=done))

    return recompute_series_progress(doc, series_id)


def update_exercise(
    doc: TrackerDocument, exercise_id: str, partial: Mapping[str, Any]
) -> TrackerDocument:
    """
    Merge partial fields into an exercise.

    Setting ``completed_reps`` re-derives ``completed`` from the owning
    series' ``rounds`` and refreshes that series' progress.
    """
    exercise = doc.find_exercise(exercise_id)
    if exercise is None:
        return doc

    updated = _merge(exercise, partial)
    series = doc.series_for_exercise(exercise_id)
    if series is not None and "completed_reps" in partial:
        updated = replace(updated, completed=updated.completed_reps >= series.rounds)

    doc = doc.with_exercise(updated)
    if series is not None:
        doc = recompute_series_progress(doc, series.id)
    return doc


def reset_series(doc: TrackerDocument, series_id: str) -> TrackerDocument:
    """Clear completion state and ratings of every exercise in a series."""
    series = doc.find_series(series_id)
    if series is None:
        return doc

    now = timestamp()
    for exercise in doc.exercises_in(series):
        doc = doc.with_exercise(
            replace(exercise, completed=False, completed_reps=0, rating=None, updated_at=now)
        )
    return recompute_series_progress(doc, series_id)


# =============================================================================
# DELETE
# =============================================================================


def delete_exercise(doc: TrackerDocument, exercise_id: str, series_id: str) -> TrackerDocument:
    """
    Remove an exercise and its reference from the owning series.

    No-op unless ``series_id`` exists and actually lists the exercise.
    """
    series = doc.find_series(series_id)
    if series is None or exercise_id not in series.exercise_ids:
        return doc

    doc = replace(doc, exercises=tuple(e for e in doc.exercises if e.id != exercise_id))
    doc = doc.with_series(
        replace(series, exercise_ids=tuple(i for i in series.exercise_ids if i != exercise_id))
    )
    return recompute_series_progress(doc, series_id)


def delete_series(doc: TrackerDocument, series_id: str, day_id: str) -> TrackerDocument:
    """
    Remove a series, its reference from the day, and all of its exercises.

    No-op unless ``day_id`` exists and actually lists the series.
    """
    day = doc.find_day(day_id)
    if day is None or series_id not in day.series_ids:
        return doc

    series = doc.find_series(series_id)
    doomed_exercises = set(series.exercise_ids) if series is not None else set()

    return replace(
        doc,
        days=tuple(
            replace(d, series_ids=tuple(i for i in d.series_ids if i != series_id))
            if d.id == day_id
            else d
            for d in doc.days
        ),
        series=tuple(s for s in doc.series if s.id != series_id),
        exercises=tuple(e for e in doc.exercises if e.id not in doomed_exercises),
    )


def descendants(doc: TrackerDocument, day_id: str) -> tuple[set[str], set[str]]:
    """
    Collect every series and exercise id reachable from a day.

    Returns:
        (series ids, exercise ids); both empty for an unknown day
    """
    day = doc.find_day(day_id)
    if day is None:
        return set(), set()

    series_ids = set(day.series_ids)
    exercise_ids: set[str] = set()
    for series in doc.series:
        if series.id in series_ids:
            exercise_ids.update(series.exercise_ids)
    return series_ids, exercise_ids


def delete_day(doc: TrackerDocument, day_id: str) -> TrackerDocument:
    """
    Remove a day with all of its series and their exercises.

    The set of descendants is computed before anything is removed.
    """
    if doc.find_day(day_id) is None:
        return doc

    series_ids, exercise_ids = descendants(doc, day_id)
    return replace(
        doc,
        days=tuple(d for d in doc.days if d.id != day_id),
        series=tuple(s for s in doc.series if s.id not in series_ids),
        exercises=tuple(e for e in doc.exercises if e.id not in exercise_ids),
    )


def sweep_orphans(doc: TrackerDocument) -> TrackerDocument:
    """
    Restore referential integrity of a document.

    Drops series that no day references and exercises that no surviving
    series references, and prunes ids that point at missing entities.
    Used on documents written by older versions of the tracker.
    """
    referenced_series = {sid for d in doc.days for sid in d.series_ids}
    series = tuple(s for s in doc.series if s.id in referenced_series)
    referenced_exercises = {eid for s in series for eid in s.exercise_ids}
    exercises = tuple(e for e in doc.exercises if e.id in referenced_exercises)

    series_present = {s.id for s in series}
    exercises_present = {e.id for e in exercises}
    days = tuple(
        replace(d, series_ids=tuple(i for i in d.series_ids if i in series_present))
        for d in doc.days
    )
    series = tuple(
        replace(s, exercise_ids=tuple(i for i in s.exercise_ids if i in exercises_present))
        for s in series
    )

    swept = TrackerDocument(days=days, series=series, exercises=exercises)
    if swept == doc:
        return doc
    for s in swept.series:
        swept = recompute_series_progress(swept, s.id)
    return swept
