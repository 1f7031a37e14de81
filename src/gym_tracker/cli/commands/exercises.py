"""Exercise commands: add/edit/delete-exercise, complete, rate, catalog."""

from typing import Annotated, Optional

import typer

from ...core.catalog import by_muscle_group, find_template
from ...core.completion import TransitionState
from ...core.config import RATING_MAX, RATING_MIN
from ...core.session import TrackerSession
from .. import views
from ..app import DataPathOption, YesOption, app, open_session, resolve_exercise, resolve_series


def _exercise_fields(
    name: str | None,
    reps: int | None,
    duration: int | None,
    load: float | None,
    video_url: str | None,
    bilateral: bool | None,
) -> dict:
    pairs = (
        ("name", name),
        ("reps", reps),
        ("duration", duration),
        ("load", load),
        ("video_url", video_url),
        ("bilateral", bilateral),
    )
    return {k: v for k, v in pairs if v is not None}


def _finish_transition(session: TrackerSession, series_id: str, state: TransitionState) -> None:
    """Show the outcome of a round completion or rating, including the advance."""
    if state == "awaiting_rating":
        ex_id = session.transition.awaiting_rating(series_id)
        views.print_info(
            f"Exercise finished. Rate it with 'rate {ex_id} <{RATING_MIN}-{RATING_MAX}>' "
            "to continue."
        )
        return

    if state != "all_complete":
        return

    series = session.doc.find_series(series_id)
    views.print_celebration(series, session.settings.dwell_seconds)
    session.run_pending()

    if session.view == "series" and session.active_series_id is not None:
        next_series = session.doc.find_series(session.active_series_id)
        views.print_info(f"Next series: {next_series.name}")
        views.print_series(session.doc, next_series)
    else:
        day = session.doc.find_day(session.active_day_id) if session.active_day_id else None
        views.print_success("All series of the day are done.")
        if day is not None:
            views.print_day(session.doc, day)


@app.command("add-exercise")
def add_exercise(
    series_ref: Annotated[str, typer.Argument(help="Series id (or unique prefix)")],
    data_path: DataPathOption = None,
    from_catalog: Annotated[
        Optional[str],
        typer.Option("--from-catalog", "-c", help="Clone a catalog template by id"),
    ] = None,
    name: Annotated[Optional[str], typer.Option("--name", "-n", help="Exercise name")] = None,
    reps: Annotated[Optional[int], typer.Option("--reps", help="Target reps")] = None,
    duration: Annotated[
        Optional[int], typer.Option("--duration", help="Target duration in seconds")
    ] = None,
    load: Annotated[Optional[float], typer.Option("--load", help="Load in kg")] = None,
    video_url: Annotated[
        Optional[str], typer.Option("--video-url", help="Demo video URL")
    ] = None,
    bilateral: Annotated[
        Optional[bool],
        typer.Option("--bilateral/--unilateral", help="Both sides at once, or each side"),
    ] = None,
) -> None:
    """
    Add an exercise to a series, from scratch or cloned from the catalog.
    """
    session = open_session(data_path)
    series_id = resolve_series(session.doc, series_ref)
    before = len(session.doc.exercises)
    partial = _exercise_fields(name, reps, duration, load, video_url, bilateral)

    try:
        if from_catalog is not None:
            if not session.catalog:
                views.print_error("The exercise catalog is not available.")
                raise typer.Exit(1)
            if find_template(session.catalog, from_catalog) is None:
                views.print_error(f"No catalog template '{from_catalog}'")
                raise typer.Exit(1)
            session.add_exercise_from_catalog(series_id, from_catalog, partial)
        else:
            session.add_exercise(series_id, partial)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if len(session.doc.exercises) == before:
        views.print_error("Exercise was not added")
        raise typer.Exit(1)

    exercise_id = session.doc.find_series(series_id).exercise_ids[-1]
    exercise = session.doc.find_exercise(exercise_id)
    views.print_success(f"Added {exercise.name} ({exercise.id[:8]})")


@app.command("edit-exercise")
def edit_exercise(
    exercise_ref: Annotated[str, typer.Argument(help="Exercise id (or unique prefix)")],
    data_path: DataPathOption = None,
    name: Annotated[Optional[str], typer.Option("--name", "-n", help="Exercise name")] = None,
    reps: Annotated[Optional[int], typer.Option("--reps", help="Target reps")] = None,
    duration: Annotated[
        Optional[int], typer.Option("--duration", help="Target duration in seconds")
    ] = None,
    load: Annotated[Optional[float], typer.Option("--load", help="Load in kg")] = None,
    video_url: Annotated[
        Optional[str], typer.Option("--video-url", help="Demo video URL")
    ] = None,
    bilateral: Annotated[
        Optional[bool],
        typer.Option("--bilateral/--unilateral", help="Both sides at once, or each side"),
    ] = None,
) -> None:
    """
    Change the prescription of an exercise.
    """
    session = open_session(data_path)
    exercise_id = resolve_exercise(session.doc, exercise_ref)

    partial = _exercise_fields(name, reps, duration, load, video_url, bilateral)
    if not partial:
        views.print_warning("Nothing to change.")
        raise typer.Exit(0)

    try:
        session.update_exercise(exercise_id, partial)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Updated {session.doc.find_exercise(exercise_id).name}")


@app.command("delete-exercise")
def delete_exercise(
    exercise_ref: Annotated[str, typer.Argument(help="Exercise id (or unique prefix)")],
    data_path: DataPathOption = None,
    yes: YesOption = False,
) -> None:
    """
    Remove an exercise from its series.
    """
    session = open_session(data_path)
    exercise_id = resolve_exercise(session.doc, exercise_ref)
    exercise = session.doc.find_exercise(exercise_id)
    series = session.doc.series_for_exercise(exercise_id)
    if series is None:
        views.print_error(f"Exercise '{exercise.name}' does not belong to any series")
        raise typer.Exit(1)

    if not yes and not views.confirm_action(f"Delete '{exercise.name}'?"):
        views.print_info("Cancelled.")
        return

    session.delete_exercise(exercise_id, series.id)
    views.print_success(f"Deleted {exercise.name}")


@app.command("complete")
def complete(
    exercise_ref: Annotated[str, typer.Argument(help="Exercise id (or unique prefix)")],
    data_path: DataPathOption = None,
    rating: Annotated[
        Optional[int],
        typer.Option("--rating", help=f"Rate the exercise ({RATING_MIN}-{RATING_MAX}) if this finishes it"),
    ] = None,
) -> None:
    """
    Mark one round of an exercise as done.

    When the last round of the last exercise is done the series is
    celebrated and the next series of the day is opened.
    """
    if rating is not None and not RATING_MIN <= rating <= RATING_MAX:
        views.print_error(f"Rating must be between {RATING_MIN} and {RATING_MAX}")
        raise typer.Exit(1)

    session = open_session(data_path)
    exercise_id = resolve_exercise(session.doc, exercise_ref)
    series = session.doc.series_for_exercise(exercise_id)
    if series is None:
        views.print_error("Exercise does not belong to any series")
        raise typer.Exit(1)

    session.open_series(series.id)
    state = session.complete_round(exercise_id)
    exercise = session.doc.find_exercise(exercise_id)

    views.print_success(f"{exercise.name}: round {exercise.completed_reps}/{series.rounds}")
    views.print_series(session.doc, session.doc.find_series(series.id))

    if rating is not None and exercise.completed:
        rated = session.rate_exercise(exercise_id, rating)
        views.print_success(f"Rated {exercise.name}: {rating}/{RATING_MAX}")
        if state == "awaiting_rating":
            state = rated

    _finish_transition(session, series.id, state)


@app.command("rate")
def rate(
    exercise_ref: Annotated[str, typer.Argument(help="Exercise id (or unique prefix)")],
    rating: Annotated[int, typer.Argument(help=f"Rating {RATING_MIN}-{RATING_MAX}")],
    data_path: DataPathOption = None,
) -> None:
    """
    Rate how an exercise went.
    """
    session = open_session(data_path)
    exercise_id = resolve_exercise(session.doc, exercise_ref)
    series = session.doc.series_for_exercise(exercise_id)

    if series is not None:
        session.open_series(series.id)
        exercise = session.doc.find_exercise(exercise_id)
        if session.settings.require_rating and exercise.completed and exercise.rating is None:
            session.transition.hold_for_rating(series.id, exercise_id)

    try:
        state = session.rate_exercise(exercise_id, rating)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Rated {session.doc.find_exercise(exercise_id).name}: {rating}/{RATING_MAX}")
    if series is not None and state is not None:
        _finish_transition(session, series.id, state)


@app.command("catalog")
def catalog(
    data_path: DataPathOption = None,
    muscle_group: Annotated[
        Optional[str],
        typer.Option("--muscle-group", "-m", help="Only show this muscle group"),
    ] = None,
) -> None:
    """
    List exercise templates available for --from-catalog.
    """
    session = open_session(data_path, require_data=False)
    templates = session.catalog
    if muscle_group:
        templates = by_muscle_group(templates, muscle_group)
    views.print_catalog(templates)
