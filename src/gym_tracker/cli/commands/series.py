"""Series commands: series, add-series, edit-series, delete-series, reset-series."""

from typing import Annotated, Optional

import typer

from ...core.config import SERIES_ICONS
from .. import views
from ..app import DataPathOption, YesOption, app, open_session, resolve_day, resolve_series


@app.command("series")
def show_series(
    series_ref: Annotated[str, typer.Argument(help="Series id (or unique prefix)")],
    data_path: DataPathOption = None,
) -> None:
    """
    Show a series with its exercises and round progress.
    """
    session = open_session(data_path)
    series_id = resolve_series(session.doc, series_ref)
    session.open_series(series_id)
    views.print_series(session.doc, session.doc.find_series(series_id))


@app.command("add-series")
def add_series(
    day_ref: Annotated[str, typer.Argument(help="Day id (or unique prefix)")],
    data_path: DataPathOption = None,
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Series name (default: 'Series N')"),
    ] = None,
    rounds: Annotated[
        Optional[int],
        typer.Option("--rounds", "-r", help="Rounds per exercise (default from settings)"),
    ] = None,
) -> None:
    """
    Add a new, empty series at the end of a day.
    """
    if rounds is not None and rounds < 1:
        views.print_error("rounds must be at least 1")
        raise typer.Exit(1)

    session = open_session(data_path)
    day_id = resolve_day(session.doc, day_ref)

    session.add_series(day_id)
    series_id = session.doc.find_day(day_id).series_ids[-1]

    partial: dict = {}
    if name:
        partial["name"] = name
    if rounds is not None:
        partial["rounds"] = rounds
    if partial:
        try:
            session.update_series(series_id, partial)
        except ValueError as e:
            views.print_error(str(e))
            raise typer.Exit(1)

    series = session.doc.find_series(series_id)
    views.print_success(f"Added {series.name} ({series.id[:8]}), {series.rounds} rounds")


@app.command("edit-series")
def edit_series(
    series_ref: Annotated[str, typer.Argument(help="Series id (or unique prefix)")],
    data_path: DataPathOption = None,
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="New series name"),
    ] = None,
    rounds: Annotated[
        Optional[int],
        typer.Option("--rounds", "-r", help="New number of rounds"),
    ] = None,
    icon: Annotated[
        Optional[str],
        typer.Option("--icon", "-i", help=f"Icon: {' | '.join(SERIES_ICONS)}"),
    ] = None,
) -> None:
    """
    Rename a series or change its rounds or icon.
    """
    session = open_session(data_path)
    series_id = resolve_series(session.doc, series_ref)

    partial = {
        k: v for k, v in (("name", name), ("rounds", rounds), ("icon", icon)) if v is not None
    }
    if not partial:
        views.print_warning("Nothing to change. Pass --name, --rounds and/or --icon.")
        raise typer.Exit(0)

    try:
        session.update_series(series_id, partial)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_series(session.doc, session.doc.find_series(series_id))


@app.command("delete-series")
def delete_series(
    series_ref: Annotated[str, typer.Argument(help="Series id (or unique prefix)")],
    data_path: DataPathOption = None,
    yes: YesOption = False,
) -> None:
    """
    Delete a series and all of its exercises.
    """
    session = open_session(data_path)
    series_id = resolve_series(session.doc, series_ref)
    series = session.doc.find_series(series_id)
    day = session.doc.day_for_series(series_id)
    if day is None:
        views.print_error(f"Series '{series.name}' does not belong to any day")
        raise typer.Exit(1)

    prompt = f"Delete '{series.name}' and all its exercises?"
    if not yes and not views.confirm_action(prompt):
        views.print_info("Cancelled.")
        return

    session.delete_series(series_id, day.id)
    views.print_success(f"Deleted {series.name}")


@app.command("reset-series")
def reset_series(
    series_ref: Annotated[str, typer.Argument(help="Series id (or unique prefix)")],
    data_path: DataPathOption = None,
) -> None:
    """
    Clear round progress and ratings so the series can be done again.
    """
    session = open_session(data_path)
    series_id = resolve_series(session.doc, series_ref)
    session.reset_series(series_id)
    views.print_series(session.doc, session.doc.find_series(series_id))
