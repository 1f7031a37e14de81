"""Day commands: init, days, day, add-day, edit-day, delete-day."""

from typing import Annotated, Optional

import typer

from ...core.initial_data import initial_document
from ...core.models import TrackerDocument
from .. import views
from ..app import DataPathOption, YesOption, app, get_store, open_session, resolve_day


@app.command()
def init(
    data_path: DataPathOption = None,
    empty: Annotated[
        bool,
        typer.Option("--empty", help="Start without the sample upper-body day"),
    ] = False,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing data file"),
    ] = False,
) -> None:
    """
    Create the tracker data file.
    """
    store = get_store(data_path)
    if store.exists() and not force:
        views.print_error(f"Data file already exists: {store.data_path}")
        views.print_info("Use --force to start over.")
        raise typer.Exit(1)

    doc = TrackerDocument() if empty else initial_document()
    store.save(doc)
    views.print_success(f"Created {store.data_path}")
    views.print_days(doc)


@app.command("days")
def list_days(data_path: DataPathOption = None) -> None:
    """
    List all workout days.
    """
    session = open_session(data_path)
    views.print_days(session.doc)


@app.command("day")
def show_day(
    day_ref: Annotated[str, typer.Argument(help="Day id (or unique prefix)")],
    data_path: DataPathOption = None,
) -> None:
    """
    Show the series of a day with their progress.
    """
    session = open_session(data_path)
    day_id = resolve_day(session.doc, day_ref)
    session.open_day(day_id)
    views.print_day(session.doc, session.doc.find_day(day_id))


@app.command("add-day")
def add_day(
    data_path: DataPathOption = None,
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Day name (default: 'Day N')"),
    ] = None,
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Day date (YYYY-MM-DD, default: today)"),
    ] = None,
) -> None:
    """
    Add a new, empty workout day.
    """
    session = open_session(data_path)
    try:
        session.add_day(day_date=date)
        day = session.doc.days[-1]
        if name:
            session.update_day(day.id, {"name": name})
            day = session.doc.days[-1]
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Added {day.name} ({day.id[:8]})")


@app.command("edit-day")
def edit_day(
    day_ref: Annotated[str, typer.Argument(help="Day id (or unique prefix)")],
    data_path: DataPathOption = None,
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="New day name"),
    ] = None,
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="New date (YYYY-MM-DD)"),
    ] = None,
) -> None:
    """
    Rename a day or change its date.
    """
    session = open_session(data_path)
    day_id = resolve_day(session.doc, day_ref)

    partial = {k: v for k, v in (("name", name), ("date", date)) if v is not None}
    if not partial:
        views.print_warning("Nothing to change. Pass --name and/or --date.")
        raise typer.Exit(0)

    try:
        session.update_day(day_id, partial)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Updated {session.doc.find_day(day_id).name}")


@app.command("delete-day")
def delete_day(
    day_ref: Annotated[str, typer.Argument(help="Day id (or unique prefix)")],
    data_path: DataPathOption = None,
    yes: YesOption = False,
) -> None:
    """
    Delete a day together with all of its series and exercises.
    """
    session = open_session(data_path)
    day_id = resolve_day(session.doc, day_ref)
    day = session.doc.find_day(day_id)

    prompt = f"Delete '{day.name}' and all its series and exercises?"
    if not yes and not views.confirm_action(prompt):
        views.print_info("Cancelled.")
        return

    session.delete_day(day_id)
    views.print_success(f"Deleted {day.name}")
