"""Shared Typer app object, shared option types, and session utilities."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.catalog import YamlCatalog
from ..core.models import TrackerDocument
from ..core.session import TrackerSession
from ..core.settings import load_settings
from ..io.document_store import DocumentStore, get_default_data_path
from . import views

# Shared --data-path option type used across all commands
DataPathOption = Annotated[
    Optional[Path],
    typer.Option("--data-path", "-p", help="Path to the tracker JSON data file"),
]

# Shared --yes option for confirmation-gated deletes
YesOption = Annotated[
    bool,
    typer.Option("--yes", "-y", help="Skip the confirmation prompt"),
]

app = typer.Typer(
    name="gym-tracker",
    help="Workout tracker: days, series of exercises, and round-by-round progress.",
    no_args_is_help=True,
)


def get_store(data_path: Path | None) -> DocumentStore:
    """Get document store from path or default location."""
    if data_path is None:
        data_path = get_default_data_path()
    return DocumentStore(data_path)


def open_session(data_path: Path | None, require_data: bool = True) -> TrackerSession:
    """
    Build and mount a session for a command.

    Args:
        data_path: Explicit data file, or None for the default location
        require_data: Exit with an error when no data file exists yet
    """
    store = get_store(data_path)
    if require_data and not store.exists():
        views.print_error(f"Data file not found: {store.data_path}")
        views.print_info("Run 'init' first to create it.")
        raise typer.Exit(1)

    session = TrackerSession(
        store,
        catalog=YamlCatalog(),
        settings=load_settings(store.data_dir),
    )
    session.mount()
    return session


def _resolve(kind: str, candidates: list[str], ref: str) -> str:
    """Match an id or unique id prefix against candidate ids."""
    if ref in candidates:
        return ref
    matches = [c for c in candidates if c.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        views.print_error(f"No {kind} matches '{ref}'")
    else:
        views.print_error(f"'{ref}' matches several {kind} ids: {', '.join(matches)}")
    raise typer.Exit(1)


def resolve_day(doc: TrackerDocument, ref: str) -> str:
    return _resolve("day", [d.id for d in doc.days], ref)


def resolve_series(doc: TrackerDocument, ref: str) -> str:
    return _resolve("series", [s.id for s in doc.series], ref)


def resolve_exercise(doc: TrackerDocument, ref: str) -> str:
    return _resolve("exercise", [e.id for e in doc.exercises], ref)
