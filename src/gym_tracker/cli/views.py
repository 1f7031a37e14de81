"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of days, series and exercises.
"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.config import SERIES_ICONS
from ..core.media import format_day_date, youtube_video_id
from ..core.models import Day, ExerciseTemplate, Series, TrackerDocument
from ..core.progress import completed_rounds, progress_percent

console = Console()


def _short(entity_id: str) -> str:
    """First eight characters of an id, enough to type as a prefix."""
    return entity_id[:8]


def _progress_bar(progress: float, width: int = 20) -> str:
    filled = min(width, int(progress * width))
    return "█" * filled + "░" * (width - filled)


def print_days(doc: TrackerDocument) -> None:
    """
    Print all days.

    Args:
        doc: Tracker document
    """
    if not doc.days:
        console.print("[yellow]No days yet. Add one with 'add-day'.[/yellow]")
        return

    table = Table(title="Days")
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Date")
    table.add_column("Series", justify="right")

    for i, day in enumerate(doc.days, 1):
        table.add_row(
            str(i),
            _short(day.id),
            day.name,
            format_day_date(day.date),
            str(len(day.series_ids)),
        )

    console.print(table)


def print_day(doc: TrackerDocument, day: Day) -> None:
    """
    Print one day with its series and their progress.

    Args:
        doc: Tracker document
        day: Day to show
    """
    console.print(f"\n[bold]{day.name}[/bold]  [dim]{format_day_date(day.date)}[/dim]")
    series_list = doc.series_in(day)
    if not series_list:
        console.print("[yellow]No series yet. Add one with 'add-series'.[/yellow]")
        return

    table = Table()
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="cyan")
    table.add_column("Icon", style="dim")
    table.add_column("Name")
    table.add_column("Rounds", justify="right")
    table.add_column("Exercises", justify="right")
    table.add_column("Progress", justify="right")

    for i, series in enumerate(series_list, 1):
        pct = progress_percent(series.progress)
        style = "green" if pct >= 100 else ""
        table.add_row(
            str(i),
            _short(series.id),
            SERIES_ICONS.get(series.icon, series.icon),
            series.name,
            str(series.rounds),
            str(len(series.exercise_ids)),
            f"[{style}]{pct}%[/{style}]" if style else f"{pct}%",
        )

    console.print(table)


def print_series(doc: TrackerDocument, series: Series) -> None:
    """
    Print one series with progress and its exercises.

    Args:
        doc: Tracker document
        series: Series to show
    """
    pct = progress_percent(series.progress)
    console.print(
        f"\n[bold]{series.name}[/bold] ({series.rounds} rounds)  "
        f"round {completed_rounds(doc, series)}/{series.rounds}"
    )
    console.print(f"Series progress: {_progress_bar(series.progress)} {pct}%")

    exercises = doc.exercises_in(series)
    if not exercises:
        console.print("[yellow]No exercises yet. Add one with 'add-exercise'.[/yellow]")
        return

    table = Table()
    table.add_column("", width=1)
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Target", justify="right")
    table.add_column("Load", justify="right")
    table.add_column("Side")
    table.add_column("Rounds", justify="right")
    table.add_column("Rating", justify="right")
    table.add_column("Video", style="dim")

    for ex in exercises:
        target = f"{ex.duration}s" if ex.duration and not ex.reps else f"{ex.reps} reps"
        table.add_row(
            "[green]✓[/green]" if ex.completed else "",
            _short(ex.id),
            ex.name,
            target,
            f"{ex.load:.1f} kg" if ex.load else "-",
            "both" if ex.bilateral else "each",
            f"{ex.completed_reps}/{series.rounds}",
            "★" * ex.rating if ex.rating else "",
            youtube_video_id(ex.video_url) or "",
        )

    console.print(table)


def print_catalog(templates: list[ExerciseTemplate]) -> None:
    """
    Print catalog templates.

    Args:
        templates: Templates to display
    """
    if not templates:
        console.print("[yellow]Catalog is empty.[/yellow]")
        return

    table = Table(title="Exercise Catalog")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Muscle group")
    table.add_column("Difficulty")
    table.add_column("Equipment", style="dim")

    for t in templates:
        table.add_row(t.id, t.name, t.muscle_group, t.difficulty, ", ".join(t.equipment) or "-")

    console.print(table)


def print_celebration(series: Series, dwell_seconds: float) -> None:
    """Print the series-complete panel shown during the dwell."""
    console.print(
        Panel(
            f"[bold green]Series complete: {series.name}[/bold green]\n"
            f"[dim]Moving on in {dwell_seconds:g}s...[/dim]",
            expand=False,
        )
    )


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} \\[y/N]: ")
    return response.lower() in ("y", "yes")
