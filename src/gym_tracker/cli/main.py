"""
CLI entry point using Typer.

Provides commands for workout tracking:
- init: Create the data file (optionally with a sample day)
- days / day / series: Browse days, their series, and exercises
- add-* / edit-* / delete-*: Manage days, series and exercises
- complete / rate: Record rounds and rate finished exercises
- reset-series: Start a series over
- catalog: List exercise templates to clone
"""

from .app import app
from .commands import days, exercises, series  # noqa: F401  (registers commands)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
