"""Workout tracker: days, series and exercises with round-by-round progress."""

__version__ = "0.1.0"
