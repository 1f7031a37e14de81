"""
Configuration constants for the workout tracker.

Defaults for new entities, the completion dwell, and storage naming are
centralized here. User overrides for a subset of them live in settings.yaml
(see settings.py).
"""

from typing import Final

# =============================================================================
# STORAGE
# =============================================================================

STORAGE_KEY: Final[str] = "gym-tracker-data"  # Key of the single persisted slot
APP_DIR_NAME: Final[str] = ".gym-tracker"  # Under the user's home directory
SETTINGS_FILE_NAME: Final[str] = "settings.yaml"

# =============================================================================
# NEW ENTITY DEFAULTS
# =============================================================================

DEFAULT_ROUNDS: Final[int] = 3  # Rounds for a freshly added series
DEFAULT_DAY_NAME: Final[str] = "Day {n}"
DEFAULT_SERIES_NAME: Final[str] = "Series {n}"
DEFAULT_EXERCISE_NAME: Final[str] = "Exercise {n}"

# =============================================================================
# SERIES ICONS
# =============================================================================

SERIES_ICONS: Final[dict[str, str]] = {
    "layers": "Layers",
    "dumbbell": "Dumbbell",
    "running": "Running",
    "heart": "Heart",
    "zap": "Zap",
    "target": "Target",
    "flame": "Flame",
    "activity": "Activity",
}
DEFAULT_ICON: Final[str] = "layers"

# =============================================================================
# COMPLETION
# =============================================================================

COMPLETION_DWELL_SECONDS: Final[float] = 2.0  # Celebration shown before advancing
RATING_MIN: Final[int] = 1
RATING_MAX: Final[int] = 5

# =============================================================================
# CATALOG
# =============================================================================

DIFFICULTIES: Final[tuple[str, ...]] = ("beginner", "intermediate", "advanced")
