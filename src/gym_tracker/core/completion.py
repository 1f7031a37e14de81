"""
Series completion transition.

Per series the transition moves through:

    in_progress ──(all exercises completed)──> all_complete ──(dwell)──> advanced
         │
         └──(exercise finished, rating required)──> awaiting_rating ──(rated)──┘

``all_complete`` is the celebration: it lasts ``dwell_seconds`` and then the
advance runs on its own, handing the series id to the hosting view's
``on_series_completed`` callback. The dwell is a deferred event on a
``sched.scheduler``, never a blocking wait inside the transition itself.

The transition is edge-triggered: it fires only when a round completion
turns an incomplete series into a complete one. Re-observing a series that
is already complete does nothing; only after the series stops being
complete (exercise added, rounds raised, series reset) can it fire again.
"""

import sched
from collections.abc import Callable
from typing import Literal

from .config import COMPLETION_DWELL_SECONDS
from .models import TrackerDocument
from .progress import first_unrated_exercise, is_series_complete

TransitionState = Literal["in_progress", "awaiting_rating", "all_complete", "advanced"]
SeriesCompletedCallback = Callable[[str], None]


class CompletionTransition:
    """
    Tracks completion state of series and schedules the advance.

    The instance belongs to one hosting view. ``detach()`` is called when
    that view goes away; any advance still queued afterwards is ignored.
    """

    def __init__(
        self,
        on_series_completed: SeriesCompletedCallback,
        scheduler: sched.scheduler,
        dwell_seconds: float = COMPLETION_DWELL_SECONDS,
        require_rating: bool = False,
    ):
        """
        Initialize the transition.

        Args:
            on_series_completed: Called with the series id after the dwell
            scheduler: Event queue that runs the deferred advance
            dwell_seconds: Length of the celebration
            require_rating: Hold the completion check until a finished
                exercise has been rated
        """
        self.on_series_completed = on_series_completed
        self.scheduler = scheduler
        self.dwell_seconds = dwell_seconds
        self.require_rating = require_rating
        self._states: dict[str, TransitionState] = {}
        self._pending: dict[str, sched.Event] = {}
        self._awaiting: dict[str, str] = {}  # series id -> exercise id to rate
        self._attached = True

    def state(self, series_id: str) -> TransitionState:
        """Current state of a series (``in_progress`` when never observed)."""
        return self._states.get(series_id, "in_progress")

    def awaiting_rating(self, series_id: str) -> str | None:
        """Exercise id waiting for a rating in this series, if any."""
        return self._awaiting.get(series_id)

    @property
    def attached(self) -> bool:
        return self._attached

    def observe(
        self,
        doc: TrackerDocument,
        series_id: str,
        previous: TrackerDocument | None = None,
    ) -> TransitionState:
        """
        Re-evaluate a series after one of its exercises changed.

        Moves ``in_progress`` to ``all_complete`` when ``previous`` (the
        document before a round completion) had the series incomplete and
        ``doc`` has every exercise of the non-empty series completed; the
        advance is then scheduled. Without ``previous`` the call only resets
        a series that is no longer complete back to ``in_progress``.

        Returns:
            The state after evaluation
        """
        current = self.state(series_id)

        if not is_series_complete(doc, series_id):
            if current != "awaiting_rating":
                self._reset(series_id)
            return self.state(series_id)

        if previous is None or is_series_complete(previous, series_id):
            return current
        if current != "in_progress":
            return current
        return self._fire_or_hold(doc, series_id)

    def hold_for_rating(self, series_id: str, exercise_id: str) -> None:
        """
        Block the completion check until ``exercise_id`` has been rated.

        Only effective when ``require_rating`` is set.
        """
        if not self.require_rating or self.state(series_id) != "in_progress":
            return
        self._states[series_id] = "awaiting_rating"
        self._awaiting[series_id] = exercise_id

    def release_rating(self, doc: TrackerDocument, series_id: str) -> TransitionState:
        """
        Leave ``awaiting_rating`` and run the completion check.

        If another finished exercise of the complete series is still
        unrated, the hold moves on to that exercise instead.
        """
        if self.state(series_id) != "awaiting_rating":
            return self.state(series_id)
        self._states[series_id] = "in_progress"
        self._awaiting.pop(series_id, None)
        if not is_series_complete(doc, series_id):
            return "in_progress"
        return self._fire_or_hold(doc, series_id)

    def _fire_or_hold(self, doc: TrackerDocument, series_id: str) -> TransitionState:
        # With ratings required, a series completes once, when its last
        # exercise gets rated.
        if self.require_rating:
            unrated = first_unrated_exercise(doc, series_id)
            if unrated is not None:
                self.hold_for_rating(series_id, unrated)
                return self.state(series_id)
        return self._fire(series_id)

    def detach(self) -> None:
        """Mark the hosting view gone and drop queued advances."""
        self._attached = False
        for event in self._pending.values():
            try:
                self.scheduler.cancel(event)
            except ValueError:
                pass  # already ran
        self._pending.clear()

    def _fire(self, series_id: str) -> TransitionState:
        if not self._attached:
            return self.state(series_id)
        self._states[series_id] = "all_complete"
        self._pending[series_id] = self.scheduler.enter(
            self.dwell_seconds, 0, self._advance, argument=(series_id,)
        )
        return "all_complete"

    def _reset(self, series_id: str) -> None:
        event = self._pending.pop(series_id, None)
        if event is not None:
            try:
                self.scheduler.cancel(event)
            except ValueError:
                pass
        self._states.pop(series_id, None)
        self._awaiting.pop(series_id, None)

    def _advance(self, series_id: str) -> None:
        self._pending.pop(series_id, None)
        if not self._attached or self.state(series_id) != "all_complete":
            return
        self._states[series_id] = "advanced"
        self.on_series_completed(series_id)
