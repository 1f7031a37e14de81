"""
Tracker session: the hosting view around the core reducers.

A TrackerSession holds the current document and navigation state, applies
reducers from hierarchy.py and progress.py, and writes every resulting
document straight through to the store. Round completions are followed by
the completion transition, whose deferred advance drives navigation to the
next series of the day.
"""

from __future__ import annotations

import sched
import time
import warnings
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Literal

from . import hierarchy, progress
from .catalog import CatalogError, CatalogService, find_template
from .completion import CompletionTransition, TransitionState
from .initial_data import initial_document
from .models import ExerciseTemplate, TrackerDocument
from .settings import Settings

if TYPE_CHECKING:
    from ..io.document_store import DocumentStore

View = Literal["days", "day", "series"]


class TrackerSession:
    """
    Owns one tracker document for the lifetime of a view.

    Args:
        store: Persistence for the document
        catalog: Source of exercise templates (None disables cloning)
        settings: Behaviour overrides
        scheduler: Event queue for the completion dwell (default: a
            ``sched.scheduler`` on the monotonic clock)
        id_factory: Id source for new entities
    """

    def __init__(
        self,
        store: DocumentStore,
        catalog: CatalogService | None = None,
        settings: Settings | None = None,
        scheduler: sched.scheduler | None = None,
        id_factory: Callable[[], str] = hierarchy.new_id,
    ):
        self.store = store
        self.catalog_service = catalog
        self.settings = settings or Settings()
        self.scheduler = scheduler or sched.scheduler(time.monotonic, time.sleep)
        self.id_factory = id_factory

        self.doc = TrackerDocument()
        self.catalog: list[ExerciseTemplate] = []
        self.view: View = "days"
        self.active_day_id: str | None = None
        self.active_series_id: str | None = None
        self.completed_log: list[str] = []

        self.transition = CompletionTransition(
            on_series_completed=self.handle_series_completed,
            scheduler=self.scheduler,
            dwell_seconds=self.settings.dwell_seconds,
            require_rating=self.settings.require_rating,
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def mount(self, seed: bool = True) -> None:
        """
        Load the document and read the catalog once.

        Args:
            seed: Start from the starter document when nothing is stored
        """
        default = initial_document() if seed else TrackerDocument()
        self.doc = self.store.load(default)
        self.load_catalog()

    def load_catalog(self) -> None:
        """
        Read the template catalog.

        A failure is reported as a warning and leaves the catalog empty;
        tracking keeps working without clone-from-catalog.
        """
        if self.catalog_service is None:
            self.catalog = []
            return
        try:
            self.catalog = list(self.catalog_service.get_all())
        except CatalogError as exc:
            warnings.warn(f"gym-tracker: exercise catalog unavailable ({exc})", stacklevel=2)
            self.catalog = []

    def unmount(self) -> None:
        """Detach from the transition so queued advances become no-ops."""
        self.transition.detach()

    def run_pending(self) -> None:
        """Run queued deferred events, sleeping until each is due."""
        self.scheduler.run()

    def _commit(self, doc: TrackerDocument) -> TrackerDocument:
        if doc is not self.doc:
            self.doc = doc
            self.store.save(doc)
        return self.doc

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def open_day(self, day_id: str) -> None:
        if self.doc.find_day(day_id) is None:
            return
        self.active_day_id = day_id
        self.active_series_id = None
        self.view = "day"

    def open_series(self, series_id: str) -> None:
        day = self.doc.day_for_series(series_id)
        if day is None:
            return
        self.active_day_id = day.id
        self.active_series_id = series_id
        self.view = "series"

    def back_to_days(self) -> None:
        self.view = "days"
        self.active_day_id = None
        self.active_series_id = None

    def back_to_day(self) -> None:
        self.view = "day"
        self.active_series_id = None

    def handle_series_completed(self, series_id: str) -> None:
        """
        Advance after a series was completed.

        Opens the next series in the parent day's declared order, or returns
        to the day view when the completed series was the last one.
        """
        self.completed_log.append(series_id)
        day = self.doc.day_for_series(series_id)
        if day is None:
            return
        position = day.series_ids.index(series_id)
        if position < len(day.series_ids) - 1:
            self.active_day_id = day.id
            self.active_series_id = day.series_ids[position + 1]
            self.view = "series"
        else:
            self.active_day_id = day.id
            self.back_to_day()

    # -------------------------------------------------------------------------
    # Structure
    # -------------------------------------------------------------------------

    def add_day(self, day_date: str | None = None) -> TrackerDocument:
        return self._commit(
            hierarchy.add_day(self.doc, id_factory=self.id_factory, day_date=day_date)
        )

    def update_day(self, day_id: str, partial: dict[str, Any]) -> TrackerDocument:
        return self._commit(hierarchy.update_day(self.doc, day_id, partial))

    def delete_day(self, day_id: str) -> TrackerDocument:
        """Cascade-delete a day; leaving the days view if it was open."""
        series_ids, _ = hierarchy.descendants(self.doc, day_id)
        self._commit(hierarchy.delete_day(self.doc, day_id))
        for series_id in series_ids:
            self.transition.observe(self.doc, series_id)
        if self.active_day_id == day_id:
            self.back_to_days()
        return self.doc

    def add_series(self, day_id: str) -> TrackerDocument:
        return self._commit(
            hierarchy.add_series(
                self.doc,
                day_id,
                rounds=self.settings.default_rounds,
                id_factory=self.id_factory,
            )
        )

    def update_series(self, series_id: str, partial: dict[str, Any]) -> TrackerDocument:
        self._commit(hierarchy.update_series(self.doc, series_id, partial))
        self.transition.observe(self.doc, series_id)
        return self.doc

    def delete_series(self, series_id: str, day_id: str) -> TrackerDocument:
        self._commit(hierarchy.delete_series(self.doc, series_id, day_id))
        self.transition.observe(self.doc, series_id)
        if self.active_series_id == series_id:
            self.back_to_day()
        return self.doc

    def reset_series(self, series_id: str) -> TrackerDocument:
        self._commit(hierarchy.reset_series(self.doc, series_id))
        self.transition.observe(self.doc, series_id)
        return self.doc

    def add_exercise(
        self, series_id: str, partial: dict[str, Any] | None = None
    ) -> TrackerDocument:
        self._commit(
            hierarchy.add_exercise(
                self.doc, series_id, overrides=partial, id_factory=self.id_factory
            )
        )
        self.transition.observe(self.doc, series_id)
        return self.doc

    def add_exercise_from_catalog(
        self, series_id: str, template_id: str, partial: dict[str, Any] | None = None
    ) -> TrackerDocument:
        """Clone a catalog template into a series; unknown templates are a no-op."""
        template = find_template(self.catalog, template_id)
        if template is None:
            return self.doc
        self._commit(
            hierarchy.add_exercise(
                self.doc, series_id, template, overrides=partial, id_factory=self.id_factory
            )
        )
        self.transition.observe(self.doc, series_id)
        return self.doc

    def update_exercise(self, exercise_id: str, partial: dict[str, Any]) -> TrackerDocument:
        self._commit(hierarchy.update_exercise(self.doc, exercise_id, partial))
        series = self.doc.series_for_exercise(exercise_id)
        if series is not None:
            self.transition.observe(self.doc, series.id)
        return self.doc

    def delete_exercise(self, exercise_id: str, series_id: str) -> TrackerDocument:
        self._commit(hierarchy.delete_exercise(self.doc, exercise_id, series_id))
        self.transition.observe(self.doc, series_id)
        return self.doc

    # -------------------------------------------------------------------------
    # Progress
    # -------------------------------------------------------------------------

    def complete_round(self, exercise_id: str) -> TransitionState | None:
        """
        Record one round of an exercise and run the completion check.

        Returns:
            Transition state of the owning series, or None if the exercise
            is not part of any series
        """
        series = self.doc.series_for_exercise(exercise_id)
        if series is None:
            return None

        previous = self.doc
        self._commit(progress.record_round_completion(previous, exercise_id))

        before = previous.find_exercise(exercise_id)
        after = self.doc.find_exercise(exercise_id)
        just_finished = after is not None and after.completed and not (before and before.completed)
        if just_finished and after.rating is None:
            self.transition.hold_for_rating(series.id, exercise_id)
        return self.transition.observe(self.doc, series.id, previous=previous)

    def rate_exercise(self, exercise_id: str, rating: int) -> TransitionState | None:
        """
        Store a rating and release a completion check held for it.

        Returns:
            Transition state of the owning series, or None if the exercise
            is not part of any series
        """
        self._commit(progress.rate_exercise(self.doc, exercise_id, rating))
        series = self.doc.series_for_exercise(exercise_id)
        if series is None:
            return None
        if self.transition.awaiting_rating(series.id) == exercise_id:
            return self.transition.release_rating(self.doc, series.id)
        return self.transition.state(series.id)
