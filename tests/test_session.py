"""
Integration tests for TrackerSession: reducers, write-through storage,
catalog loading, and navigation driven by the completion transition.

The session starts from the seed document:

    day-1 "Upper Body Day"
      series-1 "Warm-up"       2 rounds: exercise-1, exercise-2
      series-2 "Main Workout"  3 rounds: exercise-3
"""

import itertools
import sched

import pytest

from gym_tracker.core.catalog import CatalogError
from gym_tracker.core.initial_data import initial_document
from gym_tracker.core.models import ExerciseTemplate, TrackerDocument
from gym_tracker.core.progress import record_round_completion
from gym_tracker.core.session import TrackerSession
from gym_tracker.core.settings import Settings
from gym_tracker.io.document_store import DocumentStore


class ManualClock:
    def __init__(self):
        self.now = 0.0

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


class FakeCatalog:
    def __init__(self, templates):
        self.templates = templates
        self.calls = 0

    def get_all(self):
        self.calls += 1
        return list(self.templates)


class BrokenCatalog:
    def get_all(self):
        raise CatalogError("backend offline")


PUSH_UP = ExerciseTemplate(id="push_up", name="Push-up", muscle_group="chest", reps=10)


@pytest.fixture
def data_path(tmp_path):
    return tmp_path / "gym-tracker-data.json"


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def make_session(data_path, clock):
    def _make(settings=None, catalog=None, seed=True):
        counter = itertools.count(1)
        session = TrackerSession(
            DocumentStore(data_path),
            catalog=catalog,
            settings=settings,
            scheduler=sched.scheduler(clock.time, clock.sleep),
            id_factory=lambda: f"id-{next(counter)}",
        )
        session.mount(seed=seed)
        return session

    return _make


def _stored(data_path) -> TrackerDocument:
    return DocumentStore(data_path).load(TrackerDocument())


def _finish_warm_up(session):
    states = [session.complete_round(ex) for ex in ("exercise-1", "exercise-2") * 2]
    return states


# =============================================================================
# Mount and persistence
# =============================================================================


class TestMount:
    def test_seeds_when_nothing_stored(self, make_session):
        session = make_session()
        assert [d.id for d in session.doc.days] == ["day-1"]
        assert session.view == "days"

    def test_empty_without_seed(self, make_session):
        session = make_session(seed=False)
        assert session.doc == TrackerDocument()

    def test_mount_does_not_write(self, make_session, data_path):
        make_session()
        assert not data_path.exists()

    def test_loads_stored_document(self, make_session, data_path):
        doc = record_round_completion(initial_document(), "exercise-3")
        DocumentStore(data_path).save(doc)

        session = make_session()
        assert session.doc.find_exercise("exercise-3").completed_reps == 1

    def test_catalog_read_once(self, make_session):
        catalog = FakeCatalog([PUSH_UP])
        session = make_session(catalog=catalog)

        assert catalog.calls == 1
        assert session.catalog == [PUSH_UP]

    def test_catalog_failure_warns_and_keeps_tracking(self, make_session):
        with pytest.warns(UserWarning, match="catalog unavailable"):
            session = make_session(catalog=BrokenCatalog())

        assert session.catalog == []
        assert session.complete_round("exercise-1") == "in_progress"

    def test_no_catalog_service(self, make_session):
        session = make_session()
        assert session.catalog == []
        session.add_exercise_from_catalog("series-1", "push_up")
        assert len(session.doc.exercises) == 3


class TestWriteThrough:
    def test_every_change_is_saved(self, make_session, data_path):
        session = make_session()

        session.add_day(day_date="2026-03-06")
        assert len(_stored(data_path).days) == 2

        session.add_series("id-1")
        assert _stored(data_path).find_day("id-1").series_ids == ("id-2",)

        session.complete_round("exercise-1")
        assert _stored(data_path).find_exercise("exercise-1").completed_reps == 1

    def test_noop_is_not_saved(self, make_session, data_path):
        session = make_session()
        session.update_day("missing", {"name": "x"})
        session.delete_series("series-1", "missing")
        assert not data_path.exists()

    def test_reload_gives_same_document(self, make_session, data_path):
        session = make_session()
        session.add_exercise("series-2")
        session.update_exercise("id-1", {"name": "Dips", "reps": 8})
        session.complete_round("id-1")

        assert _stored(data_path) == session.doc

    def test_add_series_uses_default_rounds_setting(self, make_session):
        session = make_session(settings=Settings(default_rounds=5))
        session.add_series("day-1")
        assert session.doc.find_series("id-1").rounds == 5


# =============================================================================
# Completion and navigation
# =============================================================================


class TestSeriesCompletion:
    def test_completion_advances_to_next_series(self, make_session, clock):
        session = make_session()
        session.open_series("series-1")

        states = _finish_warm_up(session)

        assert states == ["in_progress", "in_progress", "in_progress", "all_complete"]
        # Still on the completed series during the dwell
        assert session.active_series_id == "series-1"
        assert session.doc.find_series("series-1").progress == pytest.approx(1.0)

        session.run_pending()

        assert clock.now == pytest.approx(2.0)
        assert session.completed_log == ["series-1"]
        assert session.view == "series"
        assert session.active_series_id == "series-2"
        assert session.active_day_id == "day-1"

    def test_last_series_returns_to_day(self, make_session):
        session = make_session()
        session.open_series("series-2")

        for _ in range(3):
            state = session.complete_round("exercise-3")
        assert state == "all_complete"

        session.run_pending()
        assert session.view == "day"
        assert session.active_day_id == "day-1"
        assert session.active_series_id is None

    def test_advance_picks_the_following_series(self, make_session):
        session = make_session()
        session.add_series("day-1")
        assert session.doc.find_day("day-1").series_ids == ("series-1", "series-2", "id-1")
        session.open_series("series-1")

        _finish_warm_up(session)
        session.run_pending()

        assert session.active_series_id == "series-2"

    def test_navigation_follows_declared_order(self, make_session):
        session = make_session()
        session.add_series("day-1")
        session.update_day("day-1", {"series_ids": ["series-2", "id-1", "series-1"]})
        session.open_series("series-2")

        for _ in range(3):
            session.complete_round("exercise-3")
        session.run_pending()

        assert session.active_series_id == "id-1"

    def test_middle_series_advances_to_last(self, make_session):
        session = make_session()
        session.add_series("day-1")
        session.update_day("day-1", {"series_ids": ["id-1", "series-1", "series-2"]})
        session.open_series("series-1")

        _finish_warm_up(session)
        session.run_pending()

        assert session.active_series_id == "series-2"

    def test_overshoot_fires_once(self, make_session):
        session = make_session()
        _finish_warm_up(session)
        assert session.complete_round("exercise-1") == "all_complete"

        session.run_pending()
        assert session.completed_log == ["series-1"]
        assert session.doc.find_exercise("exercise-1").completed_reps == 3

    def test_already_complete_series_does_not_refire(self, make_session, data_path):
        doc = initial_document()
        for ex_id in ("exercise-1", "exercise-2") * 2:
            doc = record_round_completion(doc, ex_id)
        DocumentStore(data_path).save(doc)

        session = make_session()
        session.update_series("series-1", {"name": "Warm up"})
        assert session.complete_round("exercise-1") == "in_progress"

        session.run_pending()
        assert session.completed_log == []

    def test_reset_then_complete_again(self, make_session):
        session = make_session()
        _finish_warm_up(session)
        session.run_pending()

        session.reset_series("series-1")
        assert session.doc.find_series("series-1").progress == 0.0

        assert _finish_warm_up(session)[-1] == "all_complete"
        session.run_pending()
        assert session.completed_log == ["series-1", "series-1"]

    def test_adding_exercise_during_dwell_cancels_advance(self, make_session):
        session = make_session()
        session.open_series("series-1")
        _finish_warm_up(session)

        session.add_exercise("series-1")
        session.run_pending()

        assert session.completed_log == []
        assert session.active_series_id == "series-1"

    def test_unknown_exercise(self, make_session):
        session = make_session()
        assert session.complete_round("missing") is None


class TestUnmount:
    def test_advance_after_unmount_is_ignored(self, make_session):
        session = make_session()
        session.open_series("series-1")
        _finish_warm_up(session)

        session.unmount()
        session.run_pending()

        assert session.completed_log == []
        assert session.active_series_id == "series-1"

    def test_deleting_day_during_dwell_cancels_advance(self, make_session):
        session = make_session()
        session.open_series("series-1")
        _finish_warm_up(session)

        session.delete_day("day-1")
        session.run_pending()

        assert session.completed_log == []
        assert session.view == "days"


class TestRatingFlow:
    def test_completion_waits_for_rating(self, make_session):
        session = make_session(settings=Settings(require_rating=True))
        session.open_series("series-2")

        states = [session.complete_round("exercise-3") for _ in range(3)]
        assert states == ["in_progress", "in_progress", "awaiting_rating"]
        assert session.transition.awaiting_rating("series-2") == "exercise-3"

        session.run_pending()
        assert session.completed_log == []

        assert session.rate_exercise("exercise-3", 5) == "all_complete"
        assert session.doc.find_exercise("exercise-3").rating == 5
        session.run_pending()
        assert session.completed_log == ["series-2"]
        assert session.view == "day"

    def test_series_completes_once_after_every_rating(self, make_session):
        session = make_session(settings=Settings(require_rating=True))
        session.open_series("series-1")

        states = _finish_warm_up(session)
        assert states == ["in_progress", "in_progress", "awaiting_rating", "awaiting_rating"]

        assert session.rate_exercise("exercise-2", 4) == "awaiting_rating"
        session.run_pending()
        assert session.completed_log == []

        assert session.rate_exercise("exercise-1", 3) == "all_complete"
        session.run_pending()
        session.rate_exercise("exercise-1", 5)
        session.run_pending()

        assert session.completed_log == ["series-1"]
        assert session.active_series_id == "series-2"

    def test_rating_without_hold(self, make_session):
        session = make_session()
        assert session.rate_exercise("exercise-1", 3) == "in_progress"
        assert session.doc.find_exercise("exercise-1").rating == 3

    def test_invalid_rating(self, make_session):
        session = make_session()
        with pytest.raises(ValueError):
            session.rate_exercise("exercise-1", 9)


# =============================================================================
# Structure
# =============================================================================


class TestStructure:
    def test_clone_from_catalog(self, make_session):
        session = make_session(catalog=FakeCatalog([PUSH_UP]))
        session.add_exercise_from_catalog("series-2", "push_up")

        ex = session.doc.find_exercise("id-1")
        assert ex.name == "Push-up"
        assert ex.reps == 10
        assert session.doc.find_series("series-2").exercise_ids == ("exercise-3", "id-1")

    def test_add_exercise_with_fields(self, make_session, data_path):
        session = make_session()
        session.add_exercise("series-2", {"name": "Dips", "reps": 8})

        ex = _stored(data_path).find_exercise("id-1")
        assert ex.name == "Dips"
        assert ex.reps == 8

    def test_rejected_add_is_not_saved(self, make_session, data_path):
        session = make_session()
        with pytest.raises(ValueError):
            session.add_exercise("series-2", {"reps": -1})

        assert len(session.doc.exercises) == 3
        assert not data_path.exists()

    def test_clone_unknown_template_is_noop(self, make_session, data_path):
        session = make_session(catalog=FakeCatalog([PUSH_UP]))
        session.add_exercise_from_catalog("series-2", "nope")
        assert len(session.doc.exercises) == 3
        assert not data_path.exists()

    def test_delete_open_day_returns_to_days(self, make_session):
        session = make_session()
        session.open_day("day-1")
        session.delete_day("day-1")

        assert session.view == "days"
        assert session.active_day_id is None
        assert session.doc.series == ()
        assert session.doc.exercises == ()

    def test_delete_open_series_returns_to_day(self, make_session):
        session = make_session()
        session.open_series("series-2")
        session.delete_series("series-2", "day-1")

        assert session.view == "day"
        assert session.active_series_id is None
        assert session.doc.find_exercise("exercise-3") is None

    def test_delete_exercise(self, make_session):
        session = make_session()
        session.delete_exercise("exercise-2", "series-1")
        assert session.doc.find_series("series-1").exercise_ids == ("exercise-1",)

    def test_open_unknown_ids(self, make_session):
        session = make_session()
        session.open_day("missing")
        session.open_series("missing")
        assert session.view == "days"
