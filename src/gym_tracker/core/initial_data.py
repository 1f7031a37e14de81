"""Seed document used the first time the tracker runs."""

from datetime import date

from .models import Day, Exercise, Series, TrackerDocument


def initial_document(today: str | None = None) -> TrackerDocument:
    """
    Build the starter document: one upper-body day with two series.

    Args:
        today: ISO date for the day (default: today)
    """
    day_date = today or date.today().isoformat()
    return TrackerDocument(
        days=(
            Day(
                id="day-1",
                name="Upper Body Day",
                date=day_date,
                series_ids=("series-1", "series-2"),
            ),
        ),
        series=(
            Series(
                id="series-1",
                name="Warm-up",
                rounds=2,
                exercise_ids=("exercise-1", "exercise-2"),
            ),
            Series(
                id="series-2",
                name="Main Workout",
                rounds=3,
                exercise_ids=("exercise-3",),
                icon="dumbbell",
            ),
        ),
        exercises=(
            Exercise(
                id="exercise-1",
                name="Push-ups",
                reps=10,
                video_url="https://www.youtube.com/watch?v=IODxDxX7oi4",
            ),
            Exercise(
                id="exercise-2",
                name="Arm Circles",
                duration=30,
                video_url="https://www.youtube.com/shorts/Xyd_fa5zoEU",
            ),
            Exercise(
                id="exercise-3",
                name="Dumbbell Bench Press",
                reps=12,
                load=20.0,
                video_url="https://www.youtube.com/watch?v=VmB1G1K7v94",
            ),
        ),
    )
