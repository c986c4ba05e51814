from datetime import date, datetime, timezone

from liftlog.db import unit_of_work
from liftlog.schemas.session import ActiveSession, SessionExercise, SetEntry
from liftlog.schemas.stats import WeekStats
from liftlog.services.reconciler import FinishReconciler
from liftlog.services.session_machine import build_snapshot
from liftlog.services.stats import compare, week_start, weekly_comparison


def test_week_starts_on_sunday():
    assert week_start(date(2024, 3, 14)) == date(2024, 3, 10)   # Thursday
    assert week_start(date(2024, 3, 10)) == date(2024, 3, 10)   # Sunday
    assert week_start(date(2024, 3, 16)) == date(2024, 3, 10)   # Saturday


def test_compare_thresholds():
    prev = WeekStats(total_volume=1000, workout_count=2, cardio_minutes=10)
    assert compare(WeekStats(total_volume=1040, workout_count=3, cardio_minutes=0), prev).volume_change_type == "maintained"
    up = compare(WeekStats(total_volume=1200, workout_count=3, cardio_minutes=25), prev)
    assert (up.volume_change_type, up.volume_delta, up.workout_frequency_delta, up.cardio_delta) == ("increase", 20.0, 1, 15)
    assert compare(WeekStats(total_volume=500, workout_count=1, cardio_minutes=0), prev).volume_change_type == "decrease"


def test_first_week_with_volume_is_an_increase():
    empty = WeekStats(total_volume=0, workout_count=0, cardio_minutes=0)
    some = WeekStats(total_volume=10, workout_count=1, cardio_minutes=0)
    assert compare(some, empty).volume_delta == 100.0
    assert compare(empty, empty).volume_change_type == "maintained"


def finish(factory, ended_at, exercises):
    session = ActiveSession(label="W", started_at=ended_at, exercises=exercises)
    FinishReconciler(factory).commit("u1", build_snapshot(session, ended_at))


def test_weekly_comparison(session_factory):
    bench = lambda: SessionExercise(name="Bench", category="push",
                                    sets=[SetEntry(weight=50, reps=10, completed=True)])
    bike = SessionExercise(name="Cycling", category="cardio",
                           sets=[SetEntry(duration_minutes=25, completed=True)])
    finish(session_factory, datetime(2024, 3, 5, 8, tzinfo=timezone.utc), [bench()])   # previous week
    finish(session_factory, datetime(2024, 3, 11, 8, tzinfo=timezone.utc), [bench(), bike])
    finish(session_factory, datetime(2024, 3, 13, 8, tzinfo=timezone.utc), [bench()])

    with unit_of_work(session_factory, "read") as db:
        result = weekly_comparison(db, "u1", date(2024, 3, 14))
    assert result.current_week.workout_count == 2
    assert result.current_week.total_volume == 1000
    assert result.current_week.cardio_minutes == 25
    assert result.previous_week.workout_count == 1
    assert result.changes.volume_change_type == "increase"
    assert result.changes.volume_delta == 100.0
