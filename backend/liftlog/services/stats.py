from __future__ import annotations
from datetime import date, timedelta

from sqlalchemy.orm import Session

from liftlog.models import Workout
from liftlog.repositories.workout_repo import WorkoutRepository
from liftlog.schemas.stats import WeekChanges, WeekStats, WeeklyComparison


def week_start(day: date) -> date:
    """Sunday on or before `day`."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def week_stats(workouts: list[Workout]) -> WeekStats:
    cardio = 0.0
    for w in workouts:
        for ex in w.exercises:
            if (ex.category or "").lower() == "cardio":
                cardio += sum(s.duration_minutes for s in ex.sets)
    return WeekStats(
        total_volume=sum(w.total_volume for w in workouts),
        workout_count=len(workouts),
        cardio_minutes=cardio,
    )


def compare(current: WeekStats, previous: WeekStats) -> WeekChanges:
    if previous.total_volume > 0:
        delta = (current.total_volume - previous.total_volume) / previous.total_volume * 100
    else:
        delta = 100.0 if current.total_volume > 0 else 0.0
    if delta > 5:
        change = "increase"
    elif delta < -5:
        change = "decrease"
    else:
        change = "maintained"
    return WeekChanges(
        volume_delta=round(delta, 2),
        volume_change_type=change,
        workout_frequency_delta=current.workout_count - previous.workout_count,
        cardio_delta=current.cardio_minutes - previous.cardio_minutes,
    )


def weekly_comparison(db: Session, user_id: str, today: date) -> WeeklyComparison:
    repo = WorkoutRepository(db)
    start = week_start(today)
    current = week_stats(repo.query_workouts(user_id, start=start, end=start + timedelta(days=6)))
    previous = week_stats(repo.query_workouts(
        user_id, start=start - timedelta(days=7), end=start - timedelta(days=1)
    ))
    return WeeklyComparison(current_week=current, previous_week=previous, changes=compare(current, previous))
