"""
Finish reconciler: commits a finished session and brings the aggregates up to date.

Order of work for one snapshot:

1. workout row, its exercises and their completed sets, in one transaction
   (an existing row for the same session id is reused, so retries never
   duplicate it);
2. gamification increment, guarded by a per-session commit marker;
3. monthly goal recount for the workout's month.

Only step 1 can fail the finish. Steps 2-3 are logged and picked up again
by `sync_pending`.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone

from liftlog.db import unit_of_work
from liftlog.errors import LiftLogError, NotFoundError, PersistenceUnavailable
from liftlog.repositories.aggregate_repo import GamificationRepository
from liftlog.repositories.workout_repo import WorkoutRepository
from liftlog.models import Workout
from liftlog.schemas.session import CompletedWorkout, SessionExercise, SetEntry
from liftlog.services.aggregates import AggregateService, month_key

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class StoredWorkout:
    id: int
    workout_date: date
    snapshot: CompletedWorkout   # what the store holds for the session
    reused: bool = False


@dataclass(slots=True)
class CommitResult:
    workout_id: int
    aggregates_synced: bool
    workout: CompletedWorkout


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def snapshot_from_row(workout: Workout) -> CompletedWorkout:
    """Rebuild a snapshot from a stored workout (completed sets only)."""
    return CompletedWorkout(
        session_id=workout.session_id,
        label=workout.name,
        started_at=_aware(workout.started_at),
        ended_at=_aware(workout.ended_at),
        duration_seconds=workout.duration_seconds,
        total_volume=workout.total_volume,
        total_duration_minutes=workout.total_duration_minutes,
        total_distance=workout.total_distance,
        total_calories=workout.total_calories,
        exercises=[
            SessionExercise(
                name=ex.name,
                category=ex.category,
                sets=[
                    SetEntry(
                        weight=s.weight, reps=s.reps, duration_minutes=s.duration_minutes,
                        distance=s.distance, calories=s.calories, completed=True,
                    )
                    for s in ex.sets
                ],
            )
            for ex in workout.exercises
        ],
    )


class FinishReconciler:
    def __init__(self, session_factory, *, points_per_workout: int | None = None):
        self.session_factory = session_factory
        self.points_per_workout = points_per_workout

    def _aggregates(self, db) -> AggregateService:
        return AggregateService(db, points_per_workout=self.points_per_workout)

    def commit(self, user_id: str, snapshot: CompletedWorkout) -> CommitResult:
        stored = self.write_workout(user_id, snapshot)
        synced = self.sync_aggregates(user_id, snapshot.session_id, stored.workout_date)
        return CommitResult(workout_id=stored.id, aggregates_synced=synced, workout=stored.snapshot)

    def write_workout(self, user_id: str, snapshot: CompletedWorkout) -> StoredWorkout:
        with unit_of_work(self.session_factory, "save workout") as db:
            repo = WorkoutRepository(db)
            existing = repo.get_by_session(snapshot.session_id)
            if existing is not None:
                # A retried finish reports what was stored the first time.
                logger.info("session %s already stored as workout %s", snapshot.session_id, existing.id)
                return StoredWorkout(
                    id=existing.id,
                    workout_date=existing.workout_date,
                    snapshot=snapshot_from_row(existing),
                    reused=True,
                )

            workout_date = snapshot.ended_at.date()
            workout = repo.create_workout(
                user_id=user_id,
                session_id=snapshot.session_id,
                name=snapshot.label,
                started_at=snapshot.started_at,
                ended_at=snapshot.ended_at,
                workout_date=workout_date,
                duration_seconds=snapshot.duration_seconds,
                total_volume=snapshot.total_volume,
                total_duration_minutes=snapshot.total_duration_minutes,
                total_distance=snapshot.total_distance,
                total_calories=snapshot.total_calories,
            )
            for position, exercise in enumerate(snapshot.exercises):
                row = repo.create_exercise(
                    workout.id, position=position, name=exercise.name, category=exercise.category,
                )
                # Incomplete sets stay in the local snapshot only.
                done = [s for s in exercise.sets if s.completed]
                repo.create_sets(row.id, [
                    {
                        "set_number": number,
                        "weight": s.weight,
                        "reps": s.reps,
                        "duration_minutes": s.duration_minutes,
                        "distance": s.distance,
                        "calories": s.calories,
                        "is_completed": True,
                    }
                    for number, s in enumerate(done, start=1)
                ])
            stored = StoredWorkout(id=workout.id, workout_date=workout_date, snapshot=snapshot)
        logger.info("stored workout %s for user %s (session %s)", stored.id, user_id, snapshot.session_id)
        return stored

    def sync_aggregates(self, user_id: str, session_id: str, workout_date: date) -> bool:
        synced = True
        try:
            with unit_of_work(self.session_factory, "update gamification") as db:
                if not self._aggregates(db).apply_finish(user_id, session_id):
                    logger.info("session %s already counted", session_id)
        except PersistenceUnavailable as e:
            logger.warning("gamification update deferred for session %s: %s", session_id, e)
            synced = False
        try:
            with unit_of_work(self.session_factory, "sync monthly goal") as db:
                self._aggregates(db).resync_month(user_id, month_key(workout_date))
        except PersistenceUnavailable as e:
            logger.warning("monthly goal sync deferred for %s: %s", month_key(workout_date), e)
            synced = False
        return synced

    def sync_pending(self, user_id: str, today: date) -> list[str]:
        """
        Count every stored workout that missed its gamification increment and
        recount the affected months plus the current one. Returns the session
        ids that were applied.
        """
        applied: list[str] = []
        months = {month_key(today)}
        with unit_of_work(self.session_factory, "sync aggregates") as db:
            aggregates = self._aggregates(db)
            for workout in GamificationRepository(db).uncommitted_workouts(user_id):
                if aggregates.apply_finish(user_id, workout.session_id):
                    applied.append(workout.session_id)
                    months.add(month_key(workout.workout_date))
            for key in sorted(months):
                aggregates.resync_month(user_id, key)
        if applied:
            logger.info("applied %d deferred workout(s) for user %s", len(applied), user_id)
        return applied

    def delete_workout(self, user_id: str, workout_id: int) -> None:
        with unit_of_work(self.session_factory, "delete workout") as db:
            repo = WorkoutRepository(db)
            workout = repo.get_for_user(user_id, workout_id)
            if workout is None:
                raise NotFoundError("Workout not found")
            session_id, key = workout.session_id, month_key(workout.workout_date)
            repo.delete_workout(workout)
            self._aggregates(db).apply_delete(user_id, session_id)
        try:
            with unit_of_work(self.session_factory, "sync monthly goal") as db:
                self._aggregates(db).resync_month(user_id, key)
        except LiftLogError as e:
            logger.warning("monthly goal sync deferred for %s: %s", key, e)
