"""
In-progress workout for one user.

    IDLE --start--> ACTIVE --finish--> FINISHING --ok--> IDLE
                      ^                    |
                      +------failure-------+
    ACTIVE --cancel--> IDLE

Mutations are synchronous and only allowed while ACTIVE. Every accepted
mutation is written to the session cache so a restarted process resumes the
workout. `finish` hands a frozen snapshot to the reconciler on a worker
thread; anything sent while it runs is rejected.
"""
from __future__ import annotations
import logging
import math
import threading
from datetime import datetime, timezone
from typing import Callable, Iterable

import pydantic
from starlette.concurrency import run_in_threadpool

from liftlog.db import unit_of_work
from liftlog.errors import ConflictError, LiftLogError, NotFoundError, ValidationError
from liftlog.repositories.session_cache_repo import SessionCacheRepository
from liftlog.schemas.session import (
    SET_VALUE_FIELDS,
    ActiveSession,
    CompletedWorkout,
    FinishResult,
    SessionExercise,
    SessionState,
    SetEntry,
)
from liftlog.services.reconciler import FinishReconciler

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def completed_sets(sets: Iterable[SetEntry]) -> list[SetEntry]:
    return [s for s in sets if s.completed]


def calculate_volume(sets: Iterable[SetEntry]) -> float:
    return sum(s.weight * s.reps for s in completed_sets(sets))


def build_snapshot(session: ActiveSession, ended_at: datetime) -> CompletedWorkout:
    done = [s for ex in session.exercises for s in completed_sets(ex.sets)]
    return CompletedWorkout(
        session_id=session.id,
        label=session.label,
        started_at=session.started_at,
        ended_at=ended_at,
        duration_seconds=max(0, int((ended_at - session.started_at).total_seconds())),
        total_volume=sum(calculate_volume(ex.sets) for ex in session.exercises),
        total_duration_minutes=sum(s.duration_minutes for s in done),
        total_distance=sum(s.distance for s in done),
        total_calories=sum(s.calories for s in done),
        exercises=[ex.model_copy(deep=True) for ex in session.exercises],
    )


def validate_set_fields(fields: dict) -> dict:
    """Check a partial set update as a whole; raise before anything is applied."""
    clean = {}
    for key, value in fields.items():
        if value is None:
            continue
        if key not in SET_VALUE_FIELDS:
            raise ValidationError(f"unknown set field '{key}'")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"{key} must be a number")
        if not math.isfinite(value):
            raise ValidationError(f"{key} must be a finite number")
        if value < 0:
            raise ValidationError(f"{key} cannot be negative")
        if key == "reps":
            if value != int(value):
                raise ValidationError("reps must be a whole number")
            value = int(value)
        clean[key] = value
    return clean


class WorkoutSessionService:
    def __init__(
        self,
        user_id: str,
        session_factory,
        reconciler: FinishReconciler,
        *,
        clock: Callable[[], datetime] = utcnow,
        default_label: str = "Custom Workout",
    ):
        self.user_id = user_id
        self.session_factory = session_factory
        self.reconciler = reconciler
        self.clock = clock
        self.default_label = default_label
        self._lock = threading.RLock()
        self._session: ActiveSession | None = None
        self._state = SessionState.idle
        self._resume()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> ActiveSession | None:
        return self._session

    def total_volume(self) -> float:
        with self._lock:
            if self._session is None:
                return 0
            return sum(calculate_volume(ex.sets) for ex in self._session.exercises)

    # --- local cache ---

    def _resume(self) -> None:
        try:
            with unit_of_work(self.session_factory, "load active session") as db:
                payload = SessionCacheRepository(db).load(self.user_id)
        except LiftLogError as e:
            logger.warning("could not resume session for user %s: %s", self.user_id, e)
            return
        if not payload:
            return
        try:
            self._session = ActiveSession.model_validate(payload)
        except pydantic.ValidationError as e:
            logger.warning("discarding unreadable cached session for user %s: %s", self.user_id, e)
            self._persist()
            return
        self._state = SessionState.active
        logger.info("resumed session %s for user %s", self._session.id, self.user_id)

    def _persist(self) -> None:
        # The in-memory session stays authoritative if the cache write fails.
        try:
            with unit_of_work(self.session_factory, "cache active session") as db:
                repo = SessionCacheRepository(db)
                if self._session is None:
                    repo.clear(self.user_id)
                else:
                    repo.save(self.user_id, self._session.model_dump(mode="json"))
        except LiftLogError as e:
            logger.warning("session cache write failed for user %s: %s", self.user_id, e)

    # --- guards / lookups ---

    def _require_active(self) -> ActiveSession:
        if self._state == SessionState.finishing:
            raise ConflictError("workout is being saved")
        if self._session is None:
            raise ConflictError("no active workout")
        return self._session

    def _exercise(self, exercise_id: str) -> SessionExercise:
        for ex in self._require_active().exercises:
            if ex.id == exercise_id:
                return ex
        raise NotFoundError("Exercise not found")

    def _set(self, exercise_id: str, set_id: str) -> SetEntry:
        for s in self._exercise(exercise_id).sets:
            if s.id == set_id:
                return s
        raise NotFoundError("Set not found")

    # --- operations ---

    def start(self, label: str | None = None) -> ActiveSession:
        with self._lock:
            if self._state != SessionState.idle:
                raise ConflictError("a workout is already in progress")
            self._session = ActiveSession(label=label or self.default_label, started_at=self.clock())
            self._state = SessionState.active
            self._persist()
            logger.info("user %s started session %s", self.user_id, self._session.id)
            return self._session

    def add_exercise(self, name: str, category: str | None = None) -> SessionExercise:
        with self._lock:
            session = self._require_active()
            exercise = SessionExercise(name=name, category=category, sets=[SetEntry()])
            session.exercises.append(exercise)
            self._persist()
            return exercise

    def remove_exercise(self, exercise_id: str) -> None:
        with self._lock:
            session = self._require_active()
            before = len(session.exercises)
            session.exercises = [ex for ex in session.exercises if ex.id != exercise_id]
            if len(session.exercises) != before:
                self._persist()

    def add_set(self, exercise_id: str) -> SetEntry:
        with self._lock:
            exercise = self._exercise(exercise_id)
            previous = exercise.sets[-1] if exercise.sets else None
            entry = SetEntry(**{f: getattr(previous, f) for f in SET_VALUE_FIELDS}) if previous else SetEntry()
            exercise.sets.append(entry)
            self._persist()
            return entry

    def update_set(self, exercise_id: str, set_id: str, **fields) -> SetEntry:
        with self._lock:
            entry = self._set(exercise_id, set_id)
            changes = validate_set_fields(fields)
            for key, value in changes.items():
                setattr(entry, key, value)
            if changes:
                self._persist()
            return entry

    def toggle_set(self, exercise_id: str, set_id: str) -> SetEntry:
        with self._lock:
            entry = self._set(exercise_id, set_id)
            entry.completed = not entry.completed
            self._persist()
            return entry

    def remove_set(self, exercise_id: str, set_id: str) -> None:
        with self._lock:
            exercise = self._exercise(exercise_id)
            before = len(exercise.sets)
            exercise.sets = [s for s in exercise.sets if s.id != set_id]
            if len(exercise.sets) != before:
                self._persist()

    def cancel(self) -> None:
        with self._lock:
            if self._state == SessionState.finishing:
                raise ConflictError("workout is being saved")
            if self._session is None:
                return
            logger.info("user %s cancelled session %s", self.user_id, self._session.id)
            self._session = None
            self._state = SessionState.idle
            self._persist()

    async def finish(self) -> FinishResult:
        with self._lock:
            session = self._require_active()
            self._state = SessionState.finishing
            snapshot = build_snapshot(session, self.clock())

        committed = False
        try:
            result = await run_in_threadpool(self.reconciler.commit, self.user_id, snapshot)
            committed = True
        finally:
            with self._lock:
                if committed:
                    self._session = None
                    self._state = SessionState.idle
                    self._persist()
                else:
                    # Keep everything for a retry.
                    self._state = SessionState.active
                    logger.warning("finish failed for session %s; kept active", snapshot.session_id)

        return FinishResult(
            workout_id=result.workout_id,
            workout=result.workout,
            aggregates_synced=result.aggregates_synced,
        )
