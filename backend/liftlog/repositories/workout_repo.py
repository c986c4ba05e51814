from __future__ import annotations
from datetime import date
from typing import Iterable, Optional

from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from liftlog.models import Workout, WorkoutExercise, WorkoutSet
from liftlog.repositories.base import BaseRepository, Page

class WorkoutRepository(BaseRepository[Workout]):
    model = Workout

    # READS
    def get_for_user(self, user_id: str, workout_id: int) -> Optional[Workout]:
        stmt = (
            select(Workout)
            .where(Workout.id == workout_id, Workout.user_id == user_id)
            .options(selectinload(Workout.exercises).selectinload(WorkoutExercise.sets))
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_session(self, session_id: str) -> Optional[Workout]:
        stmt = (
            select(Workout)
            .where(Workout.session_id == session_id)
            .options(selectinload(Workout.exercises).selectinload(WorkoutExercise.sets))
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_by_user(self, user_id: str, *, limit: int = 50, offset: int = 0) -> Page[Workout]:
        stmt = select(Workout).where(Workout.user_id == user_id)\
                              .order_by(Workout.ended_at.desc(), Workout.id.desc())
        return self.page_from_stmt(stmt, limit=limit, offset=offset)

    def query_workouts(
        self, user_id: str, *, start: date | None = None, end: date | None = None
    ) -> list[Workout]:
        """Workouts whose date lies in [start, end], newest first, with exercises and sets loaded."""
        stmt = (
            select(Workout)
            .where(Workout.user_id == user_id)
            .options(selectinload(Workout.exercises).selectinload(WorkoutExercise.sets))
            .order_by(Workout.ended_at.desc(), Workout.id.desc())
        )
        if start is not None:
            stmt = stmt.where(Workout.workout_date >= start)
        if end is not None:
            stmt = stmt.where(Workout.workout_date <= end)
        return list(self.db.execute(stmt).scalars().all())

    def count_in_range(self, user_id: str, start: date, end: date) -> int:
        stmt = select(func.count(Workout.id)).where(
            Workout.user_id == user_id,
            Workout.workout_date >= start,
            Workout.workout_date <= end,
        )
        return self.db.execute(stmt).scalar_one()

    def recent_with_exercise(self, user_id: str, exercise_name: str, *, limit: int = 2) -> list[Workout]:
        stmt = (
            select(Workout)
            .join(WorkoutExercise, WorkoutExercise.workout_id == Workout.id)
            .where(Workout.user_id == user_id, func.lower(WorkoutExercise.name) == exercise_name.lower())
            .options(selectinload(Workout.exercises).selectinload(WorkoutExercise.sets))
            .order_by(Workout.ended_at.desc(), Workout.id.desc())
            .distinct()
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    # WRITES (flush only)
    def create_workout(self, **fields) -> Workout:
        return self.add_and_refresh(Workout(**fields))

    def create_exercise(self, workout_id: int, **fields) -> WorkoutExercise:
        return self.add_and_refresh(WorkoutExercise(workout_id=workout_id, **fields))

    def create_sets(self, exercise_id: int, rows: Iterable[dict]) -> list[WorkoutSet]:
        sets = [WorkoutSet(exercise_id=exercise_id, **row) for row in rows]
        self.db.add_all(sets)
        self.db.flush()
        return sets

    def update_workout(self, workout_id: int, **fields) -> Optional[Workout]:
        w = self.db.get(Workout, workout_id)
        return self.update_fields(w, **fields) if w else None

    def update_exercise(self, exercise_id: int, **fields) -> Optional[WorkoutExercise]:
        ex = self.db.get(WorkoutExercise, exercise_id)
        return self.update_fields(ex, **fields) if ex else None

    def update_set(self, set_id: int, **fields) -> Optional[WorkoutSet]:
        s = self.db.get(WorkoutSet, set_id)
        return self.update_fields(s, **fields) if s else None

    def delete_workout(self, workout: Workout) -> None:
        # ORM cascade removes exercises and sets
        self.db.delete(workout)
        self.db.flush()
