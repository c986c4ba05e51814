from __future__ import annotations
from typing import Optional

from sqlalchemy import select, delete

from liftlog.models import GamificationRecord, GamificationCommit, MonthlyGoal, Workout
from liftlog.repositories.base import BaseRepository

class GamificationRepository(BaseRepository[GamificationRecord]):
    model = GamificationRecord

    def get(self, user_id: str) -> Optional[GamificationRecord]:
        return self.db.get(GamificationRecord, user_id)

    def get_or_create(self, user_id: str) -> GamificationRecord:
        record = self.get(user_id)
        if record is None:
            record = self.add_and_refresh(GamificationRecord(
                user_id=user_id, total_workouts=0, current_streak=0, longest_streak=0, total_points=0,
            ))
        return record

    # commit markers
    def has_commit(self, user_id: str, session_id: str) -> bool:
        stmt = select(GamificationCommit.id).where(
            GamificationCommit.user_id == user_id, GamificationCommit.session_id == session_id
        )
        return self.db.execute(stmt).first() is not None

    def add_commit(self, user_id: str, session_id: str) -> GamificationCommit:
        return self.add_and_refresh(GamificationCommit(user_id=user_id, session_id=session_id))

    def remove_commit(self, user_id: str, session_id: str) -> bool:
        result = self.db.execute(delete(GamificationCommit).where(
            GamificationCommit.user_id == user_id, GamificationCommit.session_id == session_id
        ))
        return result.rowcount > 0

    def uncommitted_workouts(self, user_id: str) -> list[Workout]:
        """Workouts stored for `user_id` whose finish has not been counted yet."""
        committed = select(GamificationCommit.session_id).where(GamificationCommit.user_id == user_id)
        stmt = (
            select(Workout)
            .where(Workout.user_id == user_id, Workout.session_id.not_in(committed))
            .order_by(Workout.ended_at.asc(), Workout.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())


class MonthlyGoalRepository(BaseRepository[MonthlyGoal]):
    model = MonthlyGoal

    def get(self, user_id: str, month_year: str) -> Optional[MonthlyGoal]:
        stmt = select(MonthlyGoal).where(
            MonthlyGoal.user_id == user_id, MonthlyGoal.month_year == month_year
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def upsert(self, user_id: str, month_year: str, *, goal_workouts: int, completed_workouts: int) -> MonthlyGoal:
        goal = self.get(user_id, month_year)
        if goal is None:
            return self.add_and_refresh(MonthlyGoal(
                user_id=user_id, month_year=month_year,
                goal_workouts=goal_workouts, completed_workouts=completed_workouts,
            ))
        return self.update_fields(goal, goal_workouts=goal_workouts, completed_workouts=completed_workouts)
