"""
Gamification counters and monthly goals.

Gamification is incremented once per finished session (guarded by a commit
marker) and decremented symmetrically on delete. Monthly goal progress is
never incremented: it is always recounted from stored workouts.

All methods work inside the caller's transaction and only flush.
"""
from __future__ import annotations
import calendar
import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from liftlog.models import GamificationRecord, MonthlyGoal
from liftlog.repositories.aggregate_repo import GamificationRepository, MonthlyGoalRepository
from liftlog.repositories.workout_repo import WorkoutRepository
from liftlog.settings import get_settings

logger = logging.getLogger(__name__)


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def month_bounds(month_year: str) -> tuple[date, date]:
    """First and last calendar day of "YYYY-MM"."""
    year, month = (int(part) for part in month_year.split("-"))
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


class AggregateService:
    def __init__(self, db: Session, *, points_per_workout: int | None = None):
        self.db = db
        self.gamification = GamificationRepository(db)
        self.goals = MonthlyGoalRepository(db)
        self.workouts = WorkoutRepository(db)
        self.points_per_workout = (
            get_settings().POINTS_PER_WORKOUT if points_per_workout is None else points_per_workout
        )

    # --- gamification ---

    def get_gamification(self, user_id: str) -> GamificationRecord:
        return self.gamification.get_or_create(user_id)

    def apply_finish(self, user_id: str, session_id: str) -> bool:
        """Count one finished session. Returns False if it was already counted."""
        if self.gamification.has_commit(user_id, session_id):
            return False
        record = self.gamification.get_or_create(user_id)
        self.gamification.add_commit(user_id, session_id)
        record.total_workouts += 1
        record.current_streak += 1
        record.longest_streak = max(record.longest_streak, record.current_streak)
        record.total_points += self.points_per_workout
        self.db.flush()
        return True

    def apply_delete(self, user_id: str, session_id: str) -> bool:
        """Undo `apply_finish` for a deleted workout. Uncounted sessions are left alone."""
        if not self.gamification.remove_commit(user_id, session_id):
            return False
        record = self.gamification.get_or_create(user_id)
        record.total_workouts = max(0, record.total_workouts - 1)
        record.total_points = max(0, record.total_points - self.points_per_workout)
        record.current_streak = max(0, record.current_streak - 1)
        if record.total_workouts == 0:
            record.current_streak = 0
        self.db.flush()
        return True

    def reset_gamification(self, user_id: str) -> GamificationRecord:
        # Commit markers stay so old sessions are never counted again.
        record = self.gamification.get_or_create(user_id)
        record.total_workouts = 0
        record.current_streak = 0
        record.longest_streak = 0
        record.total_points = 0
        self.db.flush()
        return record

    # --- monthly goals ---

    def count_month(self, user_id: str, month_year: str) -> int:
        first, last = month_bounds(month_year)
        return self.workouts.count_in_range(user_id, first, last)

    def resync_month(self, user_id: str, month_year: str) -> Optional[MonthlyGoal]:
        """Recount the month's workouts into its goal, if the user set one."""
        goal = self.goals.get(user_id, month_year)
        if goal is None:
            return None
        actual = self.count_month(user_id, month_year)
        if actual != goal.completed_workouts:
            logger.info("monthly goal %s/%s: stored %d, actual %d",
                        user_id, month_year, goal.completed_workouts, actual)
            goal.completed_workouts = actual
            self.db.flush()
        return goal

    def set_goal(self, user_id: str, goal_workouts: int, today: date) -> MonthlyGoal:
        key = month_key(today)
        return self.goals.upsert(
            user_id, key,
            goal_workouts=goal_workouts,
            completed_workouts=self.count_month(user_id, key),
        )
