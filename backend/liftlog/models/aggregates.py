from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, DateTime, UniqueConstraint, func
from liftlog.db import Base

class GamificationRecord(Base):
    __tablename__ = "gamification"
    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    total_workouts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

class GamificationCommit(Base):
    """One row per session whose finish has been counted in GamificationRecord."""
    __tablename__ = "gamification_commits"
    __table_args__ = (UniqueConstraint("user_id", "session_id", name="uq_gamification_commit"),)
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    session_id: Mapped[str] = mapped_column(String(36), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

class MonthlyGoal(Base):
    __tablename__ = "monthly_goals"
    __table_args__ = (UniqueConstraint("user_id", "month_year", name="uq_monthly_goal_month"),)
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    month_year: Mapped[str] = mapped_column(String(7), nullable=False)  # "2024-01"
    goal_workouts: Mapped[int] = mapped_column(Integer, nullable=False)
    completed_workouts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
