from typing import Annotated, Literal
from pydantic import BaseModel, Field

class GamificationRead(BaseModel):
    total_workouts: int
    current_streak: int
    longest_streak: int
    total_points: int

    model_config = {"from_attributes": True}

class MonthlyGoalSet(BaseModel):
    goal_workouts: Annotated[int, Field(ge=1, le=100)]

class MonthlyGoalRead(BaseModel):
    month_year: str
    goal_workouts: int
    completed_workouts: int

    model_config = {"from_attributes": True}

class WeekStats(BaseModel):
    total_volume: float
    workout_count: int
    cardio_minutes: float

class WeekChanges(BaseModel):
    volume_delta: float
    volume_change_type: Literal["increase", "decrease", "maintained"]
    workout_frequency_delta: int
    cardio_delta: float

class WeeklyComparison(BaseModel):
    current_week: WeekStats
    previous_week: WeekStats
    changes: WeekChanges

class SyncResult(BaseModel):
    applied_sessions: list[str]
    monthly_goal: MonthlyGoalRead | None = None
