from datetime import date, datetime
from pydantic import BaseModel

class WorkoutSetRead(BaseModel):
    id: int
    set_number: int
    weight: float
    reps: int
    duration_minutes: float
    distance: float
    calories: float

    model_config = {"from_attributes": True}

class WorkoutExerciseRead(BaseModel):
    id: int
    position: int
    name: str
    category: str | None = None
    sets: list[WorkoutSetRead] = []

    model_config = {"from_attributes": True}

class WorkoutSummary(BaseModel):
    id: int
    session_id: str
    name: str
    started_at: datetime
    ended_at: datetime
    workout_date: date
    duration_seconds: int
    total_volume: float

    model_config = {"from_attributes": True}

class WorkoutRead(WorkoutSummary):
    total_duration_minutes: float
    total_distance: float
    total_calories: float
    exercises: list[WorkoutExerciseRead] = []
