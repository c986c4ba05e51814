from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field, model_validator

from liftlog.schemas.profile import ProfileInput

class PlannedExercise(BaseModel):
    name: str
    category: str
    sets: Annotated[int, Field(ge=1)]
    reps: str | None = None
    duration: Annotated[float, Field(gt=0)] | None = None   # minutes
    rest: Annotated[int, Field(ge=0)]                       # seconds
    notes: str | None = None

    @model_validator(mode="after")
    def reps_xor_duration(self):
        if (self.reps is None) == (self.duration is None):
            raise ValueError("a planned exercise has either reps or a duration")
        return self

class WorkoutDay(BaseModel):
    label: str
    focus: str
    duration: int   # minutes
    exercises: list[PlannedExercise] = Field(default_factory=list)   # empty when nothing is eligible

class ProgressionRule(BaseModel):
    weight_increment: float
    rep_increment: int
    trigger: str

class GeneratedPlan(BaseModel):
    id: str
    owner_id: str
    name: str
    description: str
    days: Annotated[list[WorkoutDay], Field(min_length=1)]
    current_week: Annotated[int, Field(ge=1)] = 1
    started_at: datetime
    progression: ProgressionRule
    profile: ProfileInput

class ProgressionSuggestion(BaseModel):
    exercise_name: str
    current_weight: float | None = None
    current_reps: int | None = None
    suggestion: str
    reason: str
