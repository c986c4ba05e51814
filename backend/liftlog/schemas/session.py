from typing import Annotated
from datetime import datetime
from enum import Enum
import uuid
from pydantic import BaseModel, Field

NonNegFloat = Annotated[float, Field(ge=0, allow_inf_nan=False)]
FiniteFloat = Annotated[float, Field(allow_inf_nan=False)]
NonNegInt = Annotated[int, Field(ge=0)]
# Trimmed, up to 120 chars
NameStr = Annotated[str, Field(strip_whitespace=True, min_length=1, max_length=120)]

# Fields a client may change on a set; everything else is managed by the session.
SET_VALUE_FIELDS = ("weight", "reps", "duration_minutes", "distance", "calories")


def new_id() -> str:
    return str(uuid.uuid4())


class SessionState(str, Enum):
    idle = "idle"
    active = "active"
    finishing = "finishing"


class SetEntry(BaseModel):
    id: str = Field(default_factory=new_id)
    weight: NonNegFloat = 0
    reps: NonNegInt = 0
    duration_minutes: NonNegFloat = 0
    distance: NonNegFloat = 0
    calories: NonNegFloat = 0
    completed: bool = False


class SessionExercise(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    category: str | None = None
    sets: list[SetEntry] = Field(default_factory=list)


class ActiveSession(BaseModel):
    id: str = Field(default_factory=new_id)
    label: str
    started_at: datetime
    exercises: list[SessionExercise] = Field(default_factory=list)


class CompletedWorkout(BaseModel):
    """Immutable snapshot of a session at finish time (incomplete sets included)."""
    session_id: str
    label: str
    started_at: datetime
    ended_at: datetime
    duration_seconds: int
    total_volume: float
    total_duration_minutes: float
    total_distance: float
    total_calories: float
    exercises: list[SessionExercise]

    model_config = {"frozen": True}


# --- request / response bodies ---

class SessionStart(BaseModel):
    label: NameStr | None = None

class ExerciseAdd(BaseModel):
    name: NameStr
    category: Annotated[str, Field(max_length=40)] | None = None

class SetUpdate(BaseModel):
    weight: FiniteFloat | None = None
    reps: int | None = None
    duration_minutes: FiniteFloat | None = None
    distance: FiniteFloat | None = None
    calories: FiniteFloat | None = None

class SessionRead(BaseModel):
    state: SessionState
    session: ActiveSession | None = None
    total_volume: float = 0

class FinishResult(BaseModel):
    workout_id: int
    workout: CompletedWorkout
    aggregates_synced: bool
