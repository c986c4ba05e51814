from enum import Enum
from pydantic import BaseModel, Field, field_validator

class FitnessGoal(str, Enum):
    build_muscle = "build_muscle"
    lose_fat = "lose_fat"
    recomp = "recomp"
    get_stronger = "get_stronger"
    rehab = "rehab"
    maintain = "maintain"

class SecondaryObjective(str, Enum):
    increase_strength = "increase_strength"
    improve_endurance = "improve_endurance"
    improve_mobility = "improve_mobility"
    look_leaner = "look_leaner"
    athletic_performance = "athletic_performance"
    improve_consistency = "improve_consistency"

class ExperienceLevel(str, Enum):
    beginner = "beginner"          # 0-6 months
    intermediate = "intermediate"  # 6-24 months
    advanced = "advanced"          # 2+ years

class FrequencyBand(str, Enum):
    low = "2-3"
    mid = "3-4"
    high = "5+"

class SessionLength(int, Enum):
    short = 30
    medium = 45
    long = 60

class Equipment(str, Enum):
    dumbbells = "dumbbells"
    barbells = "barbells"
    machines = "machines"
    bands = "bands"
    bodyweight = "bodyweight"
    cardio_machines = "cardio_machines"

class Constraint(str, Enum):
    knee_issues = "knee_issues"
    back_issues = "back_issues"
    shoulder_issues = "shoulder_issues"
    cardio_first = "cardio_first"
    home_workouts = "home_workouts"


class ProfileInput(BaseModel):
    goal: FitnessGoal
    secondary_objectives: set[SecondaryObjective] = Field(default_factory=set)
    experience: ExperienceLevel
    frequency: FrequencyBand
    session_length: SessionLength = SessionLength.medium
    equipment: set[Equipment]
    constraints: set[Constraint] = Field(default_factory=set)

    @field_validator("secondary_objectives")
    @classmethod
    def at_most_two_objectives(cls, v: set[SecondaryObjective]) -> set[SecondaryObjective]:
        if len(v) > 2:
            raise ValueError("choose at most 2 secondary objectives")
        return v

    @field_validator("equipment")
    @classmethod
    def equipment_non_empty(cls, v: set[Equipment]) -> set[Equipment]:
        if not v:
            raise ValueError("at least one equipment option is required")
        return v

    def equipment_values(self) -> frozenset[str]:
        return frozenset(e.value for e in self.equipment)

    def constraint_values(self) -> frozenset[str]:
        return frozenset(c.value for c in self.constraints)
