from typing import Annotated
from datetime import date
from pydantic import BaseModel, Field

# Unit-agnostic; whatever the user logs in (kg or lbs).
Weight = Annotated[float, Field(gt=0, le=1500, allow_inf_nan=False)]
Notes = Annotated[str, Field(strip_whitespace=True, max_length=255)]

class BodyWeightCreate(BaseModel):
    weight: Weight
    log_date: date | None = None   # today when omitted
    notes: Notes | None = None

class BodyWeightUpdate(BaseModel):
    weight: Weight | None = None
    log_date: date | None = None
    notes: Notes | None = None

class BodyWeightRead(BaseModel):
    id: int
    weight: float
    log_date: date
    notes: str | None = None

    model_config = {"from_attributes": True}

class BodyWeightSummary(BaseModel):
    latest: BodyWeightRead | None = None
    weekly_average: float | None = None
    entries_last_7_days: int = 0
