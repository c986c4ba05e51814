from typing import Literal
from fastapi import APIRouter, Depends, Query
from liftlog.deps.services import get_catalog
from liftlog.schemas.catalog import ExerciseEntryRead
from liftlog.schemas.profile import Constraint, Equipment
from liftlog.services.catalog import ExerciseCatalog

router = APIRouter(prefix="/catalog", tags=["catalog"])

@router.get("", response_model=list[ExerciseEntryRead])
def lookup_exercises(
    category: Literal["push", "pull", "legs", "core", "cardio"],
    equipment: list[Equipment] = Query(...),
    avoid: list[Constraint] = Query(default=[]),
    catalog: ExerciseCatalog = Depends(get_catalog),
):
    entries = catalog.lookup(category, [e.value for e in equipment], [a.value for a in avoid])
    return [ExerciseEntryRead.from_entry(e) for e in entries]
