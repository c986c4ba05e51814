from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from liftlog.db import get_db
from liftlog.deps.auth import get_current_user_id
from liftlog.deps.services import get_reconciler
from liftlog.repositories.workout_repo import WorkoutRepository
from liftlog.schemas.workout import WorkoutRead, WorkoutSummary
from liftlog.services.reconciler import FinishReconciler

router = APIRouter(prefix="/workouts", tags=["workouts"])

@router.get("", response_model=list[WorkoutSummary])
def list_my_workouts(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    page = WorkoutRepository(db).list_by_user(user_id, limit=limit, offset=offset)
    return page.items

@router.get("/{workout_id}", response_model=WorkoutRead)
def get_workout(workout_id: int, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    workout = WorkoutRepository(db).get_for_user(user_id, workout_id)
    if not workout:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Workout not found")
    return workout

@router.delete("/{workout_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_workout(
    workout_id: int,
    reconciler: FinishReconciler = Depends(get_reconciler),
    user_id: str = Depends(get_current_user_id),
):
    reconciler.delete_workout(user_id, workout_id)
