from fastapi import APIRouter, Depends, status
from liftlog.deps.services import get_session_service
from liftlog.schemas.session import (
    ExerciseAdd,
    FinishResult,
    SessionExercise,
    SessionRead,
    SessionStart,
    SetEntry,
    SetUpdate,
)
from liftlog.services.session_machine import WorkoutSessionService

router = APIRouter(prefix="/session", tags=["session"])

def _read(svc: WorkoutSessionService) -> SessionRead:
    return SessionRead(state=svc.state, session=svc.session, total_volume=svc.total_volume())

@router.get("", response_model=SessionRead)
def get_session(svc: WorkoutSessionService = Depends(get_session_service)):
    return _read(svc)

@router.post("", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
def start_session(payload: SessionStart, svc: WorkoutSessionService = Depends(get_session_service)):
    svc.start(payload.label)
    return _read(svc)

@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def cancel_session(svc: WorkoutSessionService = Depends(get_session_service)):
    svc.cancel()

@router.post("/exercises", response_model=SessionExercise, status_code=status.HTTP_201_CREATED)
def add_exercise(payload: ExerciseAdd, svc: WorkoutSessionService = Depends(get_session_service)):
    return svc.add_exercise(payload.name, payload.category)

@router.delete("/exercises/{exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_exercise(exercise_id: str, svc: WorkoutSessionService = Depends(get_session_service)):
    svc.remove_exercise(exercise_id)

@router.post("/exercises/{exercise_id}/sets", response_model=SetEntry, status_code=status.HTTP_201_CREATED)
def add_set(exercise_id: str, svc: WorkoutSessionService = Depends(get_session_service)):
    return svc.add_set(exercise_id)

@router.patch("/exercises/{exercise_id}/sets/{set_id}", response_model=SetEntry)
def update_set(
    exercise_id: str,
    set_id: str,
    payload: SetUpdate,
    svc: WorkoutSessionService = Depends(get_session_service),
):
    return svc.update_set(exercise_id, set_id, **payload.model_dump(exclude_unset=True))

@router.post("/exercises/{exercise_id}/sets/{set_id}/toggle", response_model=SetEntry)
def toggle_set(exercise_id: str, set_id: str, svc: WorkoutSessionService = Depends(get_session_service)):
    return svc.toggle_set(exercise_id, set_id)

@router.delete("/exercises/{exercise_id}/sets/{set_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_set(exercise_id: str, set_id: str, svc: WorkoutSessionService = Depends(get_session_service)):
    svc.remove_set(exercise_id, set_id)

@router.post("/finish", response_model=FinishResult)
async def finish_session(svc: WorkoutSessionService = Depends(get_session_service)):
    return await svc.finish()
