from datetime import date, datetime, timezone
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from liftlog.db import get_db
from liftlog.deps.auth import get_current_user_id
from liftlog.schemas.body_weight import BodyWeightCreate, BodyWeightRead, BodyWeightSummary, BodyWeightUpdate
from liftlog.services.body_weight import BodyWeightService

router = APIRouter(prefix="/measurements/weight", tags=["measurements"])

def _today():
    return datetime.now(timezone.utc).date()

def get_body_weight_service(db: Session = Depends(get_db)) -> BodyWeightService:
    return BodyWeightService(db)

@router.post("", response_model=BodyWeightRead, status_code=status.HTTP_201_CREATED)
def log_weight(
    payload: BodyWeightCreate,
    weights: BodyWeightService = Depends(get_body_weight_service),
    user_id: str = Depends(get_current_user_id),
):
    return weights.add(user_id, payload.weight, payload.log_date or _today(), payload.notes)

@router.get("", response_model=list[BodyWeightRead])
def list_weights(
    start: date | None = Query(None),
    end: date | None = Query(None),
    weights: BodyWeightService = Depends(get_body_weight_service),
    user_id: str = Depends(get_current_user_id),
):
    return weights.history(user_id, start, end)

@router.get("/latest", response_model=BodyWeightRead)
def latest_weight(weights: BodyWeightService = Depends(get_body_weight_service), user_id: str = Depends(get_current_user_id)):
    return weights.latest(user_id)

@router.get("/summary", response_model=BodyWeightSummary)
def weight_summary(weights: BodyWeightService = Depends(get_body_weight_service), user_id: str = Depends(get_current_user_id)):
    return weights.summary(user_id, _today())

@router.patch("/{log_id}", response_model=BodyWeightRead)
def update_weight(
    log_id: int,
    payload: BodyWeightUpdate,
    weights: BodyWeightService = Depends(get_body_weight_service),
    user_id: str = Depends(get_current_user_id),
):
    return weights.update(user_id, log_id, **payload.model_dump(exclude_unset=True))

@router.delete("/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_weight(
    log_id: int,
    weights: BodyWeightService = Depends(get_body_weight_service),
    user_id: str = Depends(get_current_user_id),
):
    weights.delete(user_id, log_id)
