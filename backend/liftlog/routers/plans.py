from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from liftlog.db import get_db
from liftlog.deps.auth import get_current_user_id
from liftlog.schemas.plan import GeneratedPlan, ProgressionSuggestion
from liftlog.schemas.profile import ProfileInput
from liftlog.services.plans import PlanService
from liftlog.settings import get_settings

router = APIRouter(prefix="/plans", tags=["plans"])

def get_plan_service(request: Request, db: Session = Depends(get_db)) -> PlanService:
    return PlanService(db, catalog=request.app.state.catalog, seed=get_settings().PLAN_SEED)

@router.post("", response_model=GeneratedPlan, status_code=status.HTTP_201_CREATED)
def create_plan(
    payload: ProfileInput,
    plans: PlanService = Depends(get_plan_service),
    user_id: str = Depends(get_current_user_id),
):
    return plans.create(user_id, payload)

@router.get("/current", response_model=GeneratedPlan)
def current_plan(plans: PlanService = Depends(get_plan_service), user_id: str = Depends(get_current_user_id)):
    return plans.current(user_id)

@router.post("/current/advance", response_model=GeneratedPlan)
def advance_week(plans: PlanService = Depends(get_plan_service), user_id: str = Depends(get_current_user_id)):
    return plans.advance_week(user_id)

@router.post("/current/restart", response_model=GeneratedPlan)
def restart_plan(plans: PlanService = Depends(get_plan_service), user_id: str = Depends(get_current_user_id)):
    return plans.restart(user_id)

@router.delete("/current", status_code=status.HTTP_204_NO_CONTENT)
def cancel_plan(plans: PlanService = Depends(get_plan_service), user_id: str = Depends(get_current_user_id)):
    plans.cancel(user_id)

@router.get("/current/progression", response_model=list[ProgressionSuggestion])
def progression(plans: PlanService = Depends(get_plan_service), user_id: str = Depends(get_current_user_id)):
    return plans.progression(user_id)
