from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from liftlog.db import commit_or_raise, get_db
from liftlog.deps.auth import get_current_user_id
from liftlog.deps.services import get_reconciler
from liftlog.errors import NotFoundError
from liftlog.schemas.stats import (
    GamificationRead,
    MonthlyGoalRead,
    MonthlyGoalSet,
    SyncResult,
    WeeklyComparison,
)
from liftlog.services.aggregates import AggregateService, month_key
from liftlog.services.reconciler import FinishReconciler
from liftlog.services.stats import weekly_comparison

router = APIRouter(prefix="/stats", tags=["stats"])

def _today():
    return datetime.now(timezone.utc).date()

@router.get("/gamification", response_model=GamificationRead)
def get_gamification(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    record = AggregateService(db).get_gamification(user_id)
    commit_or_raise(db, "load gamification")
    return record

@router.post("/gamification/reset", response_model=GamificationRead)
def reset_gamification(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    record = AggregateService(db).reset_gamification(user_id)
    commit_or_raise(db, "reset gamification")
    return record

@router.get("/monthly-goal", response_model=MonthlyGoalRead)
def get_monthly_goal(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    # Reading is an opportunity to heal a drifted count.
    goal = AggregateService(db).resync_month(user_id, month_key(_today()))
    if goal is None:
        raise NotFoundError("No goal set for this month")
    commit_or_raise(db, "sync monthly goal")
    return goal

@router.put("/monthly-goal", response_model=MonthlyGoalRead)
def set_monthly_goal(
    payload: MonthlyGoalSet,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    goal = AggregateService(db).set_goal(user_id, payload.goal_workouts, _today())
    commit_or_raise(db, "save monthly goal")
    return goal

@router.post("/sync", response_model=SyncResult)
def sync_aggregates(
    db: Session = Depends(get_db),
    reconciler: FinishReconciler = Depends(get_reconciler),
    user_id: str = Depends(get_current_user_id),
):
    today = _today()
    applied = reconciler.sync_pending(user_id, today)
    goal = AggregateService(db).goals.get(user_id, month_key(today))
    return SyncResult(
        applied_sessions=applied,
        monthly_goal=MonthlyGoalRead.model_validate(goal) if goal else None,
    )

@router.get("/weekly", response_model=WeeklyComparison)
def get_weekly_comparison(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return weekly_comparison(db, user_id, _today())
