# liftlog/deps/services.py
from fastapi import Depends, Request

from liftlog.deps.auth import get_current_user_id
from liftlog.services.catalog import ExerciseCatalog
from liftlog.services.reconciler import FinishReconciler
from liftlog.services.registry import SessionRegistry
from liftlog.services.session_machine import WorkoutSessionService

def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions

def get_reconciler(request: Request) -> FinishReconciler:
    return request.app.state.reconciler

def get_catalog(request: Request) -> ExerciseCatalog:
    return request.app.state.catalog

def get_session_service(
    user_id: str = Depends(get_current_user_id),
    registry: SessionRegistry = Depends(get_registry),
) -> WorkoutSessionService:
    return registry.get(user_id)
