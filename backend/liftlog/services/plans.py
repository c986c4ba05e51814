from __future__ import annotations
import logging
import random
from datetime import datetime, timezone
from typing import Any, Mapping

from sqlalchemy.orm import Session

from liftlog.db import commit_or_raise
from liftlog.errors import NotFoundError
from liftlog.models import TrainingPlan
from liftlog.repositories.plan_repo import PlanRepository
from liftlog.repositories.workout_repo import WorkoutRepository
from liftlog.schemas.plan import GeneratedPlan, ProgressionSuggestion
from liftlog.schemas.profile import ProfileInput
from liftlog.services import generator, progression as progression_rules
from liftlog.services.catalog import CatalogAccessor, default_catalog

logger = logging.getLogger(__name__)


def plan_from_row(row: TrainingPlan) -> GeneratedPlan:
    data = row.plan_data
    return GeneratedPlan(
        id=row.id,
        owner_id=row.user_id,
        name=row.name,
        description=row.description or "",
        days=data["days"],
        current_week=row.current_week,
        started_at=row.started_at,
        progression=data["progression"],
        profile=data["profile"],
    )


class PlanService:
    """Stores generated plans; a user has at most one active plan."""

    def __init__(self, db: Session, *, catalog: CatalogAccessor = default_catalog, seed: int | None = None):
        self.db = db
        self.repo = PlanRepository(db)
        self.catalog = catalog
        self.seed = seed

    def _active_row(self, user_id: str) -> TrainingPlan:
        row = self.repo.get_active(user_id)
        if row is None:
            raise NotFoundError("No active plan")
        return row

    def create(
        self,
        user_id: str,
        profile: ProfileInput | Mapping[str, Any],
        *,
        rng: random.Random | None = None,
    ) -> GeneratedPlan:
        if rng is None and self.seed is not None:
            rng = random.Random(self.seed)
        plan = generator.generate(profile, user_id, catalog=self.catalog, rng=rng)
        self.repo.deactivate_all(user_id)
        self.repo.create(
            id=plan.id,
            user_id=user_id,
            name=plan.name,
            description=plan.description,
            plan_data=plan.model_dump(mode="json", include={"days", "progression", "profile"}),
            current_week=plan.current_week,
            started_at=plan.started_at,
            is_active=True,
        )
        commit_or_raise(self.db, "save plan")
        logger.info("created plan %s (%d days) for user %s", plan.id, len(plan.days), user_id)
        return plan

    def current(self, user_id: str) -> GeneratedPlan:
        return plan_from_row(self._active_row(user_id))

    def advance_week(self, user_id: str) -> GeneratedPlan:
        row = self._active_row(user_id)
        row.current_week += 1
        commit_or_raise(self.db, "advance plan week")
        return plan_from_row(row)

    def restart(self, user_id: str, *, now: datetime | None = None) -> GeneratedPlan:
        row = self._active_row(user_id)
        row.current_week = 1
        row.started_at = now or datetime.now(timezone.utc)
        commit_or_raise(self.db, "restart plan")
        return plan_from_row(row)

    def cancel(self, user_id: str) -> None:
        row = self._active_row(user_id)
        row.is_active = False
        commit_or_raise(self.db, "cancel plan")
        logger.info("cancelled plan %s for user %s", row.id, user_id)

    def progression(self, user_id: str) -> list[ProgressionSuggestion]:
        plan = self.current(user_id)
        workouts = WorkoutRepository(self.db)
        return progression_rules.suggest(
            plan, lambda name: workouts.recent_with_exercise(user_id, name, limit=2)
        )
