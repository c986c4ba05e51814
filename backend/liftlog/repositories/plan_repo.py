from __future__ import annotations
from typing import Optional

from sqlalchemy import select, update

from liftlog.models import TrainingPlan
from liftlog.repositories.base import BaseRepository

class PlanRepository(BaseRepository[TrainingPlan]):
    model = TrainingPlan

    def get_active(self, user_id: str) -> Optional[TrainingPlan]:
        stmt = (
            select(TrainingPlan)
            .where(TrainingPlan.user_id == user_id, TrainingPlan.is_active.is_(True))
            .order_by(TrainingPlan.created_at.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def deactivate_all(self, user_id: str) -> None:
        self.db.execute(
            update(TrainingPlan)
            .where(TrainingPlan.user_id == user_id, TrainingPlan.is_active.is_(True))
            .values(is_active=False)
        )

    def create(self, **fields) -> TrainingPlan:
        return self.add_and_refresh(TrainingPlan(**fields))
