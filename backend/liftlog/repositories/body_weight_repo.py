from __future__ import annotations
from datetime import date
from typing import Optional

from sqlalchemy import select

from liftlog.models import BodyWeightLog
from liftlog.repositories.base import BaseRepository

class BodyWeightRepository(BaseRepository[BodyWeightLog]):
    model = BodyWeightLog

    def _newest_first(self, user_id: str):
        return (
            select(BodyWeightLog)
            .where(BodyWeightLog.user_id == user_id)
            .order_by(BodyWeightLog.log_date.desc(), BodyWeightLog.id.desc())
        )

    def get_for_user(self, user_id: str, log_id: int) -> Optional[BodyWeightLog]:
        stmt = select(BodyWeightLog).where(BodyWeightLog.id == log_id, BodyWeightLog.user_id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_by_user(
        self, user_id: str, *, start: date | None = None, end: date | None = None
    ) -> list[BodyWeightLog]:
        stmt = self._newest_first(user_id)
        if start is not None:
            stmt = stmt.where(BodyWeightLog.log_date >= start)
        if end is not None:
            stmt = stmt.where(BodyWeightLog.log_date <= end)
        return list(self.db.execute(stmt).scalars().all())

    def latest(self, user_id: str) -> Optional[BodyWeightLog]:
        return self.db.execute(self._newest_first(user_id).limit(1)).scalar_one_or_none()

    # WRITES (flush only)
    def create(self, **fields) -> BodyWeightLog:
        return self.add_and_refresh(BodyWeightLog(**fields))

    def update(self, log: BodyWeightLog, **fields) -> BodyWeightLog:
        return self.update_fields(log, **fields)

    def delete(self, log: BodyWeightLog) -> None:
        self.db.delete(log)
        self.db.flush()
