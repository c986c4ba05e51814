"""
Body weight log: dated entries per user, newest first.

The weekly average covers entries from the last 7 days and falls back to the
latest entry when none are that recent.
"""
from __future__ import annotations
import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from liftlog.db import commit_or_raise
from liftlog.errors import NotFoundError, ValidationError
from liftlog.models import BodyWeightLog
from liftlog.repositories.body_weight_repo import BodyWeightRepository
from liftlog.schemas.body_weight import BodyWeightRead, BodyWeightSummary

logger = logging.getLogger(__name__)

AVERAGE_WINDOW = timedelta(days=7)


def weekly_average(entries: list[BodyWeightLog], today: date) -> Optional[float]:
    """`entries` newest first."""
    if not entries:
        return None
    recent = [e.weight for e in entries if e.log_date >= today - AVERAGE_WINDOW]
    if not recent:
        return entries[0].weight
    return round(sum(recent) / len(recent), 2)


class BodyWeightService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = BodyWeightRepository(db)

    def _owned(self, user_id: str, log_id: int) -> BodyWeightLog:
        log = self.repo.get_for_user(user_id, log_id)
        if log is None:
            raise NotFoundError("Weight entry not found")
        return log

    def add(self, user_id: str, weight: float, log_date: date, notes: str | None = None) -> BodyWeightLog:
        log = self.repo.create(user_id=user_id, weight=weight, log_date=log_date, notes=notes)
        commit_or_raise(self.db, "save weight entry")
        logger.info("user %s logged %.1f on %s", user_id, weight, log_date)
        return log

    def update(self, user_id: str, log_id: int, **fields) -> BodyWeightLog:
        if any(fields.get(key, 0) is None for key in ("weight", "log_date")):
            raise ValidationError("weight and log_date cannot be cleared")
        log = self._owned(user_id, log_id)
        self.repo.update(log, **fields)
        commit_or_raise(self.db, "update weight entry")
        return log

    def delete(self, user_id: str, log_id: int) -> None:
        self.repo.delete(self._owned(user_id, log_id))
        commit_or_raise(self.db, "delete weight entry")

    def history(self, user_id: str, start: date | None = None, end: date | None = None) -> list[BodyWeightLog]:
        if start and end and start > end:
            raise ValidationError("start must not be after end")
        return self.repo.list_by_user(user_id, start=start, end=end)

    def latest(self, user_id: str) -> BodyWeightLog:
        log = self.repo.latest(user_id)
        if log is None:
            raise NotFoundError("No weight logged yet")
        return log

    def summary(self, user_id: str, today: date) -> BodyWeightSummary:
        entries = self.repo.list_by_user(user_id, end=today)
        return BodyWeightSummary(
            latest=BodyWeightRead.model_validate(entries[0]) if entries else None,
            weekly_average=weekly_average(entries, today),
            entries_last_7_days=sum(1 for e in entries if e.log_date >= today - AVERAGE_WINDOW),
        )
