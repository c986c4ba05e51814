from __future__ import annotations
import logging
import threading
from datetime import datetime
from typing import Callable

from liftlog.errors import LiftLogError
from liftlog.services.reconciler import FinishReconciler
from liftlog.services.session_machine import WorkoutSessionService, utcnow

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    One WorkoutSessionService per user, created on first use.

    Creating a service resumes any cached session and retries aggregate
    updates that an earlier finish could not apply.
    """

    def __init__(
        self,
        session_factory,
        reconciler: FinishReconciler,
        *,
        clock: Callable[[], datetime] = utcnow,
        default_label: str = "Custom Workout",
    ):
        self.session_factory = session_factory
        self.reconciler = reconciler
        self.clock = clock
        self.default_label = default_label
        self._services: dict[str, WorkoutSessionService] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> WorkoutSessionService:
        with self._lock:
            service = self._services.get(user_id)
        if service is not None:
            return service

        # Store I/O happens outside the lock; the first instance inserted wins.
        created = WorkoutSessionService(
            user_id, self.session_factory, self.reconciler,
            clock=self.clock, default_label=self.default_label,
        )
        with self._lock:
            service = self._services.setdefault(user_id, created)
        if service is created:
            self._catch_up(user_id)
        return service

    def _catch_up(self, user_id: str) -> None:
        try:
            self.reconciler.sync_pending(user_id, self.clock().date())
        except LiftLogError as e:
            logger.warning("deferred aggregate sync for user %s failed again: %s", user_id, e)

    def clear(self) -> None:
        with self._lock:
            self._services.clear()
