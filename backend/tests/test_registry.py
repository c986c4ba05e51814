import threading

from liftlog.services.reconciler import FinishReconciler
from liftlog.services.registry import SessionRegistry
from liftlog.services.session_machine import WorkoutSessionService


def make_registry(session_factory, clock):
    return SessionRegistry(session_factory, FinishReconciler(session_factory), clock=clock)


def test_one_service_per_user(session_factory, clock):
    registry = make_registry(session_factory, clock)
    first = registry.get("u1")
    assert registry.get("u1") is first
    assert registry.get("u2") is not first
    registry.clear()
    assert registry.get("u1") is not first


def test_slow_user_does_not_block_others(session_factory, clock, monkeypatch):
    entered, release = threading.Event(), threading.Event()
    real_resume = WorkoutSessionService._resume

    def resume(self):
        if self.user_id == "slow":
            entered.set()
            release.wait(5)
        real_resume(self)

    monkeypatch.setattr(WorkoutSessionService, "_resume", resume)
    registry = make_registry(session_factory, clock)
    result = {}
    slow = threading.Thread(target=lambda: result.setdefault("slow", registry.get("slow")))
    slow.start()
    try:
        assert entered.wait(5)
        fast = registry.get("fast")
        assert fast.user_id == "fast"
        assert slow.is_alive()
    finally:
        release.set()
        slow.join(5)
    assert registry.get("slow") is result["slow"]


def test_catch_up_runs_once_per_user(session_factory, clock, monkeypatch):
    calls = []
    reconciler = FinishReconciler(session_factory)
    monkeypatch.setattr(reconciler, "sync_pending", lambda user_id, today: calls.append((user_id, today)) or [])
    registry = SessionRegistry(session_factory, reconciler, clock=clock)
    registry.get("u1")
    registry.get("u1")
    assert calls == [("u1", clock.now.date())]
