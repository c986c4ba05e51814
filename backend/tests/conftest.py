"""
Point the app at an in-memory SQLite database before anything imports
liftlog.db, and give every test fresh tables.
"""
import os

os.environ["DB_URL"] = "sqlite+pysqlite:///:memory:"
os.environ.setdefault("SECRET_KEY", "test-secret")

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import sessionmaker

from liftlog import models  # noqa: F401  # register tables
from liftlog.db import Base, engine, make_engine
from liftlog.security import create_access_token


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def fresh_app_db():
    from liftlog.main import app
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    app.state.sessions.clear()
    yield


@pytest.fixture
def session_factory():
    """Private in-memory database for service-level tests."""
    eng = make_engine("sqlite://")
    Base.metadata.create_all(eng)
    factory = sessionmaker(bind=eng, autocommit=False, autoflush=False)
    yield factory
    eng.dispose()


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 14, 18, 0, tzinfo=timezone.utc))


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}
