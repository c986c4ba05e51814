from __future__ import annotations
from typing import Optional

from liftlog.models import SessionCache
from liftlog.repositories.base import BaseRepository

class SessionCacheRepository(BaseRepository[SessionCache]):
    model = SessionCache

    def load(self, user_id: str) -> Optional[dict]:
        row = self.db.get(SessionCache, user_id)
        return row.payload if row else None

    def save(self, user_id: str, payload: dict) -> None:
        row = self.db.get(SessionCache, user_id)
        if row is None:
            self.db.add(SessionCache(user_id=user_id, payload=payload))
        else:
            row.payload = payload
        self.db.flush()

    def clear(self, user_id: str) -> None:
        row = self.db.get(SessionCache, user_id)
        if row is not None:
            self.db.delete(row)
            self.db.flush()
