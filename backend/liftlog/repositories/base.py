# liftlog/repositories/base.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy.orm import Session
from sqlalchemy import select, func

T = TypeVar("T")  # SQLAlchemy model type

@dataclass(slots=True)
class Page(Generic[T]):
    items: list[T]
    total: int
    limit: int
    offset: int

class BaseRepository(Generic[T]):
    """
    Lightweight base for repositories using SQLAlchemy 2.0 style.

    Writes only flush; the calling service owns the transaction and decides
    when to commit or roll back.
    """
    model: type

    def __init__(self, db: Session):
        self.db = db

    def page_from_stmt(self, stmt, *, limit: int = 50, offset: int = 0) -> Page[T]:
        items = list(self.db.execute(stmt.limit(limit).offset(offset)).scalars().all())
        total = self.db.execute(
            select(func.count()).select_from(stmt.order_by(None).subquery())
        ).scalar_one()
        return Page(items=items, total=total, limit=limit, offset=offset)

    def add_and_refresh(self, entity: T) -> T:
        self.db.add(entity)
        self.db.flush()
        self.db.refresh(entity)
        return entity

    def update_fields(self, entity: T, **fields) -> T:
        for key, value in fields.items():
            if not hasattr(entity, key):
                raise AttributeError(f"{type(entity).__name__} has no field '{key}'")
            setattr(entity, key, value)
        self.db.flush()
        return entity
