# lifting/repositories/base.py
from __future__ import annotations
from typing import Generic, Sequence, TypeVar

from sqlalchemy.orm import Session

T = TypeVar("T")  # SQLAlchemy model type

class BaseRepository(Generic[T]):
    """Lightweight base for repositories using SQLAlchemy 2.0 style."""
    model: type

    def __init__(self, db: Session):
        self.db = db

    def get(self, entity_id: int) -> T | None:
        return self.db.get(self.model, entity_id)

    def add_and_refresh(self, entity: T) -> T:
        self.db.add(entity)
        self.db.flush()
        self.db.refresh(entity)
        return entity

    def add_all_batched(self, entities: Sequence[T], *, batch_size: int) -> int:
        """Flush in chunks; nothing is committed here."""
        written = 0
        for start in range(0, len(entities), batch_size):
            chunk = entities[start:start + batch_size]
            self.db.add_all(chunk)
            self.db.flush()
            written += len(chunk)
        return written
