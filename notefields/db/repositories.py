"""Repository classes for CRUD operations on ORM models."""

from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from . import models


class NoteRepo:
    """CRUD operations for :class:`models.Note`."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, id: str, title: str, file_path: str) -> models.Note:
        note = models.Note(id=id, title=title, file_path=file_path)
        self.session.add(note)
        self.session.flush()
        return note

    def upsert(self, id: str, title: str, file_path: str) -> models.Note:
        note = self.get(id)
        if note is None:
            return self.create(id=id, title=title, file_path=file_path)
        return self.update(note, title=title, file_path=file_path)

    def get(self, note_id: str) -> Optional[models.Note]:
        return self.session.get(models.Note, note_id)

    def list(self) -> List[models.Note]:
        res = self.session.execute(select(models.Note).order_by(models.Note.id))
        return list(res.scalars().all())

    def list_ids(self) -> List[str]:
        res = self.session.execute(select(models.Note.id).order_by(models.Note.id))
        return list(res.scalars().all())

    def delete(self, note: models.Note) -> None:
        self.session.delete(note)
        self.session.flush()

    def delete_many(self, note_ids: Iterable[str]) -> int:
        ids = list(note_ids)
        if not ids:
            return 0
        # Core delete so the database cascade, not the ORM, clears field rows
        res = self.session.execute(delete(models.Note).where(models.Note.id.in_(ids)))
        return res.rowcount or 0

    def update(self, note: models.Note, **fields) -> models.Note:
        for key, value in fields.items():
            setattr(note, key, value)
        self.session.flush()
        return note


__all__ = ["NoteRepo"]
