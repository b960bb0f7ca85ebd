from __future__ import annotations

import logging
from typing import Callable, List

from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from notefields.core.exceptions import FieldSyncError
from notefields.core.models import Note, SyncWarning
from notefields.db import NoteRepo
from notefields.fields import FieldRegistry
from notefields.storage import NotesStorage

logger = logging.getLogger(__name__)


class SyncReport(BaseModel):
    """Outcome of one pass over the vault."""

    synced: List[str] = Field(default_factory=list)
    removed: List[str] = Field(default_factory=list)
    warnings: List[SyncWarning] = Field(default_factory=list)


class SyncNotes:
    """Bring the notes table and every registered field in line with the vault.

    For each note in the vault the identity row is upserted (and committed, so
    field rows can reference it) and the note is dispatched to the registry.
    Identity rows whose file is gone are deleted; the foreign key cascade
    removes their field rows.
    """

    def __init__(
        self,
        storage: NotesStorage,
        registry: FieldRegistry,
        session_factory: Callable[[], Session],
    ) -> None:
        self.storage = storage
        self.registry = registry
        self.session_factory = session_factory

    # ------------------------------------------------------------------
    def __call__(self) -> SyncReport:
        report = SyncReport()
        notes = self.storage.list_notes()

        with self.session_factory() as session:
            repo = NoteRepo(session)
            known = set(repo.list_ids())
            for note in notes:
                repo.upsert(id=note.id, title=note.title, file_path=note.path)
            stale = sorted(known - {n.id for n in notes})
            repo.delete_many(stale)
            session.commit()
        report.removed = stale

        # The registry's own reporter still sees every warning
        for note in notes:
            results = self.registry.dispatch(note)
            report.synced.append(note.id)
            report.warnings.extend(
                SyncWarning.from_error(r) for r in results.values() if isinstance(r, FieldSyncError)
            )

        logger.info(
            "vault_synced",
            extra={
                "synced": len(report.synced),
                "removed": len(report.removed),
                "warnings": len(report.warnings),
            },
        )
        return report

    def sync_note(self, note: Note) -> None:
        """Upsert and dispatch a single note."""
        with self.session_factory() as session:
            NoteRepo(session).upsert(id=note.id, title=note.title, file_path=note.path)
            session.commit()
        self.registry.dispatch(note)

    def remove_note(self, note_id: str) -> bool:
        """Delete a note's identity row; its field rows go with it."""
        with self.session_factory() as session:
            removed = NoteRepo(session).delete_many([note_id])
            session.commit()
        return removed > 0
