"""Reading and writing field rows for a single note."""

from __future__ import annotations

import enum
import logging
from typing import Any, List

from sqlalchemy import Engine, delete, insert, select

from notefields.core.exceptions import FieldSyncError
from notefields.core.models import Note
from notefields.core.types import Result

from .descriptor import FieldDescriptor
from .schema import FieldTable

logger = logging.getLogger(__name__)


class SyncOutcome(str, enum.Enum):
    """What a successful sync left behind for the note."""

    EXCLUDED = "excluded"  # note does not participate
    EMPTY = "empty"  # participates, but has no datum
    STORED = "stored"


class FieldStore:
    """Delete-then-insert writes and point reads against field tables.

    Each :meth:`sync` clears the note's rows even when the descriptor fails;
    the failure comes back as a :class:`FieldSyncError` value.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def sync(
        self, field: FieldTable, descriptor: FieldDescriptor, note: Note
    ) -> Result[SyncOutcome]:
        table = field.table
        datum: Any = None
        rows: List[dict] = []
        outcome = SyncOutcome.STORED
        failure: Exception | None = None
        try:
            if not descriptor.test(note):
                outcome = SyncOutcome.EXCLUDED
            else:
                datum = descriptor.extract(note)
                if datum is None:
                    outcome = SyncOutcome.EMPTY
                else:
                    value = descriptor.transform(note, datum)
                    values = _distinct(value) if field.multi else [value]
                    rows = [{"note_id": note.id, "field": v} for v in values]
                    if not rows:
                        outcome = SyncOutcome.EMPTY
        except Exception as exc:
            failure = exc
            rows = []

        # The old row goes regardless of what the descriptor did
        try:
            with self.engine.begin() as conn:
                conn.execute(delete(table).where(table.c.note_id == note.id))
                if rows:
                    conn.execute(insert(table), rows)
        except Exception as exc:
            failure = failure or exc
            if rows:
                self._clear(field, note.id)

        if failure is not None:
            return FieldSyncError(
                field=field.name,
                note_id=note.id,
                cause=failure,
                datum=datum,
                note_title=note.title,
                note_path=note.path,
            )
        return outcome

    def _clear(self, field: FieldTable, note_id: str) -> None:
        table = field.table
        try:
            with self.engine.begin() as conn:
                conn.execute(delete(table).where(table.c.note_id == note_id))
        except Exception:
            logger.warning(
                "field_row_not_cleared",
                exc_info=True,
                extra={"field": field.name, "note_id": note_id},
            )

    def query(self, field: FieldTable, note: Note | str) -> List[Any]:
        """Return the stored value(s) for a note; empty when there are none.

        Database errors propagate: an empty list always means "no row".
        """
        note_id = note if isinstance(note, str) else note.id
        table = field.table
        stmt = select(table.c.field).where(table.c.note_id == note_id)
        if field.multi:
            stmt = stmt.order_by(table.c.field)
        with self.engine.connect() as conn:
            return list(conn.execute(stmt).scalars().all())


def _distinct(values: Any) -> List[Any]:
    if isinstance(values, (str, bytes)):
        raise TypeError("multi-valued field transformer must return an iterable of values")
    out: List[Any] = []
    for v in values:
        if v is not None and v not in out:
            out.append(v)
    return out


__all__ = ["FieldStore", "SyncOutcome"]
