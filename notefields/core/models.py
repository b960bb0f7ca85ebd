"""Pydantic models representing core domain entities."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import FieldSyncError


class Note(BaseModel):
    """A note as seen by field descriptors.

    The field machinery only reads from it; identity, title and path are what
    warnings report, body/tags/meta are what extractors work on.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    path: str = ""
    body: str = ""
    tags: List[str] = Field(default_factory=list)
    meta: Dict[str, Any] = Field(default_factory=dict)


class SyncWarning(BaseModel):
    """Structured message handed to the warning channel when a write fails."""

    field: str
    datum: Optional[str] = None
    note_title: str
    note_id: str
    note_path: str
    error: str
    error_class: str

    @classmethod
    def from_error(cls, exc: FieldSyncError) -> "SyncWarning":
        return cls(
            field=exc.field,
            datum=None if exc.datum is None else repr(exc.datum),
            note_title=exc.note_title,
            note_id=exc.note_id,
            note_path=exc.note_path,
            error=str(exc.cause),
            error_class=type(exc.cause).__name__,
        )



__all__ = ["Note", "SyncWarning"]
