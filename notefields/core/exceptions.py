"""Base exceptions for the domain layer."""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base class for all domain level exceptions."""


class NotFoundError(DomainError):
    """Raised when an entity cannot be located."""


class ValidationError(DomainError):
    """Raised when data fails domain validation rules."""


class UnknownFieldError(NotFoundError):
    """Raised when a field name is not defined in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown field: {name!r}")
        self.name = name


class FieldSchemaError(DomainError):
    """Raised when a field table cannot be defined.

    Covers conflicting prior definitions (different version or column schema)
    as well as DDL rejected by the database. A field that failed here must not
    be registered.
    """


class FieldSyncError(DomainError):
    """Write-path failure for one field/note pair.

    Returned, not raised, by :meth:`FieldStore.sync`; the pipeline turns it
    into a :class:`~notefields.core.models.SyncWarning`.
    """

    def __init__(
        self,
        field: str,
        note_id: str,
        cause: BaseException,
        datum: Any = None,
        note_title: str = "",
        note_path: str = "",
    ) -> None:
        super().__init__(f"Failed to sync field {field!r} for note {note_id!r}: {cause}")
        self.field = field
        self.note_id = note_id
        self.cause = cause
        self.datum = datum
        self.note_title = note_title
        self.note_path = note_path


# Alias to keep a generic name for error type hints
Error = DomainError

__all__ = [
    "DomainError",
    "NotFoundError",
    "ValidationError",
    "UnknownFieldError",
    "FieldSchemaError",
    "FieldSyncError",
    "Error",
]
