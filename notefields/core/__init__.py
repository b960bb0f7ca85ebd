"""Core library exposing domain models, settings, exceptions and types."""

from .settings import Settings, get_settings
from .exceptions import (
    DomainError,
    NotFoundError,
    ValidationError,
    UnknownFieldError,
    FieldSchemaError,
    FieldSyncError,
    Error,
)
from .models import Note, SyncWarning
from .types import Result, Reporter

__all__ = [
    "Settings",
    "get_settings",
    "DomainError",
    "NotFoundError",
    "ValidationError",
    "UnknownFieldError",
    "FieldSchemaError",
    "FieldSyncError",
    "Error",
    "Note",
    "SyncWarning",
    "Result",
    "Reporter",
]
