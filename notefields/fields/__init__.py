"""Derived per-note fields kept in step with the note corpus."""

from .descriptor import FieldDescriptor, SimpleField
from .pipeline import FieldRegistry, log_sync_warning
from .schema import FieldSchema, FieldTable, IndexSpec, define_field, drop_field
from .store import FieldStore, SyncOutcome

__all__ = [
    "FieldDescriptor",
    "SimpleField",
    "FieldRegistry",
    "log_sync_warning",
    "FieldSchema",
    "FieldTable",
    "IndexSpec",
    "define_field",
    "drop_field",
    "FieldStore",
    "SyncOutcome",
]
