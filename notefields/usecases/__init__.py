"""Application use cases."""

from .backfill import BackfillField
from .sync_notes import SyncNotes, SyncReport

__all__ = ["BackfillField", "SyncNotes", "SyncReport"]
