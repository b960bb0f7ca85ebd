from __future__ import annotations

import logging
from collections import Counter
from typing import Dict

from notefields.core.exceptions import FieldSyncError
from notefields.fields import FieldRegistry
from notefields.storage import NotesStorage

logger = logging.getLogger(__name__)


class BackfillField:
    """Recompute one field for every note in the vault.

    Meant for a field registered after the notes were synced, or re-created
    with :func:`notefields.fields.drop_field`. Notes must already have their
    identity rows (see :class:`SyncNotes`).
    """

    def __init__(self, registry: FieldRegistry, storage: NotesStorage) -> None:
        self.registry = registry
        self.storage = storage

    def __call__(self, name: str) -> Dict[str, int]:
        counts: Counter[str] = Counter()
        for note in self.storage.list_notes():
            result = self.registry.sync_one(name, note)
            if isinstance(result, FieldSyncError):
                counts["failed"] += 1
            else:
                counts[result.value] += 1
        logger.info("field_backfilled", extra={"field": name, **counts})
        return dict(counts)
