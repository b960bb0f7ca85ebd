"""Field registry: defines field tables and fans note syncs out to them.

Typical wiring at startup::

    registry = FieldRegistry(engine)
    registry.add_field(
        "word-count", 1, SimpleField(extractor=count_words),
        schema=FieldSchema(value_type="integer"),
        indices=[IndexSpec(name="value")],
    )

and then, from whatever notices note changes::

    registry.dispatch(note)

Registration is expected to finish before dispatch traffic starts; the
registry does no locking of its own.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import Engine, MetaData

from notefields.core.exceptions import (
    FieldSyncError,
    UnknownFieldError,
    ValidationError,
)
from notefields.core.models import Note, SyncWarning
from notefields.core.types import Reporter, Result

from .descriptor import FieldDescriptor
from .schema import FieldSchema, FieldTable, IndexSpec, define_field, drop_field
from .store import FieldStore, SyncOutcome

logger = logging.getLogger("notefields.fields")


def log_sync_warning(warning: SyncWarning) -> None:
    """Default warning channel: a structured WARNING log record."""
    logger.warning(
        "field_sync_failed",
        extra=warning.model_dump(),
    )


class FieldRegistry:
    """Process-wide set of field tables and their ordered sync bindings."""

    def __init__(
        self,
        engine: Engine,
        reporter: Optional[Reporter] = None,
        store: Optional[FieldStore] = None,
    ) -> None:
        self.engine = engine
        self.reporter: Reporter = reporter or log_sync_warning
        self.store = store or FieldStore(engine)
        self.metadata = MetaData()
        self._tables: Dict[str, FieldTable] = {}
        self._bindings: List[Tuple[str, FieldDescriptor]] = []

    # ------------------------------------------------------------------
    # setup
    def define(
        self,
        name: str,
        version: int | str,
        schema: FieldSchema | None = None,
        indices: Iterable[IndexSpec] = (),
    ) -> FieldTable:
        """Create (or confirm) the table for ``name``.

        Raises :class:`FieldSchemaError` when the stored definition differs;
        the field then stays unknown to this registry.
        """
        schema = schema or FieldSchema()
        indices = tuple(indices)
        known = self._tables.get(name)
        if known is not None and (known.version, known.schema, known.indices) != (
            str(version),
            schema,
            indices,
        ):
            raise ValidationError(f"Field {name!r} is already defined differently in this registry")
        # Always goes to the database: the table may have been dropped since
        field = define_field(self.engine, name, version, schema, indices, metadata=self.metadata)
        self._tables[name] = field
        return field

    def register(self, name: str, descriptor: FieldDescriptor) -> None:
        """Append a binding; ``name`` must have been defined first."""
        if name not in self._tables:
            raise UnknownFieldError(name)
        if any(bound == name for bound, _ in self._bindings):
            raise ValidationError(f"Field {name!r} is already registered")
        self._bindings.append((name, descriptor))
        logger.debug("field_registered", extra={"field": name})

    def add_field(
        self,
        name: str,
        version: int | str,
        descriptor: FieldDescriptor,
        schema: FieldSchema | None = None,
        indices: Iterable[IndexSpec] = (),
    ) -> FieldTable:
        field = self.define(name, version, schema, indices)
        self.register(name, descriptor)
        return field

    def drop(self, name: str) -> None:
        """Drop ``name``'s table and forget both its definition and binding.

        The field can then be defined again, at any version, and backfilled.
        """
        drop_field(self.engine, name)
        field = self._tables.pop(name, None)
        if field is not None:
            self.metadata.remove(field.table)
        self._bindings = [(bound, d) for bound, d in self._bindings if bound != name]
        logger.info("field_dropped_from_registry", extra={"field": name})

    # ------------------------------------------------------------------
    # lookups
    def names(self) -> List[str]:
        """Registered field names in dispatch order."""
        return [name for name, _ in self._bindings]

    def table(self, name: str) -> FieldTable:
        try:
            return self._tables[name]
        except KeyError:
            raise UnknownFieldError(name) from None

    def descriptor(self, name: str) -> FieldDescriptor:
        for bound, descriptor in self._bindings:
            if bound == name:
                return descriptor
        raise UnknownFieldError(name)

    # ------------------------------------------------------------------
    # sync / read
    def sync_one(self, name: str, note: Note) -> Result[SyncOutcome]:
        """Sync a single registered field; failures are reported, not raised."""
        result = self.store.sync(self.table(name), self.descriptor(name), note)
        if isinstance(result, FieldSyncError):
            self._report(result)
        return result

    def dispatch(self, note: Note) -> Dict[str, Result[SyncOutcome]]:
        """Sync every registered field for ``note``, in registration order."""
        results: Dict[str, Result[SyncOutcome]] = {}
        for name, descriptor in list(self._bindings):
            result = self.store.sync(self._tables[name], descriptor, note)
            if isinstance(result, FieldSyncError):
                self._report(result)
            results[name] = result
        logger.debug(
            "note_dispatched",
            extra={"note_id": note.id, "fields": len(results)},
        )
        return results

    def query(self, name: str, note: Note | str) -> list:
        return self.store.query(self.table(name), note)

    def query_all(self, note: Note | str) -> Dict[str, list]:
        return {name: self.query(name, note) for name in self.names()}

    def _report(self, error: FieldSyncError) -> None:
        try:
            self.reporter(SyncWarning.from_error(error))
        except Exception:
            logger.exception(
                "field_sync_reporter_failed",
                extra={"field": error.field, "note_id": error.note_id},
            )


__all__ = ["FieldRegistry", "log_sync_warning"]
