"""Field table definitions.

A field lives in its own table ``field_<name>`` with two columns: ``note_id``
(foreign key to ``notes.id`` with ``ON DELETE CASCADE``) and ``field`` (the
stored value). Single-valued fields key the table on ``note_id``; multi-valued
fields key it on ``(note_id, field)`` so a note may own several rows.

Every definition is recorded in ``field_schemas``. Defining a field again with
the same version and columns is a no-op, anything else is a
:class:`FieldSchemaError`. Nothing is ever dropped implicitly; callers that
want a new layout call :func:`drop_field` and backfill.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Literal, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Engine,
    Float,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    delete,
    select,
)
from sqlalchemy.exc import SQLAlchemyError

from notefields.core.exceptions import FieldSchemaError, ValidationError
from notefields.db.models import FieldSchemaRecord
from notefields.db.models import Note as NoteRecord

logger = logging.getLogger(__name__)

NAME_RE = re.compile(r"^[a-z][a-z0-9_-]{0,62}$")

ValueType = Literal["integer", "float", "string", "text", "boolean", "datetime", "date", "json"]

_COLUMN_TYPES = {
    "integer": Integer,
    "float": Float,
    "string": lambda: String(255),
    "text": Text,
    "boolean": Boolean,
    "datetime": lambda: DateTime(timezone=True),
    "date": Date,
    "json": JSON,
}


def validate_name(name: str, kind: str = "field") -> str:
    """Validate a field or index name against :data:`NAME_RE`."""
    if not isinstance(name, str) or not NAME_RE.match(name):
        raise ValidationError(f"Invalid {kind} name: {name!r}")
    return name


def table_name_for(name: str) -> str:
    return "field_" + validate_name(name).replace("-", "_")


class IndexSpec(BaseModel):
    """Secondary index over a field table."""

    model_config = ConfigDict(frozen=True)

    name: str
    columns: Tuple[Literal["note_id", "field"], ...] = ("field",)
    unique: bool = False

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str) -> str:
        try:
            return validate_name(v, "index")
        except ValidationError as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("columns")
    @classmethod
    def _check_columns(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if not v:
            raise ValueError("index needs at least one column")
        if len(set(v)) != len(v):
            raise ValueError("index columns must be distinct")
        return v


class FieldSchema(BaseModel):
    """Column layout of a field table."""

    model_config = ConfigDict(frozen=True)

    value_type: ValueType = "text"
    nullable: bool = False
    multi: bool = False


@dataclass(frozen=True)
class FieldTable:
    """A defined field: its name, version, layout and SQLAlchemy table."""

    name: str
    version: str
    schema: FieldSchema
    indices: Tuple[IndexSpec, ...]
    table: Table

    @property
    def table_name(self) -> str:
        return self.table.name

    @property
    def multi(self) -> bool:
        return self.schema.multi


def _definition(schema: FieldSchema, indices: Sequence[IndexSpec]) -> str:
    payload = {
        "schema": schema.model_dump(mode="json"),
        "indices": sorted(
            (ix.model_dump(mode="json") for ix in indices), key=lambda d: d["name"]
        ),
    }
    return json.dumps(payload, sort_keys=True)


def build_table(
    name: str,
    schema: FieldSchema,
    indices: Sequence[IndexSpec] = (),
    metadata: MetaData | None = None,
) -> Table:
    """Build (but do not create) the SQLAlchemy table for a field."""

    metadata = metadata if metadata is not None else MetaData()
    if "notes" not in metadata.tables:
        # Copy of the notes table so the foreign key resolves inside `metadata`
        NoteRecord.__table__.to_metadata(metadata)
    table_name = table_name_for(name)
    if table_name in metadata.tables:
        # Left over from a definition the database rejected
        metadata.remove(metadata.tables[table_name])
    value_type = _COLUMN_TYPES[schema.value_type]()
    table = Table(
        table_name,
        metadata,
        Column(
            "note_id",
            String,
            ForeignKey("notes.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        Column("field", value_type, primary_key=schema.multi, nullable=schema.nullable),
    )
    seen: set[str] = set()
    for spec in indices:
        if spec.name in seen:
            raise ValidationError(f"Duplicate index name {spec.name!r} for field {name!r}")
        seen.add(spec.name)
        Index(
            f"ix_{table_name}_{spec.name.replace('-', '_')}",
            *(table.c[col] for col in spec.columns),
            unique=spec.unique,
        )
    return table


def define_field(
    engine: Engine,
    name: str,
    version: int | str,
    schema: FieldSchema | None = None,
    indices: Iterable[IndexSpec] = (),
    metadata: MetaData | None = None,
) -> FieldTable:
    """Ensure the table and indices for ``name`` exist.

    Idempotent for an identical ``(version, schema, indices)``. Raises
    :class:`FieldSchemaError` if a different definition is already recorded
    or if the database rejects the DDL; the caller must not use the field
    in that case.
    """

    schema = schema or FieldSchema()
    indices = tuple(indices)
    version = str(version)
    table = build_table(name, schema, indices, metadata)
    definition = _definition(schema, indices)

    try:
        with engine.begin() as conn:
            NoteRecord.__table__.create(conn, checkfirst=True)
            FieldSchemaRecord.__table__.create(conn, checkfirst=True)
            records = FieldSchemaRecord.__table__
            existing = conn.execute(
                select(records.c.version, records.c.definition).where(records.c.name == name)
            ).first()
            if existing is not None:
                if existing.version != version:
                    raise FieldSchemaError(
                        f"Field {name!r} is already defined at version "
                        f"{existing.version!r}, not {version!r}"
                    )
                if existing.definition != definition:
                    raise FieldSchemaError(
                        f"Field {name!r} version {version!r} is already defined "
                        "with a different schema"
                    )
            table.create(conn, checkfirst=True)
            for index in table.indexes:
                index.create(conn, checkfirst=True)
            if existing is None:
                conn.execute(
                    records.insert().values(
                        name=name,
                        table_name=table.name,
                        version=version,
                        definition=definition,
                    )
                )
                logger.info(
                    "field_defined",
                    extra={"field": name, "table": table.name, "version": version},
                )
    except SQLAlchemyError as exc:
        raise FieldSchemaError(f"Could not define field {name!r}: {exc}") from exc

    return FieldTable(name=name, version=version, schema=schema, indices=indices, table=table)


def drop_field(engine: Engine, name: str) -> None:
    """Drop a field's table and forget its recorded definition.

    Field rows are derived from notes, so after re-defining the field the
    values can be rebuilt with :class:`notefields.usecases.BackfillField`.
    """

    table_name = table_name_for(name)
    records = FieldSchemaRecord.__table__
    try:
        with engine.begin() as conn:
            records.create(conn, checkfirst=True)
            Table(table_name, MetaData()).drop(conn, checkfirst=True)
            conn.execute(delete(records).where(records.c.name == name))
    except SQLAlchemyError as exc:
        raise FieldSchemaError(f"Could not drop field {name!r}: {exc}") from exc
    logger.info("field_dropped", extra={"field": name, "table": table_name})


__all__ = [
    "NAME_RE",
    "ValueType",
    "IndexSpec",
    "FieldSchema",
    "FieldTable",
    "validate_name",
    "table_name_for",
    "build_table",
    "define_field",
    "drop_field",
]
