"""Stock fields most vaults want.

Each one is a thin descriptor over the note's body or frontmatter; register
them all with :func:`register_builtin_fields`.
"""

from __future__ import annotations

import re
import unicodedata
from datetime import date, datetime, timezone
from typing import Any, List, Optional

from notefields.core.models import Note

from .descriptor import FieldDescriptor
from .pipeline import FieldRegistry
from .schema import FieldSchema, IndexSpec

_WORD_RE = re.compile(r"\w+", re.UNICODE)


def _slugify(text: str) -> str:
    text = unicodedata.normalize("NFKD", text.lower())
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = re.sub(r"[^\w]+", "-", text, flags=re.UNICODE)
    return text.strip("-_")


class WordCountField(FieldDescriptor):
    """Number of words in the body; absent for an empty body."""

    def extract(self, note: Note) -> Optional[int]:
        count = len(_WORD_RE.findall(note.body))
        return count or None


class TagsField(FieldDescriptor):
    """One row per tag, normalised to lower-case slugs."""

    def test(self, note: Note) -> bool:
        return bool(note.tags)

    def extract(self, note: Note) -> Optional[List[str]]:
        return list(note.tags) or None

    def transform(self, note: Note, datum: Any) -> List[str]:
        tags = [_slugify(str(t)) for t in datum]
        return [t for t in tags if t]


class StatusField(FieldDescriptor):
    """Frontmatter ``status``, only for notes that declare one."""

    def test(self, note: Note) -> bool:
        return "status" in note.meta

    def extract(self, note: Note) -> Optional[str]:
        value = note.meta.get("status")
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    def transform(self, note: Note, datum: Any) -> str:
        return datum.lower()


class CreatedField(FieldDescriptor):
    """Frontmatter ``created`` as an aware datetime (UTC when unzoned)."""

    def extract(self, note: Note) -> Optional[Any]:
        return note.meta.get("created")

    def transform(self, note: Note, datum: Any) -> datetime:
        if isinstance(datum, datetime):
            value = datum
        elif isinstance(datum, date):
            value = datetime(datum.year, datum.month, datum.day)
        else:
            text = str(datum).strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            # Malformed dates raise here and surface as a sync warning
            value = datetime.fromisoformat(text)
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


def register_builtin_fields(registry: FieldRegistry) -> None:
    registry.add_field(
        "word-count",
        1,
        WordCountField(),
        schema=FieldSchema(value_type="integer"),
        indices=[IndexSpec(name="value")],
    )
    registry.add_field(
        "tags",
        1,
        TagsField(),
        schema=FieldSchema(value_type="string", multi=True),
        indices=[IndexSpec(name="value")],
    )
    registry.add_field(
        "status",
        1,
        StatusField(),
        schema=FieldSchema(value_type="string"),
        indices=[IndexSpec(name="value")],
    )
    registry.add_field(
        "created",
        1,
        CreatedField(),
        schema=FieldSchema(value_type="datetime"),
        indices=[IndexSpec(name="value")],
    )


__all__ = [
    "WordCountField",
    "TagsField",
    "StatusField",
    "CreatedField",
    "register_builtin_fields",
]
