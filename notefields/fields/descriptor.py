"""Field descriptors: what a field stores for a given note."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from notefields.core.models import Note


class FieldDescriptor:
    """Computes one field's value from a note.

    ``test`` decides whether the note participates in the field at all,
    ``extract`` returns the raw datum (``None`` when the note has none) and
    ``transform`` turns the datum into what goes into the ``field`` column.
    For multi-valued fields ``transform`` returns an iterable of values.
    """

    def test(self, note: Note) -> bool:
        return True

    def extract(self, note: Note) -> Optional[Any]:
        raise NotImplementedError

    def transform(self, note: Note, datum: Any) -> Any:
        return datum


@dataclass(frozen=True)
class SimpleField(FieldDescriptor):
    """Descriptor assembled from three plain callables."""

    extractor: Callable[[Note], Optional[Any]]
    membership: Callable[[Note], bool] = lambda note: True
    transformer: Callable[[Note, Any], Any] = lambda note, datum: datum

    def test(self, note: Note) -> bool:
        return bool(self.membership(note))

    def extract(self, note: Note) -> Optional[Any]:
        return self.extractor(note)

    def transform(self, note: Note, datum: Any) -> Any:
        return self.transformer(note, datum)


__all__ = ["FieldDescriptor", "SimpleField"]
