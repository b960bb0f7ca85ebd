from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import yaml

from notefields.core.models import Note


class NotesStorage:
    """File system based storage for Markdown notes with YAML frontmatter.

    A note's id is its file stem under ``10_Notes``; ``title`` and ``tags``
    come from the frontmatter, every other frontmatter key ends up in
    ``Note.meta``.
    """

    def __init__(self, vault_path: Path) -> None:
        self.vault_path = Path(vault_path)
        self.notes_dir = self.vault_path / "10_Notes"

    # ------------------------------------------------------------------
    # public API
    def path_for(self, note_id: str) -> Path:
        return self.notes_dir / f"{note_id}.md"

    def save_note(
        self,
        note_id: str,
        title: str,
        body: str = "",
        tags: List[str] | None = None,
        meta: Dict[str, Any] | None = None,
    ) -> Note:
        """Write a note to disk and return it as read back."""

        self.notes_dir.mkdir(parents=True, exist_ok=True)
        front: Dict[str, Any] = {"title": title, "tags": list(tags or [])}
        front.update(meta or {})
        fm = yaml.safe_dump(front, allow_unicode=True, sort_keys=False).rstrip()
        content = f"---\n{fm}\n---\n\n{body.rstrip()}\n"
        self.path_for(note_id).write_text(content, encoding="utf-8")
        return self.read_note(note_id)

    def read_note(self, note_id: str) -> Note:
        """Read note from disk by id."""

        path = self.path_for(note_id)
        text = path.read_text(encoding="utf-8")
        front: Dict[str, Any] = {}
        body = text
        if text.startswith("---"):
            parts = text.split("---", 2)
            if len(parts) == 3:
                _, fm, body = parts
                loaded = yaml.safe_load(fm) or {}
                if isinstance(loaded, dict):
                    front = loaded
                body = body.lstrip("\n")
        tags = front.pop("tags", None) or []
        if not isinstance(tags, list):
            tags = [tags]
        title = front.pop("title", None) or note_id
        return Note(
            id=note_id,
            title=str(title),
            path=str(path),
            body=body.rstrip(),
            tags=[str(t) for t in tags],
            meta=front,
        )

    def list_notes(self) -> List[Note]:
        """Return all notes stored in the vault, ordered by id."""

        if not self.notes_dir.exists():
            return []
        return [self.read_note(file.stem) for file in sorted(self.notes_dir.glob("*.md"))]

    def delete_note(self, note_id: str) -> None:
        self.path_for(note_id).unlink()


__all__ = ["NotesStorage"]
