from datetime import date
from pathlib import Path

import pytest

from notefields.storage import NotesStorage


def test_save_and_read_roundtrip(tmp_path: Path) -> None:
    vault_path = tmp_path / "vault"
    storage = NotesStorage(vault_path)

    saved = storage.save_note(
        "note1",
        "Заметка 1",
        body="Summary 1.",
        tags=["python", "ai"],
        meta={"created": date(2024, 1, 1), "status": "draft"},
    )

    assert saved.id == "note1"
    assert saved.title == "Заметка 1"
    assert saved.path == str(vault_path / "10_Notes" / "note1.md")
    assert saved.tags == ["python", "ai"]
    assert saved.meta == {"created": date(2024, 1, 1), "status": "draft"}
    assert saved.body == "Summary 1."
    content = (vault_path / "10_Notes" / "note1.md").read_text(encoding="utf-8")
    assert content.startswith("---\ntitle: Заметка 1\n")
    assert content.endswith("\n---\n\nSummary 1.\n")


def test_read_note_without_frontmatter(tmp_path: Path) -> None:
    storage = NotesStorage(tmp_path)
    storage.notes_dir.mkdir(parents=True)
    (storage.notes_dir / "plain.md").write_text("Just text\n", encoding="utf-8")

    note = storage.read_note("plain")

    assert note.title == "plain"
    assert note.tags == []
    assert note.meta == {}
    assert note.body == "Just text"


def test_single_tag_scalar_is_wrapped(tmp_path: Path) -> None:
    storage = NotesStorage(tmp_path)
    storage.notes_dir.mkdir(parents=True)
    (storage.notes_dir / "t.md").write_text("---\ntitle: T\ntags: solo\n---\n\nbody\n", encoding="utf-8")

    assert storage.read_note("t").tags == ["solo"]


def test_list_and_delete(tmp_path: Path) -> None:
    storage = NotesStorage(tmp_path)
    assert storage.list_notes() == []

    storage.save_note("b", "B")
    storage.save_note("a", "A")
    assert [n.id for n in storage.list_notes()] == ["a", "b"]

    storage.delete_note("a")
    assert [n.id for n in storage.list_notes()] == ["b"]
    with pytest.raises(FileNotFoundError):
        storage.read_note("a")
