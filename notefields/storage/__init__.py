"""Markdown vault holding the note corpus."""

from .notes_storage import NotesStorage

__all__ = ["NotesStorage"]
