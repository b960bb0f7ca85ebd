"""Database utilities for notefields."""

from . import models
from .database import Base, create_db_engine, get_engine, get_session, init_db
from .repositories import NoteRepo

__all__ = [
    "models",
    "Base",
    "create_db_engine",
    "get_engine",
    "get_session",
    "init_db",
    "NoteRepo",
]
