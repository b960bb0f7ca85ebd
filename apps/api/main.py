from __future__ import annotations

from contextlib import asynccontextmanager
from functools import lru_cache
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List

from fastapi import Depends, FastAPI, HTTPException, status
from sqlalchemy import Engine

from notefields.core.exceptions import UnknownFieldError
from notefields.core.settings import get_settings
from notefields.db import get_engine, init_db, NoteRepo
from notefields.db.database import session_factory
from notefields.fields import FieldRegistry
from notefields.fields.builtin import register_builtin_fields
from notefields.logging import setup_logging
from notefields.storage import NotesStorage
from notefields.usecases import SyncNotes, SyncReport


# ---------------------------------------------------------------------------
# Dependency factories


def get_storage() -> NotesStorage:
    settings = get_settings()
    return NotesStorage(Path(settings.vault_dir))


def db_engine() -> Engine:
    return get_engine()


@lru_cache
def _default_registry() -> FieldRegistry:
    engine = get_engine()
    init_db(engine)
    registry = FieldRegistry(engine)
    register_builtin_fields(registry)
    return registry


def get_registry() -> FieldRegistry:
    return _default_registry()


def sync_notes_uc(
    storage: NotesStorage = Depends(get_storage),
    registry: FieldRegistry = Depends(get_registry),
    engine: Engine = Depends(db_engine),
) -> SyncNotes:
    return SyncNotes(storage, registry, session_factory(engine))


# ---------------------------------------------------------------------------
# FastAPI application


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    setup_logging()
    yield


app = FastAPI(title="notefields API", lifespan=lifespan)


def _ensure_note(engine: Engine, note_id: str) -> None:
    with session_factory(engine)() as session:
        if NoteRepo(session).get(note_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")


# Routes ---------------------------------------------------------------------


@app.get("/fields")
def list_fields(registry: FieldRegistry = Depends(get_registry)) -> List[str]:
    return registry.names()


@app.get("/notes/{note_id}/fields")
def get_note_fields(
    note_id: str,
    registry: FieldRegistry = Depends(get_registry),
    engine: Engine = Depends(db_engine),
) -> Dict[str, Any]:
    _ensure_note(engine, note_id)
    return {"note_id": note_id, "fields": registry.query_all(note_id)}


@app.get("/notes/{note_id}/fields/{name}")
def get_note_field(
    note_id: str,
    name: str,
    registry: FieldRegistry = Depends(get_registry),
    engine: Engine = Depends(db_engine),
) -> Dict[str, Any]:
    _ensure_note(engine, note_id)
    try:
        values = registry.query(name, note_id)
    except UnknownFieldError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Field not found")
    return {"note_id": note_id, "field": name, "values": values}


@app.post("/sync")
def sync(uc: SyncNotes = Depends(sync_notes_uc)) -> SyncReport:
    return uc()


__all__ = ["app"]
