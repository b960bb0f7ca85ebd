import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure project root on sys.path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from apps.api.main import app, db_engine, get_registry, get_storage
from notefields.core.models import Note
from notefields.db import NoteRepo, create_db_engine, init_db
from notefields.db.database import session_factory
from notefields.fields import FieldRegistry
from notefields.fields.builtin import register_builtin_fields
from notefields.storage import NotesStorage


@pytest.fixture()
def engine(tmp_path):
    """SQLite engine on a temp file with the base schema created."""

    eng = create_db_engine(f"sqlite:///{tmp_path / 'fields.db'}")
    init_db(eng, max_attempts=1)
    yield eng
    eng.dispose()


@pytest.fixture()
def warnings():
    return []


@pytest.fixture()
def registry(engine, warnings):
    return FieldRegistry(engine, reporter=warnings.append)


@pytest.fixture()
def add_note(engine):
    """Insert a note identity row and return the matching domain note."""

    def _add(note_id: str, body: str = "", **kwargs) -> Note:
        note = Note(id=note_id, title=kwargs.pop("title", note_id.title()), body=body, **kwargs)
        with session_factory(engine)() as session:
            NoteRepo(session).upsert(id=note.id, title=note.title, file_path=note.path)
            session.commit()
        return note

    return _add


@pytest.fixture()
def storage(tmp_path):
    return NotesStorage(tmp_path / "vault")


@pytest.fixture()
def client(engine, storage, warnings):
    """FastAPI test client with dependencies overridden."""

    registry = FieldRegistry(engine, reporter=warnings.append)
    register_builtin_fields(registry)
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[db_engine] = lambda: engine

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
