from sqlalchemy import text

from notefields.db.database import session_factory
from notefields.fields import FieldRegistry, SimpleField, drop_field
from notefields.fields.builtin import register_builtin_fields
from notefields.usecases import BackfillField, SyncNotes


def _uc(storage, registry, engine) -> SyncNotes:
    return SyncNotes(storage, registry, session_factory(engine))


def test_sync_notes_populates_fields(storage, registry, engine) -> None:
    register_builtin_fields(registry)
    storage.save_note("n1", "One", body="alpha beta gamma", tags=["x"])
    storage.save_note("n2", "Two", body="", meta={"status": "Done"})

    report = _uc(storage, registry, engine)()

    assert report.synced == ["n1", "n2"]
    assert report.removed == []
    assert report.warnings == []
    assert registry.query("word-count", "n1") == [3]
    assert registry.query("tags", "n1") == ["x"]
    assert registry.query("status", "n2") == ["done"]
    assert registry.query("word-count", "n2") == []


def test_sync_notes_removes_deleted_notes(storage, registry, engine) -> None:
    register_builtin_fields(registry)
    storage.save_note("n1", "One", body="alpha", tags=["x"])
    storage.save_note("n2", "Two", body="beta")
    uc = _uc(storage, registry, engine)
    uc()

    storage.delete_note("n1")
    report = uc()

    assert report.removed == ["n1"]
    assert registry.query("word-count", "n1") == []
    assert registry.query("tags", "n1") == []
    assert registry.query("word-count", "n2") == [1]
    with engine.connect() as conn:
        assert conn.execute(text("SELECT id FROM notes")).scalars().all() == ["n2"]


def test_sync_notes_collects_warnings(storage, registry, engine, warnings) -> None:
    register_builtin_fields(registry)
    storage.save_note("n1", "One", body="text", meta={"created": "soon"})

    report = _uc(storage, registry, engine)()

    assert [w.field for w in report.warnings] == ["created"]
    # the registry's own reporter still receives it
    assert [w.field for w in warnings] == ["created"]
    assert registry.reporter == warnings.append
    assert registry.query("word-count", "n1") == [1]


def test_sync_notes_leaves_registry_reporter_alone(storage, engine) -> None:
    seen = []
    registry = FieldRegistry(engine)

    def reporter(warning):
        seen.append((warning.field, registry.reporter is reporter))

    registry.reporter = reporter
    register_builtin_fields(registry)
    storage.save_note("n1", "One", body="text", meta={"created": "soon"})
    storage.save_note("n2", "Two", body="text", meta={"created": "later"})
    uc = _uc(storage, registry, engine)

    first = uc()
    second = uc()

    assert [w.note_id for w in first.warnings] == ["n1", "n2"]
    assert [w.note_id for w in second.warnings] == ["n1", "n2"]
    assert seen == [("created", True)] * 4
    assert registry.reporter is reporter


def test_sync_and_remove_single_note(storage, registry, engine) -> None:
    register_builtin_fields(registry)
    note = storage.save_note("n1", "One", body="a b")
    uc = _uc(storage, registry, engine)

    uc.sync_note(note)
    assert registry.query("word-count", note) == [2]

    assert uc.remove_note("n1") is True
    assert registry.query("word-count", note) == []
    assert uc.remove_note("n1") is False


def test_backfill_new_field(storage, registry, engine) -> None:
    register_builtin_fields(registry)
    storage.save_note("n1", "One", body="a")
    storage.save_note("n2", "Two", body="b")
    _uc(storage, registry, engine)()

    registry.add_field("title", 1, SimpleField(extractor=lambda n: n.title))
    counts = BackfillField(registry, storage)("title")

    assert counts == {"stored": 2}
    assert registry.query("title", "n2") == ["Two"]


def test_backfill_after_drop(storage, engine, registry) -> None:
    register_builtin_fields(registry)
    storage.save_note("n1", "One", body="a b c")
    _uc(storage, registry, engine)()

    drop_field(engine, "word-count")

    fresh = FieldRegistry(engine, reporter=registry.reporter)
    register_builtin_fields(fresh)
    assert fresh.query("word-count", "n1") == []

    counts = BackfillField(fresh, storage)("word-count")

    assert counts == {"stored": 1}
    assert fresh.query("word-count", "n1") == [3]
