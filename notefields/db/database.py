"""Database setup for SQLAlchemy (SQLite by default, Postgres via psycopg)."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from notefields.core.settings import get_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all ORM models."""


def _enable_sqlite_foreign_keys(dbapi_conn, _record) -> None:  # type: ignore[no-untyped-def]
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: str, **kwargs) -> Engine:
    """Create an engine with the settings the field tables rely on.

    - pool_pre_ping: validate connections before using
    - SQLite connections get foreign key enforcement so field rows cascade
      when their note disappears
    """

    engine = create_engine(url, future=True, pool_pre_ping=True, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


@lru_cache
def get_engine() -> Engine:
    """Return the process-wide engine built from settings."""
    settings = get_settings()
    if settings.database_url.startswith("sqlite:///"):
        settings.vault_dir.mkdir(parents=True, exist_ok=True)
    return create_db_engine(settings.database_url)


def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(engine, expire_on_commit=False)


@contextmanager
def get_session(engine: Engine | None = None) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""

    with session_factory(engine or get_engine())() as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise


def init_db(
    engine: Engine | None = None,
    *,
    max_attempts: int | None = None,
    delay: float | None = None,
) -> None:
    """Create the notes and field registry tables.

    Attempts to connect to the database multiple times with a delay
    between attempts. If all attempts fail, the last exception is propagated.
    Field tables are not created here; each field creates its own through
    :func:`notefields.fields.define_field`.
    """

    # Import models to ensure Base.metadata is populated
    from . import models  # noqa: F401

    settings = get_settings()
    engine = engine or get_engine()
    max_attempts = max_attempts or settings.db_init_attempts
    delay = settings.db_init_delay if delay is None else delay
    last_exc: SQLAlchemyError | None = None

    for attempt in range(1, max_attempts + 1):
        try:
            with engine.begin() as conn:
                Base.metadata.create_all(conn)
            logger.info("DB schema ensured (attempt %d)", attempt)
            return
        except SQLAlchemyError as exc:
            last_exc = exc
            if attempt == max_attempts:
                break
            logger.warning(
                "DB init attempt %d failed: %s. Retrying in %ss", attempt, exc, delay
            )
            time.sleep(delay)

    logger.error("DB init failed after %d attempts", max_attempts)
    if last_exc is not None:
        raise last_exc


__all__ = [
    "Base",
    "create_db_engine",
    "get_engine",
    "session_factory",
    "get_session",
    "init_db",
]
