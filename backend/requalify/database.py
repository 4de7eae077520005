"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine from
`settings.DATABASE_URL` (a local SQLite file by default) and provides
small helpers used by the application and tests.
"""

from sqlalchemy import event, text
from sqlmodel import SQLModel, create_engine, Session

from .config import settings


def build_engine(url: str, echo: bool = False, **kwargs):
    """Create an engine for `url`.

    SQLite connections are opened with `check_same_thread` disabled so a
    session can travel to FastAPI's worker threads, and with foreign key
    enforcement switched on.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    eng = create_engine(url, echo=echo, **kwargs)
    if url.startswith("sqlite"):
        event.listen(eng, "connect", _enable_sqlite_foreign_keys)
    return eng


def _enable_sqlite_foreign_keys(dbapi_connection, _record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)


def create_db_and_tables(bind=None):
    """Create database tables using SQLModel metadata.

    Intended for local development and tests; the model module must be
    imported first so every table is registered on the metadata.
    """
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


def ping(bind=None) -> bool:
    """Run a trivial query and report whether the database answered."""
    with (bind or engine).connect() as conn:
        conn.execute(text("SELECT 1"))
    return True


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
