"""
SQLAlchemy engine + session factory.
Import *get_db* as a FastAPI dependency in route handlers.
"""
from collections.abc import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from cinegraph.core.config import settings


def enable_sqlite_foreign_keys(target: Engine) -> None:
    """SQLite ignores ON DELETE CASCADE unless every connection opts in."""

    @event.listens_for(target, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _build_engine() -> Engine:
    if settings.is_sqlite:
        sqlite_engine = create_engine(
            settings.DATABASE_URL,
            # Sync routes run in a threadpool; one connection is shared across threads
            connect_args={"check_same_thread": False},
        )
        enable_sqlite_foreign_keys(sqlite_engine)
        return sqlite_engine

    return create_engine(
        settings.DATABASE_URL,
        # Health-check connections before handing them to the app
        pool_pre_ping=True,
        # Keep up to 10 persistent connections per worker process
        pool_size=10,
        # Allow up to 20 extra connections under burst load
        max_overflow=20,
    )


engine = _build_engine()

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,  # Avoid lazy-load errors after commit
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a scoped DB session.

    Anything not committed by the service is discarded when the session
    closes, so a failure halfway through a multi-row write leaves no rows.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
