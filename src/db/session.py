"""
Database session management.
"""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator

from src.core.config import get_settings

settings = get_settings()


def build_engine(url: str, **kwargs) -> Engine:
    """
    Create an engine for the configured database.

    SQLite connections get foreign keys switched on, and the driver's own
    transaction handling is replaced by an explicit BEGIN IMMEDIATE. That
    makes SAVEPOINT (used by order settlement) behave, and makes a second
    writer wait up to the busy timeout for the write lock instead of failing
    on a read-to-write lock upgrade.
    """
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True, **kwargs)

    kwargs.setdefault("connect_args", {
        "check_same_thread": False,
        "timeout": settings.SQLITE_BUSY_TIMEOUT,
    })
    engine = create_engine(url, **kwargs)

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def end_idle_transaction(db: Session) -> None:
    """
    Commit the session's open transaction if it holds no pending changes.

    Called before waiting on a process lock: on SQLite every transaction
    holds the database write lock, so a thread must not queue for an item
    or order lock while still inside one.
    """
    if db.in_transaction() and not (db.new or db.dirty or db.deleted):
        db.commit()


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
