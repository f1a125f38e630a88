"""
Database engine configuration and helper utilities.

History only lives as long as the process: the engine points at an in-memory
SQLite database shared by every connection through a StaticPool.
"""
from collections.abc import Generator

from sqlalchemy import Engine, event
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine


__all__ = ("engine", "create_memory_engine", "create_db_and_tables", "get_db_session")


DATABASE_URL = "sqlite://"


def create_memory_engine() -> Engine:
    """
    Create an engine bound to a fresh in-memory SQLite database.

    - check_same_thread=False: FastAPI may run sync dependencies in a threadpool
    - StaticPool: every session reuses the single connection, otherwise each
      new connection would see its own empty database
    """
    memory_engine = create_engine(
        DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(memory_engine, "connect", _sqlite_set_pragmas)
    return memory_engine


def _sqlite_set_pragmas(dbapi_connection, _connection_record):
    """Enable foreign key enforcement on connection open."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON;")
    cursor.close()


engine = create_memory_engine()


def create_db_and_tables(target_engine: Engine = engine) -> None:
    """
    Create all tables defined on SQLModel metadata if they don't exist yet.
    Idempotent: calling multiple times will not overwrite existing tables.
    """
    SQLModel.metadata.create_all(target_engine)


def get_db_session() -> Generator[Session, None, None]:
    """
    Provide a database session for the current request.

    Auto-closed by FastAPI after the response.
    """
    with Session(engine) as db_session:
        yield db_session
