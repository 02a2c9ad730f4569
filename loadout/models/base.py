"""
SQLAlchemy base configuration and session management.

Uses SQLAlchemy 2.0 style with type hints and declarative base.
Designed to be portable between SQLite (dev) and PostgreSQL (prod).
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session

from loadout.config import config

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def _set_sqlite_pragma(dbapi_connection, connection_record):
    """
    Configure each new SQLite connection.

    The driver's own transaction handling is switched off so that the
    'begin' listener below emits BEGIN itself; otherwise SAVEPOINT
    (Session.begin_nested) does not work with pysqlite.
    """
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA journal_mode=WAL')
    cursor.execute('PRAGMA synchronous=NORMAL')
    # Required for ON UPDATE CASCADE on aircraft serial numbers
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


def _begin_sqlite_transaction(conn):
    conn.exec_driver_sql('BEGIN')


def make_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine, applying SQLite connection settings when needed."""
    engine_kwargs = {'echo': echo}
    if url.startswith('sqlite'):
        engine_kwargs['connect_args'] = {'check_same_thread': False}

    new_engine = create_engine(url, **engine_kwargs)

    if new_engine.dialect.name == 'sqlite':
        event.listen(new_engine, 'connect', _set_sqlite_pragma)
        event.listen(new_engine, 'begin', _begin_sqlite_transaction)

    return new_engine


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(
        bind=bind,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,  # Rows are handed back to callers after commit
    )


engine = make_engine(config.database.url, echo=config.debug)

# Session factory
SessionLocal = make_session_factory(engine)


@contextmanager
def get_session(session_factory: Optional[sessionmaker] = None) -> Generator[Session, None, None]:
    """
    Context manager for one database transaction.

    Usage:
        with get_session() as session:
            session.execute(...)

    Commits on success and rolls back on any exception. A failing
    rollback is logged and the original exception is re-raised. The
    session is closed on every exit path.
    """
    session = (session_factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        try:
            session.rollback()
        except SQLAlchemyError as rollback_error:
            logger.error(f'Rollback failed: {rollback_error}')
        raise
    finally:
        session.close()


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Initialize database schema.

    Creates all tables and the launcher life-status view if they don't
    exist. For production, use Alembic migrations instead.
    """
    from loadout.models.life_status import create_life_status_view

    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    create_life_status_view(bind)
