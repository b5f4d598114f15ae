"""Engine and session management for the article database."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from functools import lru_cache
from typing import Callable, Iterator

from dotenv import load_dotenv
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from common.errors import StoreUnavailable
from rds_postgres.models import Base

load_dotenv()

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]

# Errors that may mean the database itself is gone; see is_store_lost
CONNECTIVITY_ERRORS = (OperationalError, InterfaceError)


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def build_engine(database_url: str, **kwargs) -> Engine:
    """Create an engine; SQLite gets foreign keys so cascades behave like Postgres."""
    if database_url.startswith("sqlite"):
        engine = create_engine(database_url, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(database_url, pool_pre_ping=True, **kwargs)


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Create the process-wide engine from DATABASE_URL."""
    return build_engine(os.environ["DATABASE_URL"])


def build_session_factory(engine: Engine) -> SessionFactory:
    return sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@contextmanager
def get_session(factory: SessionFactory | None = None) -> Iterator[Session]:
    """Context manager yielding a session that is rolled back on error."""
    session = (factory or build_session_factory(get_engine()))()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine | None = None) -> None:
    """Create all tables that don't exist yet."""
    engine = engine or get_engine()
    Base.metadata.create_all(engine)
    logger.info("Database schema ensured on %s", engine.url.render_as_string(hide_password=True))


def check_connection(session: Session) -> None:
    """Raise StoreUnavailable if the database can't answer a trivial query."""
    try:
        session.execute(text("SELECT 1"))
    except CONNECTIVITY_ERRORS as exc:
        raise StoreUnavailable(f"Database unreachable: {exc.__class__.__name__}") from exc


def is_store_lost(session: Session, exc: BaseException) -> bool:
    """True if `exc` means the database is unreachable, not that one statement failed.

    An invalidated connection counts straight away. Other operational errors
    such as a lock timeout only count when a connection check on the
    rolled-back session also fails.
    """
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    if not isinstance(exc, CONNECTIVITY_ERRORS):
        return False

    try:
        session.rollback()
        check_connection(session)
    except (StoreUnavailable, DBAPIError):
        return True

    logger.warning("Database reachable after %s, treating as a statement failure", exc.__class__.__name__)
    return False
