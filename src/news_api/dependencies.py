"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Iterator

from fastapi import Depends
from sqlalchemy.orm import Session

from common.config import Config, get_config
from rds_postgres.connection import SessionFactory, build_session_factory, get_engine, get_session


def get_app_config() -> Config:
    return get_config()


@lru_cache(maxsize=1)
def get_session_factory() -> SessionFactory:
    return build_session_factory(get_engine())


def get_db_session(
    factory: Annotated[SessionFactory, Depends(get_session_factory)],
) -> Iterator[Session]:
    """One session per request, closed when the response is sent."""
    with get_session(factory) as session:
        yield session
