"""Health check endpoint."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from news_api.dependencies import get_db_session
from rds_postgres.connection import check_connection

router = APIRouter(tags=["health"])


@router.get("/health")
def health(session: Annotated[Session, Depends(get_db_session)]):
    """Returns ok when the database answers; 503 otherwise."""
    check_connection(session)
    return {"status": "ok"}
