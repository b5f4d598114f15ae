"""Service-only endpoints used by the scheduler."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from classify_articles.classify_articles import Classifier
from common.config import Config
from ingest_articles.ingest_articles import run_ingestion_cycle
from news_api.auth import require_service_role
from news_api.dependencies import get_app_config, get_session_factory
from news_api.models.ingest import CycleSummaryResponse
from rds_postgres.connection import SessionFactory

router = APIRouter(prefix="/internal", tags=["internal"])


@router.post("/ingest", response_model=CycleSummaryResponse, dependencies=[Depends(require_service_role)])
def trigger_ingestion(
    config: Annotated[Config, Depends(get_app_config)],
    session_factory: Annotated[SessionFactory, Depends(get_session_factory)],
):
    """Run one ingestion cycle synchronously and return its summary."""
    classifier = Classifier.from_config(config.classifier)
    summary = run_ingestion_cycle(session_factory, classifier, config)
    return CycleSummaryResponse.model_validate(summary)
