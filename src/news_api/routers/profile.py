"""Profile API endpoints for the calling user."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from common.errors import PreconditionFailure
from news_api.auth import Caller, require_caller
from news_api.dependencies import get_db_session
from news_api.models.profile import ProfileCreateRequest, ProfileResponse, ProfileUpdateRequest
from rds_postgres.profiles import create_profile, get_profile, update_profile

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileResponse)
def read_profile(
    caller: Annotated[Caller, Depends(require_caller)],
    session: Annotated[Session, Depends(get_db_session)],
):
    profile = get_profile(session, caller.user_id)
    if profile is None:
        raise PreconditionFailure(PreconditionFailure.PROFILE_NOT_FOUND, "User profile not found")
    return ProfileResponse.model_validate(profile)


@router.post("", response_model=ProfileResponse, status_code=201)
def create_own_profile(
    body: ProfileCreateRequest,
    caller: Annotated[Caller, Depends(require_caller)],
    session: Annotated[Session, Depends(get_db_session)],
):
    """Create the caller's profile. Fails with 409 if one already exists."""
    profile = create_profile(session, caller.user_id, body.to_command())
    return ProfileResponse.model_validate(profile)


@router.patch("", response_model=ProfileResponse)
def update_own_profile(
    body: ProfileUpdateRequest,
    caller: Annotated[Caller, Depends(require_caller)],
    session: Annotated[Session, Depends(get_db_session)],
):
    profile = update_profile(session, caller.user_id, body.to_command())
    return ProfileResponse.model_validate(profile)
