"""Per-user profile storage (mood, blocklist, personalization switch)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from common.errors import DuplicateConflict, NotFoundError, ValidationFailure
from rds_postgres.models import Profile, Sentiment

logger = logging.getLogger(__name__)

MAX_BLOCKLIST_ITEMS = 100
MAX_BLOCKLIST_TERM_LENGTH = 200

# Marks a field the caller did not send, as opposed to an explicit null
UNSET = object()


@dataclass
class CreateProfileCommand:
    mood: Sentiment | None = None
    blocklist: list[str] = field(default_factory=list)
    personalization_enabled: bool = True


@dataclass
class UpdateProfileCommand:
    mood: object = UNSET
    blocklist: object = UNSET
    personalization_enabled: object = UNSET


def normalize_blocklist(terms: list[str]) -> list[str]:
    """Trim terms and drop case-insensitive repeats, keeping first spelling."""
    if len(terms) > MAX_BLOCKLIST_ITEMS:
        raise ValidationFailure("blocklist", f"Maximum {MAX_BLOCKLIST_ITEMS} items allowed in blocklist")

    normalized: list[str] = []
    seen: set[str] = set()
    for term in terms:
        term = (term or "").strip()
        if not term:
            raise ValidationFailure("blocklist", "Blocklist items cannot be empty")
        if len(term) > MAX_BLOCKLIST_TERM_LENGTH:
            raise ValidationFailure(
                "blocklist", f"Blocklist items must not exceed {MAX_BLOCKLIST_TERM_LENGTH} characters"
            )
        if term.lower() in seen:
            continue
        seen.add(term.lower())
        normalized.append(term)
    return normalized


def get_profile(session: Session, user_id: str) -> Profile | None:
    return session.execute(select(Profile).where(Profile.user_id == user_id)).scalar_one_or_none()


def create_profile(session: Session, user_id: str, command: CreateProfileCommand) -> Profile:
    """Create the caller's profile.

    Raises:
        DuplicateConflict: If the user already has a profile
    """
    profile = Profile(
        user_id=user_id,
        mood=command.mood,
        blocklist=normalize_blocklist(command.blocklist),
        personalization_enabled=command.personalization_enabled,
    )
    session.add(profile)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise DuplicateConflict(f"Profile already exists for user {user_id}") from exc

    logger.info("Created profile for user %s", user_id)
    return profile


def update_profile(session: Session, user_id: str, command: UpdateProfileCommand) -> Profile:
    """Apply a partial update to the caller's profile.

    Raises:
        NotFoundError: If the user has no profile
    """
    profile = get_profile(session, user_id)
    if profile is None:
        raise NotFoundError(f"Profile not found for user {user_id}")

    if command.mood is not UNSET:
        profile.mood = command.mood
    if command.blocklist is not UNSET:
        profile.blocklist = normalize_blocklist(command.blocklist or [])
    if command.personalization_enabled is not UNSET:
        profile.personalization_enabled = bool(command.personalization_enabled)

    session.commit()
    logger.info("Updated profile for user %s", user_id)
    return profile
