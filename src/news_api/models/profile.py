"""Profile Pydantic models."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from news_api.models.article import CamelModel
from rds_postgres.models import Sentiment
from rds_postgres.profiles import UNSET, CreateProfileCommand, UpdateProfileCommand


class ProfileResponse(CamelModel):
    user_id: str
    mood: Sentiment | None = None
    blocklist: list[str] = Field(default_factory=list)
    personalization_enabled: bool
    created_at: datetime
    updated_at: datetime


class ProfileCreateRequest(CamelModel):
    mood: Sentiment | None = None
    blocklist: list[str] = Field(default_factory=list)
    personalization_enabled: bool = True

    def to_command(self) -> CreateProfileCommand:
        return CreateProfileCommand(
            mood=self.mood,
            blocklist=list(self.blocklist),
            personalization_enabled=self.personalization_enabled,
        )


class ProfileUpdateRequest(CamelModel):
    """Partial update; fields left out of the body are not touched."""

    mood: Sentiment | None = None
    blocklist: list[str] | None = None
    personalization_enabled: bool | None = None

    def to_command(self) -> UpdateProfileCommand:
        sent = self.model_fields_set
        return UpdateProfileCommand(
            mood=self.mood if "mood" in sent else UNSET,
            blocklist=self.blocklist if "blocklist" in sent else UNSET,
            personalization_enabled=(
                self.personalization_enabled
                if "personalization_enabled" in sent and self.personalization_enabled is not None
                else UNSET
            ),
        )
