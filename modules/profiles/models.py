"""
Profile data models.
"""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field, model_validator

from shared.models import Role

PROFILE_UPDATE_FIELDS = ("username", "avatar_url", "faction_choice", "is_public")


class ProfileUpdate(BaseModel):
    """
    Fields a user may change on their own profile.

    Unknown fields are ignored; at least one allowed field is required.
    """

    username: Optional[str] = Field(default=None, min_length=1, max_length=50)
    avatar_url: Optional[str] = Field(default=None, max_length=2048)
    faction_choice: Optional[str] = Field(default=None, max_length=50)
    is_public: Optional[bool] = None

    model_config = {"extra": "ignore"}

    @model_validator(mode="after")
    def require_one_field(self) -> "ProfileUpdate":
        if not self.model_fields_set.intersection(PROFILE_UPDATE_FIELDS):
            raise ValueError("No valid fields to update")
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(include=set(PROFILE_UPDATE_FIELDS), exclude_unset=True)


class ProfileResponse(BaseModel):
    profile: dict[str, Any]


class ProfileUpdateResponse(BaseModel):
    success: bool = True
    profile: dict[str, Any]


class ProfileStats(BaseModel):
    total_kills: int = 0
    total_deaths: int = 0
    total_wins: int = 0
    total_losses: int = 0
    total_matches: int = 0
    highest_score: int = 0
    total_playtime: int = 0
    playtime_formatted: str = "0h 0m"
    win_rate: str = "0.0"
    kd_ratio: str = "0.00"


class ProfileMeta(BaseModel):
    """Details only the owner and staff see."""

    role: Role = Role.USER
    ship_class: Optional[str] = None


class ProfileAccess(BaseModel):
    is_owner: bool
    is_admin: bool
    can_edit: bool
    can_view_private: bool


class PublicProfile(BaseModel):
    id: str
    username: str = "Anonymous"
    avatar_url: Optional[str] = None
    faction_choice: Optional[str] = None
    created_at: Optional[datetime] = None
    level: int = 1
    xp: int = 0
    stats: ProfileStats
    is_public: bool = True
    meta: Optional[ProfileMeta] = None
    access: ProfileAccess


class PublicProfileResponse(BaseModel):
    profile: PublicProfile
