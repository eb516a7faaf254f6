"""
Profile API endpoints.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_profile_repository, get_rate_limiter, get_session_codec
from api.middleware.auth import get_session, require_session
from modules.auth.exceptions import InvalidCSRFTokenError
from modules.ratelimit import RateLimiter
from modules.sessions import Session, SessionCodec, validate_csrf_from_request

from .exceptions import ProfileNotFoundError
from .models import ProfileResponse, ProfileUpdate, ProfileUpdateResponse, PublicProfileResponse
from .repository import ProfileRepository
from .service import build_public_profile

router = APIRouter()


@router.get("", response_model=ProfileResponse)
async def get_my_profile(
    session: Session = Depends(require_session),
    repository: ProfileRepository = Depends(get_profile_repository),
) -> ProfileResponse:
    """The signed-in user's full profile row."""
    profile = repository.get_profile(session.user_id)
    if profile is None:
        raise ProfileNotFoundError(session.user_id)
    return ProfileResponse(profile=profile)


@router.patch("", response_model=ProfileUpdateResponse)
async def update_my_profile(
    update: ProfileUpdate,
    request: Request,
    session: Session = Depends(require_session),
    codec: SessionCodec = Depends(get_session_codec),
    repository: ProfileRepository = Depends(get_profile_repository),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> ProfileUpdateResponse:
    """Change username, avatar, faction or visibility."""
    if not await validate_csrf_from_request(request, codec):
        raise InvalidCSRFTokenError()
    limiter.enforce("profile_update", f"profile:{session.user_id}")

    profile = repository.update_profile(session.user_id, update.changes())
    if profile is None:
        raise ProfileNotFoundError(session.user_id)
    return ProfileUpdateResponse(profile=profile)


@router.get("/{user_id}", response_model=PublicProfileResponse)
async def get_public_profile(
    user_id: UUID,
    viewer: Optional[Session] = Depends(get_session),
    repository: ProfileRepository = Depends(get_profile_repository),
) -> PublicProfileResponse:
    """Another player's profile, subject to its privacy setting."""
    profile = repository.get_public_profile(str(user_id))
    if profile is None:
        raise ProfileNotFoundError(str(user_id))
    return PublicProfileResponse(profile=build_public_profile(profile, viewer))
