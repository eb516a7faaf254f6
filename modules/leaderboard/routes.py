"""
Leaderboard API endpoints.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies import get_leaderboard_repository, get_rate_limiter
from api.middleware.auth import require_csrf_user
from modules.ratelimit import RateLimiter, client_identifier
from shared.models import AuthenticatedUser

from .models import (
    GameMode,
    LeaderboardResponse,
    LeaderboardWindow,
    ScoreSubmission,
    ScoreSubmissionResponse,
    SortDirection,
    SortField,
)
from .repository import LeaderboardRepository

router = APIRouter()


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    request: Request,
    mode: GameMode = Query(default=GameMode.GLOBAL),
    window: LeaderboardWindow = Query(default=LeaderboardWindow.MONTH),
    page: int = Query(default=1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(default=50, ge=1, le=100, alias="pageSize"),
    sort_field: SortField = Query(default=SortField.SCORE, alias="sortField"),
    sort_dir: SortDirection = Query(default=SortDirection.DESC, alias="sortDir"),
    repository: LeaderboardRepository = Depends(get_leaderboard_repository),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> LeaderboardResponse:
    """Verified scores, ranked, for a time window and game mode."""
    limiter.enforce("public", f"public:{client_identifier(request)}")
    cutoff = window.cutoff(datetime.now(timezone.utc))
    return repository.get_leaderboard(mode, cutoff, sort_field, sort_dir, page, page_size)


@router.post("/submit-score", response_model=ScoreSubmissionResponse)
async def submit_score(
    submission: ScoreSubmission,
    user: AuthenticatedUser = Depends(require_csrf_user),
    repository: LeaderboardRepository = Depends(get_leaderboard_repository),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> ScoreSubmissionResponse:
    """
    Submit a score for the authenticated player.

    The player is always the caller; scores start unverified.
    """
    limiter.enforce("score_submit", f"score:{user.id}")
    row = repository.insert_score(user.id, submission.model_dump(mode="json"))
    return ScoreSubmissionResponse(score=row)
