"""
Community API endpoints: backlog, feedback and votes.

The acting user always comes from the session or bearer token, never
from the request body.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies import get_community_repository, get_rate_limiter
from api.middleware.auth import get_current_user, optional_csrf_user, require_csrf_user
from modules.ratelimit import RateLimiter, client_identifier, client_ip
from shared.models import AuthenticatedUser

from .models import (
    BacklogItemResponse,
    BacklogListResponse,
    BacklogSortField,
    BacklogType,
    BacklogVoteRequest,
    FeedbackCreatedResponse,
    FeedbackListResponse,
    FeedbackSummary,
    FeedbackType,
    FeedbackVoteRequest,
    NewBacklogItem,
    NewFeedback,
    Pagination,
    UserVotesResponse,
    VoteResponse,
)
from .repository import CommunityRepository

router = APIRouter()


# -----------------------------------------------------------------------------
# Backlog
# -----------------------------------------------------------------------------


@router.get("/backlog", response_model=BacklogListResponse)
async def list_backlog(
    request: Request,
    type: Optional[BacklogType] = Query(default=None),
    status: Optional[str] = Query(default=None, max_length=50),
    search: Optional[str] = Query(default=None, max_length=200),
    sort_by: BacklogSortField = Query(default=BacklogSortField.CREATED_AT, alias="sortBy"),
    sort_order: str = Query(default="desc", pattern="^(asc|desc)$", alias="sortOrder"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100, alias="pageSize"),
    repository: CommunityRepository = Depends(get_community_repository),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> BacklogListResponse:
    """Browse backlog items with filters, search and pagination."""
    limiter.enforce("public", f"public:{client_identifier(request)}")
    items, total = repository.list_backlog(
        type, status, search, sort_by, sort_order == "asc", page, page_size
    )
    return BacklogListResponse(items=items, pagination=Pagination.of(page, page_size, total))


@router.post("/backlog", response_model=BacklogItemResponse, status_code=201)
async def create_backlog_item(
    item: NewBacklogItem,
    user: AuthenticatedUser = Depends(require_csrf_user),
    repository: CommunityRepository = Depends(get_community_repository),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> BacklogItemResponse:
    """Submit a feature request or bug report."""
    limiter.enforce("api", f"api:{user.id}")
    created = repository.create_backlog_item(user.id, item.model_dump(mode="json"))
    return BacklogItemResponse(item=created)


@router.get("/backlog/vote", response_model=UserVotesResponse)
async def list_backlog_votes(
    user: AuthenticatedUser = Depends(get_current_user),
    repository: CommunityRepository = Depends(get_community_repository),
) -> UserVotesResponse:
    """Backlog items the caller has voted on."""
    return UserVotesResponse(votes=repository.list_backlog_votes(user.id))


@router.post("/backlog/vote", response_model=VoteResponse)
async def vote_backlog_item(
    body: BacklogVoteRequest,
    user: AuthenticatedUser = Depends(require_csrf_user),
    repository: CommunityRepository = Depends(get_community_repository),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> VoteResponse:
    limiter.enforce("api", f"api:{user.id}")
    vote = repository.add_backlog_vote(user.id, body.backlog_item_id)
    return VoteResponse(vote=vote)


@router.delete("/backlog/vote", response_model=VoteResponse, response_model_exclude_none=True)
async def unvote_backlog_item(
    backlog_item_id: str = Query(..., min_length=1),
    user: AuthenticatedUser = Depends(require_csrf_user),
    repository: CommunityRepository = Depends(get_community_repository),
) -> VoteResponse:
    repository.remove_backlog_vote(user.id, backlog_item_id)
    return VoteResponse()


# -----------------------------------------------------------------------------
# Feedback
# -----------------------------------------------------------------------------


@router.post("/feedback", response_model=FeedbackCreatedResponse, status_code=201)
async def submit_feedback(
    feedback: NewFeedback,
    request: Request,
    user: Optional[AuthenticatedUser] = Depends(optional_csrf_user),
    repository: CommunityRepository = Depends(get_community_repository),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> FeedbackCreatedResponse:
    """
    Submit feedback, signed in or anonymously.

    Request details (IP, user agent, time) are added to the metadata.
    """
    limiter.enforce("api", f"feedback:{client_identifier(request)}")

    row = feedback.model_dump(mode="json")
    row["metadata"] = {
        **feedback.metadata,
        "ip_address": client_ip(request),
        "user_agent": request.headers.get("user-agent") or "unknown",
        "submitted_via_api": True,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    created = repository.create_feedback(user.id if user else None, row)
    return FeedbackCreatedResponse(feedback=FeedbackSummary.model_validate(created))


@router.get("/feedback", response_model=FeedbackListResponse)
async def list_my_feedback(
    status: Optional[str] = Query(default=None, max_length=50),
    type: Optional[FeedbackType] = Query(default=None),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100, alias="pageSize"),
    user: AuthenticatedUser = Depends(get_current_user),
    repository: CommunityRepository = Depends(get_community_repository),
) -> FeedbackListResponse:
    """The caller's own feedback, newest first."""
    rows, total = repository.list_feedback(user.id, status, type, page, page_size)
    pagination = Pagination.of(page, page_size, total)
    return FeedbackListResponse(
        data=rows,
        total=total,
        page=page,
        page_size=page_size,
        total_pages=pagination.total_pages,
    )


@router.post("/feedback/vote", response_model=VoteResponse)
async def vote_feedback(
    body: FeedbackVoteRequest,
    user: AuthenticatedUser = Depends(require_csrf_user),
    repository: CommunityRepository = Depends(get_community_repository),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> VoteResponse:
    """Upvote feedback. Voting twice is a conflict."""
    limiter.enforce("api", f"api:{user.id}")
    vote = repository.add_feedback_vote(user.id, body.feedback_id)
    return VoteResponse(vote=vote, vote_count=repository.feedback_vote_count(body.feedback_id))


@router.delete("/feedback/vote", response_model=VoteResponse, response_model_exclude_none=True)
async def unvote_feedback(
    feedback_id: str = Query(..., min_length=1),
    user: AuthenticatedUser = Depends(require_csrf_user),
    repository: CommunityRepository = Depends(get_community_repository),
) -> VoteResponse:
    repository.remove_feedback_vote(user.id, feedback_id)
    return VoteResponse(vote_count=repository.feedback_vote_count(feedback_id))
