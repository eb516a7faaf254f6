"""
Community data models.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


class BacklogType(str, Enum):
    FEATURE = "feature"
    BUG = "bug"


class BacklogSortField(str, Enum):
    CREATED_AT = "created_at"
    VOTE_COUNT = "vote_count"
    PRIORITY = "priority"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class FeedbackType(str, Enum):
    BUG = "bug"
    FEATURE = "feature"
    SUGGESTION = "suggestion"
    SUPPORT = "support"
    OTHER = "other"


class FeedbackSource(str, Enum):
    WEB = "web"
    GAME = "game"


def _strip(v: Any) -> Any:
    return v.strip() if isinstance(v, str) else v


class NewBacklogItem(BaseModel):
    """Backlog item submitted by a signed-in user."""

    type: BacklogType
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=10)
    priority: Priority = Priority.MEDIUM
    tags: list[str] = Field(default_factory=list)
    source: FeedbackSource = FeedbackSource.WEB
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return _strip(v)


class Pagination(BaseModel):
    page: int
    page_size: int = Field(..., serialization_alias="pageSize")
    total: int
    total_pages: int = Field(..., serialization_alias="totalPages")

    @classmethod
    def of(cls, page: int, page_size: int, total: int) -> "Pagination":
        return cls(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=-(-total // page_size),
        )


class BacklogListResponse(BaseModel):
    success: bool = True
    items: list[dict[str, Any]]
    pagination: Pagination


class BacklogItemResponse(BaseModel):
    success: bool = True
    item: dict[str, Any]


class BacklogVoteRequest(BaseModel):
    backlog_item_id: str = Field(..., min_length=1)


class VoteResponse(BaseModel):
    success: bool = True
    vote: Optional[dict[str, Any]] = None
    vote_count: Optional[int] = None


class UserVotesResponse(BaseModel):
    success: bool = True
    votes: list[str]


class NewFeedback(BaseModel):
    """Feedback from the website or the game; may be anonymous."""

    type: FeedbackType
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=10)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    source: FeedbackSource = FeedbackSource.WEB
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return _strip(v)

    @field_validator("email", mode="before")
    @classmethod
    def empty_email(cls, v: Any) -> Any:
        v = _strip(v)
        return v or None


class FeedbackSummary(BaseModel):
    id: str
    type: str
    status: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"extra": "ignore"}


class FeedbackCreatedResponse(BaseModel):
    success: bool = True
    message: str = "Feedback submitted successfully"
    feedback: FeedbackSummary


class FeedbackListResponse(BaseModel):
    data: list[dict[str, Any]]
    total: int
    page: int
    page_size: int = Field(..., serialization_alias="pageSize")
    total_pages: int = Field(..., serialization_alias="totalPages")


class FeedbackVoteRequest(BaseModel):
    feedback_id: str = Field(..., min_length=1)
