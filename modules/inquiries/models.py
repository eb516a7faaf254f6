"""
Inquiry data models.
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field

CONTACT_EMAIL_PATTERN = r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$"


class Position(str, Enum):
    GAME_DEVELOPER = "Game Developer"
    ARTIST_3D = "3D Artist"
    UI_UX_DESIGNER = "UI/UX Designer"
    SOUND_DESIGNER = "Sound Designer"
    COMMUNITY_MANAGER = "Community Manager"
    QA_TESTER = "QA Tester"
    OTHER = "Other"


class InvestmentRange(str, Enum):
    UNDER_50K = "Less than $50K"
    FROM_50K = "$50K - $100K"
    FROM_100K = "$100K - $500K"
    FROM_500K = "$500K - $1M"
    FROM_1M = "$1M - $5M"
    OVER_5M = "$5M+"
    UNDISCLOSED = "Prefer not to say"


class CareerApplication(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., pattern=CONTACT_EMAIL_PATTERN)
    position: Position
    portfolio: Optional[str] = Field(default=None, max_length=2048)
    message: str = Field(..., min_length=20)
    resume_url: Optional[str] = Field(default=None, max_length=2048)
    metadata: dict[str, Any] = Field(default_factory=dict)


class InvestorInquiry(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., pattern=CONTACT_EMAIL_PATTERN)
    phone: str = Field(..., min_length=10, max_length=50)
    company: Optional[str] = Field(default=None, max_length=200)
    investment_range: InvestmentRange
    message: str = Field(..., min_length=20)
    metadata: dict[str, Any] = Field(default_factory=dict)


class ApplicationSubmitted(BaseModel):
    success: bool = True
    message: str = "Application submitted successfully"
    application_id: Optional[str] = None


class InquirySubmitted(BaseModel):
    success: bool = True
    message: str = "Investment inquiry submitted successfully"
    inquiry_id: Optional[str] = None


class ApplicationList(BaseModel):
    success: bool = True
    applications: list[dict[str, Any]]
    total: int
    limit: int
    offset: int


class InquiryList(BaseModel):
    success: bool = True
    inquiries: list[dict[str, Any]]
    total: int
    limit: int
    offset: int
