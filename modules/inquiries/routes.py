"""
Career application and investor inquiry endpoints.

Submissions are public and rate limited; listings are for staff.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies import get_inquiry_repository, get_rate_limiter
from api.middleware.auth import require_staff_session
from modules.ratelimit import RateLimiter, client_identifier
from modules.sessions import Session

from .models import (
    ApplicationList,
    ApplicationSubmitted,
    CareerApplication,
    InquiryList,
    InquirySubmitted,
    InvestmentRange,
    InvestorInquiry,
    Position,
)
from .repository import InquiryRepository

router = APIRouter()


def _with_request_metadata(metadata: dict[str, Any], request: Request) -> dict[str, Any]:
    return {
        **metadata,
        "user_agent": request.headers.get("user-agent"),
        "submitted_from": "website",
        "ip_address": request.headers.get("x-forwarded-for") or request.headers.get("x-real-ip"),
    }


@router.post("/careers", response_model=ApplicationSubmitted)
async def submit_application(
    application: CareerApplication,
    request: Request,
    repository: InquiryRepository = Depends(get_inquiry_repository),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> ApplicationSubmitted:
    limiter.enforce("public", f"public:{client_identifier(request)}")
    row = application.model_dump(mode="json")
    row["metadata"] = _with_request_metadata(application.metadata, request)
    created = repository.create_application(row)
    return ApplicationSubmitted(application_id=created.get("id"))


@router.get("/careers", response_model=ApplicationList)
async def list_applications(
    status: Optional[str] = Query(default="pending", max_length=50),
    position: Optional[Position] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    session: Session = Depends(require_staff_session),
    repository: InquiryRepository = Depends(get_inquiry_repository),
) -> ApplicationList:
    """Career applications for staff review."""
    rows, total = repository.list_applications(
        status, position.value if position else None, limit, offset
    )
    return ApplicationList(applications=rows, total=total, limit=limit, offset=offset)


@router.post("/investors", response_model=InquirySubmitted)
async def submit_investor_inquiry(
    inquiry: InvestorInquiry,
    request: Request,
    repository: InquiryRepository = Depends(get_inquiry_repository),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> InquirySubmitted:
    limiter.enforce("public", f"public:{client_identifier(request)}")
    row = inquiry.model_dump(mode="json")
    row["metadata"] = _with_request_metadata(inquiry.metadata, request)
    created = repository.create_investor_inquiry(row)
    return InquirySubmitted(inquiry_id=created.get("id"))


@router.get("/investors", response_model=InquiryList)
async def list_investor_inquiries(
    status: Optional[str] = Query(default="pending", max_length=50),
    investment_range: Optional[InvestmentRange] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    session: Session = Depends(require_staff_session),
    repository: InquiryRepository = Depends(get_inquiry_repository),
) -> InquiryList:
    """Investor inquiries for staff review."""
    rows, total = repository.list_investor_inquiries(
        status, investment_range.value if investment_range else None, limit, offset
    )
    return InquiryList(inquiries=rows, total=total, limit=limit, offset=offset)
