"""
Admin API endpoints.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_admin_stats_repository, get_rate_limiter
from api.middleware.auth import require_staff_session
from modules.ratelimit import RateLimiter
from modules.sessions import Session

from .models import AdminStats
from .repository import AdminStatsRepository
from .service import build_admin_stats

router = APIRouter()


@router.get("/stats", response_model=AdminStats)
async def admin_stats(
    session: Session = Depends(require_staff_session),
    repository: AdminStatsRepository = Depends(get_admin_stats_repository),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> AdminStats:
    """Dashboard numbers. Staff and admins only."""
    return build_admin_stats(repository, limiter)
