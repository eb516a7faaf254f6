"""
Ship designer endpoint.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_rate_limiter, get_ship_repository
from api.middleware.auth import require_csrf_user
from modules.ratelimit import RateLimiter
from shared.models import AuthenticatedUser

from .models import SaveShipRequest, SaveShipResponse
from .repository import ShipRepository

router = APIRouter()


@router.post("/save-ship", response_model=SaveShipResponse)
async def save_ship(
    body: SaveShipRequest,
    user: AuthenticatedUser = Depends(require_csrf_user),
    repository: ShipRepository = Depends(get_ship_repository),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> SaveShipResponse:
    """Save a design for the caller, replacing one with the same name."""
    limiter.enforce("api", f"api:{user.id}")
    row, created = repository.save_ship(user.id, body.ship_data.model_dump(mode="json"))
    message = "Ship saved successfully" if created else "Ship updated successfully"
    return SaveShipResponse(message=message, data=row)
