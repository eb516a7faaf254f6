"""
Ship design models.
"""

from typing import Any
from pydantic import BaseModel, Field


class ShipDesign(BaseModel):
    """Designer payload. Only the name is interpreted; the rest is stored as-is."""

    name: str = Field(..., min_length=1, max_length=100)

    model_config = {"extra": "allow"}


class SaveShipRequest(BaseModel):
    ship_data: ShipDesign


class SaveShipResponse(BaseModel):
    success: bool = True
    message: str
    data: dict[str, Any]
