"""
Ships module.

Ship designs saved from the ship designer, one per user and ship name.
"""

from .models import ShipDesign, SaveShipRequest

__all__ = ["ShipDesign", "SaveShipRequest"]
