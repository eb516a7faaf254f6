"""
Profiles module.

Own profile read/update and the public profile view with privacy rules
and derived player statistics.
"""

from .models import ProfileUpdate, PublicProfile, ProfileStats
from .service import build_public_profile, derive_stats

__all__ = [
    "ProfileUpdate",
    "PublicProfile",
    "ProfileStats",
    "build_public_profile",
    "derive_stats",
]
