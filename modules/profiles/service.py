"""
Public profile rules.

A private profile is visible to its owner and to staff; everyone else
gets PrivateProfileError. Derived statistics are computed from the raw
counters on the profile row.
"""

from typing import Any, Optional

from modules.sessions import Session
from shared.models import Role

from .exceptions import PrivateProfileError
from .models import ProfileAccess, ProfileMeta, ProfileStats, PublicProfile


def _count(profile: dict[str, Any], key: str) -> int:
    return int(profile.get(key) or 0)


def derive_stats(profile: dict[str, Any]) -> ProfileStats:
    """Win rate (percent, 1 dp), K/D (2 dp) and playtime as "Xh Ym"."""
    kills = _count(profile, "total_kills")
    deaths = _count(profile, "total_deaths")
    wins = _count(profile, "total_wins")
    losses = _count(profile, "total_losses")
    playtime = _count(profile, "total_playtime")

    matches = wins + losses
    win_rate = wins / matches * 100 if matches else 0.0
    kd_ratio = kills / deaths if deaths else float(kills)

    return ProfileStats(
        total_kills=kills,
        total_deaths=deaths,
        total_wins=wins,
        total_losses=losses,
        total_matches=matches,
        highest_score=_count(profile, "highest_score"),
        total_playtime=playtime,
        playtime_formatted=f"{playtime // 3600}h {(playtime % 3600) // 60}m",
        win_rate=f"{win_rate:.1f}",
        kd_ratio=f"{kd_ratio:.2f}",
    )


def build_public_profile(profile: dict[str, Any], viewer: Optional[Session]) -> PublicProfile:
    """
    Shape a profile row for a viewer.

    Raises:
        PrivateProfileError: The profile is private and the viewer is
            neither its owner nor staff
    """
    is_owner = viewer is not None and viewer.user_id == profile["id"]
    is_staff = viewer is not None and viewer.role.is_staff
    is_public = bool(profile.get("is_public"))

    if not is_public and not is_owner and not is_staff:
        raise PrivateProfileError()

    privileged = is_owner or is_staff
    return PublicProfile(
        id=profile["id"],
        username=profile.get("username") or "Anonymous",
        avatar_url=profile.get("avatar_url"),
        faction_choice=profile.get("faction_choice"),
        created_at=profile.get("created_at"),
        level=profile.get("level") or 1,
        xp=profile.get("xp") or 0,
        stats=derive_stats(profile),
        is_public=is_public,
        meta=ProfileMeta(
            role=Role.parse(profile.get("role")),
            ship_class=profile.get("ship_class"),
        ) if privileged else None,
        access=ProfileAccess(
            is_owner=is_owner,
            is_admin=is_staff,
            can_edit=is_owner,
            can_view_private=privileged,
        ),
    )
