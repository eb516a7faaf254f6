"""
Admin statistics assembly.
"""

from datetime import datetime, timezone

from modules.ratelimit import RateLimiter

from .models import ActivityItem, AdminStats, SecurityAlert, SystemHealth
from .repository import AdminStatsRepository


def security_posture(limiter: RateLimiter, now: datetime) -> list[SecurityAlert]:
    """Static configuration checks plus the rate limiter's current load."""
    tracked = len(limiter.store) if hasattr(limiter.store, "__len__") else 0
    return [
        SecurityAlert(
            id="1",
            severity="low",
            title="Security headers configured",
            description="All recommended security headers are active",
            timestamp=now,
            resolved=True,
        ),
        SecurityAlert(
            id="2",
            severity="low",
            title="Admin RBAC active",
            description="Role-based access control is properly configured",
            timestamp=now,
            resolved=True,
        ),
        SecurityAlert(
            id="3",
            severity="low",
            title="Rate limiting active",
            description=f"{tracked} client identifiers currently tracked",
            timestamp=now,
            resolved=True,
        ),
    ]


def build_admin_stats(repository: AdminStatsRepository, limiter: RateLimiter) -> AdminStats:
    counts = repository.counts()
    activity = [
        ActivityItem(
            id=str(row["id"]),
            type="feedback",
            description=f"New {row.get('type')}: {row.get('title')}",
            timestamp=row.get("created_at"),
        )
        for row in repository.recent_feedback()
    ]
    return AdminStats(
        total_users=counts["profiles"],
        total_feedback=counts["feedback"],
        total_backlog_items=counts["backlog_items"],
        total_scores=counts["player_scores"],
        recent_activity=activity,
        security_alerts=security_posture(limiter, datetime.now(timezone.utc)),
        system_health=SystemHealth(),
    )
