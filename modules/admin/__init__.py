"""
Admin module.

Site statistics for staff: table counts, recent activity, security
posture and system health.
"""

from .models import AdminStats, ActivityItem, SecurityAlert, SystemHealth

__all__ = ["AdminStats", "ActivityItem", "SecurityAlert", "SystemHealth"]
