"""
Admin statistics models.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"


class ActivityItem(BaseModel):
    id: str
    type: str
    description: str
    timestamp: Optional[datetime] = None


class SecurityAlert(BaseModel):
    id: str
    severity: str
    title: str
    description: str
    timestamp: datetime
    resolved: bool


class SystemHealth(BaseModel):
    database: HealthStatus = HealthStatus.HEALTHY
    authentication: HealthStatus = HealthStatus.HEALTHY
    api: HealthStatus = HealthStatus.HEALTHY


class AdminStats(BaseModel):
    total_users: int = Field(..., serialization_alias="totalUsers")
    total_feedback: int = Field(..., serialization_alias="totalFeedback")
    total_backlog_items: int = Field(..., serialization_alias="totalBacklogItems")
    total_scores: int = Field(..., serialization_alias="totalScores")
    recent_activity: list[ActivityItem] = Field(..., serialization_alias="recentActivity")
    security_alerts: list[SecurityAlert] = Field(..., serialization_alias="securityAlerts")
    system_health: SystemHealth = Field(..., serialization_alias="systemHealth")
