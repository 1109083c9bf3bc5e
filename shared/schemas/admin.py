"""Admin dashboard schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .projects import ProjectStatus

StatusFilter = Literal["all", "active", "completed", "paused"]
Urgency = Literal["urgent", "warning", "normal"]


class DashboardStats(BaseModel):
    total: int = 0
    active: int = 0
    completed: int = 0
    paused: int = 0
    average_completion: int = Field(default=0, ge=0, le=100)


class DashboardRow(BaseModel):
    id: str
    company_name: str
    manager_name: str
    email: str
    phone: str
    status: ProjectStatus
    completion_rate: int
    completed_steps: int
    next_step: Optional[int] = None
    urgency: Urgency = "normal"
    days_since_created: int = 0
    created_at: datetime
    updated_at: datetime


class Dashboard(BaseModel):
    filter: StatusFilter = "all"
    stats: DashboardStats = Field(default_factory=DashboardStats)
    projects: List[DashboardRow] = Field(default_factory=list)
