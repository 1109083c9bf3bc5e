"""Admin dashboard aggregation."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from shared.schemas.admin import Dashboard, DashboardRow, DashboardStats
from shared.schemas.projects import Project

URGENT_AFTER_DAYS = 7
WARNING_AFTER_DAYS = 5
WARNING_BELOW_RATE = 50


def days_since(moment: datetime, now: datetime) -> int:
    return max(0, (now - moment).days)


def urgency(project: Project, now: datetime) -> str:
    """``urgent``: nothing submitted after a week; ``warning``: under half after five days."""
    age = days_since(project.created_at, now)
    if project.completion_rate == 0 and age > URGENT_AFTER_DAYS:
        return "urgent"
    if project.completion_rate < WARNING_BELOW_RATE and age > WARNING_AFTER_DAYS:
        return "warning"
    return "normal"


def matches_filter(project: Project, status_filter: str) -> bool:
    if status_filter == "active":
        return project.status == "active" and project.completion_rate < 100
    if status_filter == "completed":
        return project.completion_rate == 100
    if status_filter == "paused":
        return project.status == "paused"
    return True


def build_stats(projects: List[Project]) -> DashboardStats:
    total = len(projects)
    average = round(sum(p.completion_rate for p in projects) / total) if total else 0
    return DashboardStats(
        total=total,
        active=sum(1 for p in projects if matches_filter(p, "active")),
        completed=sum(1 for p in projects if matches_filter(p, "completed")),
        paused=sum(1 for p in projects if matches_filter(p, "paused")),
        average_completion=average,
    )


def to_row(project: Project, now: datetime) -> DashboardRow:
    return DashboardRow(
        id=project.id,
        company_name=project.company_name,
        manager_name=project.manager_name,
        email=project.email,
        phone=project.phone,
        status=project.status,
        completion_rate=project.completion_rate,
        completed_steps=project.completed_step_count,
        next_step=project.next_step,
        urgency=urgency(project, now),
        days_since_created=days_since(project.created_at, now),
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


def build_dashboard(
    projects: Iterable[Project],
    status_filter: str = "all",
    now: Optional[datetime] = None,
) -> Dashboard:
    """Stats over every project plus the filtered rows, most recently updated first."""
    now = now or datetime.now(timezone.utc)
    projects = list(projects)
    rows = [to_row(p, now) for p in projects if matches_filter(p, status_filter)]
    rows.sort(key=lambda r: r.updated_at, reverse=True)
    return Dashboard(filter=status_filter, stats=build_stats(projects), projects=rows)
