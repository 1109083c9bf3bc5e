"""Reminder scanning for stalled projects."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import httpx

from shared.schemas.projects import Project
from shared.schemas.reminders import ReminderOutcome, ReminderScanResult

from .errors import StatusConflict
from .notifications import DeliveryReport, NotificationDispatcher
from .store import ProjectStore

logger = logging.getLogger(__name__)

DEFAULT_STALE_DAYS = 3


def is_stale(project: Project, now: datetime, stale_days: int) -> bool:
    """Active, incomplete and untouched for at least ``stale_days`` days."""
    return (
        project.status == "active"
        and project.completion_rate < 100
        and now - project.updated_at >= timedelta(days=stale_days)
    )


def _outcome(project: Project, report: DeliveryReport) -> ReminderOutcome:
    if report.ok:
        return ReminderOutcome(project_id=project.id, company_name=project.company_name, status="sent")
    errors = "; ".join(d.error or "unknown error" for d in report.failures)
    return ReminderOutcome(
        project_id=project.id,
        company_name=project.company_name,
        status="failed",
        error=errors or "no recipient",
    )


class ReminderScanner:
    def __init__(
        self,
        store: ProjectStore,
        dispatcher: NotificationDispatcher,
        stale_days: int = DEFAULT_STALE_DAYS,
    ):
        self.store = store
        self.dispatcher = dispatcher
        self.stale_days = stale_days

    def scan(self, now: Optional[datetime] = None, stale_days: Optional[int] = None) -> ReminderScanResult:
        """Send one reminder to every stale project.

        A failed send is recorded and the sweep moves on to the next project.
        """
        now = now or self.store.now()
        days = self.stale_days if stale_days is None else stale_days

        candidates = [p for p in self.store.list() if is_stale(p, now, days)]
        logger.info("Reminder scan: %d stale project(s) (threshold %d days)", len(candidates), days)

        result = ReminderScanResult(scanned_at=now, stale_days=days, candidates=len(candidates))
        for project in candidates:
            try:
                report = self.dispatcher.notify_reminder(project)
            except Exception as e:
                logger.error("Reminder for %s failed: %s", project.id, e)
                result.results.append(
                    ReminderOutcome(
                        project_id=project.id,
                        company_name=project.company_name,
                        status="failed",
                        error=str(e),
                    )
                )
                continue
            result.results.append(_outcome(project, report))

        logger.info("Reminder scan done: %d sent, %d failed", result.sent, result.failed)
        return result

    def remind(self, project_id: str) -> ReminderOutcome:
        """Send a reminder to one project regardless of how long it has been idle."""
        project = self.store.get(project_id)
        if project.is_complete:
            raise StatusConflict(
                f"Project {project_id} is already complete", code="PROJECT_ALREADY_COMPLETE"
            )
        return _outcome(project, self.dispatcher.notify_reminder(project))


def request_reminder_scan(
    base_url: str,
    secret: str,
    timeout: float = 30.0,
    stale_days: Optional[int] = None,
) -> Dict[str, Any]:
    """Trigger the scan on a running portal over HTTP.

    Raises ``httpx.HTTPStatusError`` on a non-2xx answer (e.g. a wrong secret).
    """
    url = f"{base_url.rstrip('/')}/v1/cron/reminder"
    params = {"stale_days": stale_days} if stale_days is not None else None
    resp = httpx.post(
        url,
        headers={"Authorization": f"Bearer {secret}"},
        params=params,
        timeout=timeout,
    )
    resp.raise_for_status()
    data = resp.json()
    logger.info("Reminder scan via %s: %s sent, %s failed", url, data.get("sent"), data.get("failed"))
    return data
