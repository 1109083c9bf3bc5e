"""Reminder endpoints, called by the scheduler with the cron secret."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from shared.schemas.reminders import ReminderOutcome, ReminderScanResult

from ..context import PortalContext, get_context, require_cron_secret

router = APIRouter(dependencies=[Depends(require_cron_secret)])


@router.api_route("/cron/reminder", methods=["GET", "POST"], response_model=ReminderScanResult)
def run_reminder_scan(
    stale_days: Optional[int] = Query(default=None, ge=0),
    ctx: PortalContext = Depends(get_context),
):
    """Mail every active project that has been idle for ``stale_days`` (default 3)."""
    return ctx.reminders.scan(stale_days=stale_days)


@router.post("/projects/{project_id}/reminder", response_model=ReminderOutcome)
def send_reminder(project_id: str, ctx: PortalContext = Depends(get_context)):
    """Remind one project now; 409 if it is already complete."""
    return ctx.reminders.remind(project_id)
