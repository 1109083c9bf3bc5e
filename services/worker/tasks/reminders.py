"""Celery task for the daily reminder sweep."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from services.worker.celery_app import app, settings
from src.intake.reminders import request_reminder_scan

logger = logging.getLogger(__name__)


@app.task(
    bind=True,
    name="tasks.reminders.trigger_reminder_scan",
    autoretry_for=(httpx.TransportError,),
    retry_backoff=True,
    max_retries=3,
)
def trigger_reminder_scan(self, base_url: str = "", stale_days: Optional[int] = None):
    """Ask the portal to mail every stale project.

    Network errors are retried; an HTTP error (e.g. 401 for a wrong secret)
    fails the task immediately.
    """
    url = base_url or settings.base_url
    result = request_reminder_scan(url, settings.cron_secret, stale_days=stale_days)
    logger.info(
        "Reminder scan finished: %s candidate(s), %s sent, %s failed",
        result.get("candidates"), result.get("sent"), result.get("failed"),
    )
    return result
