"""Celery application configuration.

Redis is the broker and result backend.  Beat runs the daily reminder sweep;
the sweep itself executes inside the API process (it owns the in-memory
store), so the task only calls the bearer-guarded cron endpoint.
"""

from __future__ import annotations

import logging
import ssl
from urllib.parse import parse_qs, urlparse

from celery import Celery
from celery.schedules import crontab
from celery.signals import worker_ready

from src.config.settings import load_settings

logger = logging.getLogger(__name__)

settings = load_settings()
REDIS_URL = settings.redis_url

# -------------------------------------------------------------------
# TLS / SSL configuration for rediss:// brokers
# -------------------------------------------------------------------
_use_tls = REDIS_URL.startswith("rediss://")

broker_opts: dict = {}

if _use_tls:
    # ssl_cert_reqs may be given in the query string (e.g. ?ssl_cert_reqs=CERT_NONE)
    _qs = parse_qs(urlparse(REDIS_URL).query)
    _cert_reqs_str = (_qs.get("ssl_cert_reqs", ["CERT_REQUIRED"])[0]).upper()
    _ssl_cert_reqs = {
        "CERT_NONE": ssl.CERT_NONE,
        "CERT_OPTIONAL": ssl.CERT_OPTIONAL,
    }.get(_cert_reqs_str, ssl.CERT_REQUIRED)

    broker_opts = {
        "broker_use_ssl": {"ssl_cert_reqs": _ssl_cert_reqs},
        "redis_backend_use_ssl": {"ssl_cert_reqs": _ssl_cert_reqs},
    }

app = Celery(
    "intake_worker",
    broker=REDIS_URL,
    backend=REDIS_URL,
    include=["services.worker.tasks.reminders"],
)

app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="Asia/Seoul",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=120,
    task_soft_time_limit=90,
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    broker_connection_retry_on_startup=True,
    broker_connection_max_retries=10,
    beat_schedule={
        "daily-reminder-scan": {
            "task": "tasks.reminders.trigger_reminder_scan",
            "schedule": crontab(hour=settings.reminder_cron_hour, minute=0),
        },
    },
    **broker_opts,
)


@worker_ready.connect
def _on_worker_ready(**kwargs):
    """Log connection status when worker successfully starts."""
    masked = REDIS_URL[:20] + "..." if len(REDIS_URL) > 20 else REDIS_URL
    logger.info("Worker ready, broker: %s (TLS=%s)", masked, _use_tls)
    if not settings.cron_secret:
        logger.warning("No CRON_SECRET, the portal will reject scheduled reminder scans")
