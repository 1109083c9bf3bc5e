"""Process-wide service wiring.

``build_context`` constructs the store, transports and services once at
startup; routers reach them through ``Depends(get_context)``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, Request

from core.storage import LocalFileStorage
from core.transports import (
    MailTransport,
    MirrorStorage,
    create_mail_transport,
    create_mirror_storage,
)
from src.config.settings import PortalSettings
from src.intake.errors import Unauthorized
from src.intake.notifications import NotificationDispatcher
from src.intake.reminders import ReminderScanner
from src.intake.store import Clock, ProjectStore
from src.intake.uploads import UploadHandler
from src.intake.wizard import WizardService

logger = logging.getLogger(__name__)


@dataclass
class PortalContext:
    settings: PortalSettings
    store: ProjectStore
    wizard: WizardService
    uploads: UploadHandler
    notifier: NotificationDispatcher
    reminders: ReminderScanner
    mail: MailTransport
    mirror: MirrorStorage


def build_context(
    settings: PortalSettings,
    *,
    clock: Optional[Clock] = None,
    mail_transport: Optional[MailTransport] = None,
    mirror: Optional[MirrorStorage] = None,
) -> PortalContext:
    """Wire every service; explicit transports override the settings-based choice."""
    store = ProjectStore(clock=clock)
    mail = mail_transport or create_mail_transport(settings)
    mirror = mirror or create_mirror_storage(settings)

    notifier = NotificationDispatcher(
        mail,
        operator_email=settings.operator_email,
        base_url=settings.base_url,
        brand=settings.brand,
        clock=store.clock,
    )
    context = PortalContext(
        settings=settings,
        store=store,
        wizard=WizardService(store, staging=LocalFileStorage(settings.staging_dir), mirror=mirror),
        uploads=UploadHandler(
            store,
            LocalFileStorage(settings.upload_dir),
            mirror,
            max_bytes=settings.max_upload_bytes,
        ),
        notifier=notifier,
        reminders=ReminderScanner(store, notifier, stale_days=settings.reminder_stale_days),
        mail=mail,
        mirror=mirror,
    )
    logger.info(
        "Portal context ready (mail=%s, mirror=%s, uploads=%s)",
        mail.transport_name, mirror.storage_name, settings.upload_dir,
    )
    return context


def get_context(request: Request) -> PortalContext:
    return request.app.state.context


def require_cron_secret(
    authorization: Optional[str] = Header(default=None),
    ctx: PortalContext = Depends(get_context),
) -> None:
    """Accept only ``Authorization: Bearer <CRON_SECRET>``; an unset secret rejects all."""
    secret = ctx.settings.cron_secret
    if not secret or authorization != f"Bearer {secret}":
        logger.warning("Rejected cron call: bad or missing bearer token")
        raise Unauthorized("Invalid or missing bearer token")
