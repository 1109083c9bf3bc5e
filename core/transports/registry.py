"""Factories that pick the mail / mirror implementation from settings."""

from __future__ import annotations

import logging

from src.config.settings import PortalSettings

from .base import MailTransport, MirrorStorage
from .null import NullMailTransport, NullMirrorStorage

logger = logging.getLogger(__name__)


def create_mail_transport(settings: PortalSettings) -> MailTransport:
    if not settings.mail_enabled:
        logger.info("No SMTP_HOST set, mail notifications are logged only")
        return NullMailTransport()

    from .smtp import SMTPMailTransport

    logger.info("Mail transport: SMTP %s:%s", settings.smtp_host, settings.smtp_port)
    return SMTPMailTransport(
        settings.smtp_host,
        settings.smtp_port,
        username=settings.smtp_user,
        password=settings.smtp_password,
        sender=settings.smtp_from,
        starttls=settings.smtp_starttls,
        use_ssl=settings.smtp_ssl,
        timeout=settings.smtp_timeout,
    )


def create_mirror_storage(settings: PortalSettings) -> MirrorStorage:
    if not settings.nas_enabled:
        logger.info("No NAS_HOST set, uploads are stored locally only")
        return NullMirrorStorage()

    from .smb import SMBMirrorStorage

    logger.info("NAS mirror: \\\\%s\\%s", settings.nas_host, settings.nas_share)
    return SMBMirrorStorage(
        settings.nas_host,
        settings.nas_share,
        username=settings.nas_username,
        password=settings.nas_password,
        base_path=settings.nas_base_path,
        timeout=settings.nas_timeout,
    )
