"""No-op transports used when an integration is not configured."""

from __future__ import annotations

import logging

from .base import MailMessage, MailTransport, MirrorStorage

logger = logging.getLogger(__name__)


class NullMailTransport(MailTransport):
    """Logs the message instead of sending it."""

    transport_name = "null"

    def send(self, message: MailMessage) -> None:
        logger.info("Mail not configured, dropping message to %s: %s", message.to, message.subject)


class NullMirrorStorage(MirrorStorage):
    """Local storage only; mirror calls are logged and ignored."""

    storage_name = "null"

    def ensure_dir(self, path: str) -> None:
        logger.debug("NAS not configured, skipping mkdir %s", path)

    def write_file(self, path: str, data: bytes) -> None:
        logger.debug("NAS not configured, skipping write %s (%d bytes)", path, len(data))

    def delete_file(self, path: str) -> None:
        logger.debug("NAS not configured, skipping delete %s", path)
