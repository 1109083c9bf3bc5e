"""Outbound transports: mail delivery and NAS mirroring.

Each integration has a real network client and a no-op stand-in selected at
startup by :mod:`core.transports.registry`.
"""

from .base import DeliveryFailure, MailMessage, MailTransport, MirrorStorage
from .null import NullMailTransport, NullMirrorStorage
from .registry import create_mail_transport, create_mirror_storage

__all__ = [
    "DeliveryFailure",
    "MailMessage",
    "MailTransport",
    "MirrorStorage",
    "NullMailTransport",
    "NullMirrorStorage",
    "create_mail_transport",
    "create_mirror_storage",
]
