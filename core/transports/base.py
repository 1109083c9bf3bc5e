"""Transport interfaces for outbound mail and NAS mirroring.

The portal talks to two optional external systems: an SMTP server and an SMB
share.  Each is modelled as an abstract base with a real network client and a
no-op implementation; ``registry.py`` picks one at startup so domain code never
checks whether an integration is configured.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass


@dataclass(frozen=True)
class MailMessage:
    """A single outbound email to one recipient."""

    to: str
    subject: str
    html: str
    text: str = ""


class DeliveryFailure(Exception):
    """A mail or mirror operation failed (including timeouts).

    Always non-fatal for the request that triggered it.
    """

    def __init__(self, message: str, transport: str = "", target: str = ""):
        super().__init__(message)
        self.transport = transport
        self.target = target


class MailTransport(abc.ABC):
    """Delivers :class:`MailMessage` objects."""

    transport_name: str = "base"

    @abc.abstractmethod
    def send(self, message: MailMessage) -> None:
        """Deliver ``message`` or raise :class:`DeliveryFailure`."""
        ...


class MirrorStorage(abc.ABC):
    """Best-effort secondary copy of files, addressed by relative posix paths."""

    storage_name: str = "base"

    @abc.abstractmethod
    def ensure_dir(self, path: str) -> None:
        ...

    @abc.abstractmethod
    def write_file(self, path: str, data: bytes) -> None:
        ...

    @abc.abstractmethod
    def delete_file(self, path: str) -> None:
        ...

    @property
    def is_connected(self) -> bool:
        return False
