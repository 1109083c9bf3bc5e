"""NAS mirror over SMB (smbprotocol's ``smbclient`` high-level API)."""

from __future__ import annotations

import logging
import posixpath
from typing import Optional

import smbclient
from smbprotocol.exceptions import SMBException

from .base import DeliveryFailure, MirrorStorage

logger = logging.getLogger(__name__)


class SMBMirrorStorage(MirrorStorage):
    """Writes mirrored files to ``\\\\<host>\\<share>\\<base_path>\\...``.

    The SMB session is registered lazily on first use, so constructing the
    mirror at startup never touches the network.
    """

    storage_name = "smb"

    def __init__(
        self,
        host: str,
        share: str = "projects",
        *,
        username: str = "",
        password: str = "",
        base_path: str = "",
        timeout: float = 10.0,
    ):
        self.host = host
        self.share = share.strip("\\/")
        self.username = username
        self.password = password
        self.base_path = base_path.strip("\\/")
        self.timeout = timeout
        self._session_ready = False

    @property
    def is_connected(self) -> bool:
        return self._session_ready

    def _ensure_session(self) -> None:
        if self._session_ready:
            return
        smbclient.register_session(
            self.host,
            username=self.username or None,
            password=self.password or None,
            connection_timeout=int(self.timeout),
        )
        self._session_ready = True
        logger.info("SMB session registered: %s", self.host)

    def unc_path(self, path: str) -> str:
        """Translate a relative posix path into a UNC path on the share."""
        rel = posixpath.normpath(path.replace("\\", "/")).lstrip("/")
        if rel.startswith(".."):
            raise DeliveryFailure(f"Path escapes share: {path}", transport=self.storage_name, target=path)
        parts = [p for p in (self.base_path, rel) if p and p != "."]
        tail = "\\".join(parts).replace("/", "\\")
        root = f"\\\\{self.host}\\{self.share}"
        return f"{root}\\{tail}" if tail else root

    def _run(self, op: str, path: str, fn) -> None:
        target = self.unc_path(path)
        try:
            self._ensure_session()
            fn(target)
        except (SMBException, OSError, ValueError) as e:
            raise DeliveryFailure(
                f"SMB {op} failed for {target}: {e}",
                transport=self.storage_name,
                target=target,
            ) from e
        logger.info("SMB %s: %s", op, target)

    def ensure_dir(self, path: str) -> None:
        self._run("mkdir", path, lambda p: smbclient.makedirs(p, exist_ok=True))

    def write_file(self, path: str, data: bytes) -> None:
        parent: Optional[str] = posixpath.dirname(path.replace("\\", "/"))
        if parent:
            self.ensure_dir(parent)

        def _write(p: str) -> None:
            with smbclient.open_file(p, mode="wb") as fd:
                fd.write(data)

        self._run("write", path, _write)

    def delete_file(self, path: str) -> None:
        self._run("delete", path, smbclient.remove)
