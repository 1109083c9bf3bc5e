"""Local filesystem storage for uploads and step snapshots.

Files are addressed by relative posix paths (``<project>/<category>/<name>``)
so the same path can be mirrored verbatim to the NAS share.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Any, Optional

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^\w.\-]+", re.UNICODE)


def safe_segment(value: str, fallback: str = "untitled") -> str:
    """Turn arbitrary text into a single path segment (no separators, no dots-only)."""
    cleaned = _UNSAFE_CHARS.sub("_", value.strip()).strip("._")
    return cleaned or fallback


class PathOutsideRoot(ValueError):
    """A relative path resolved outside the storage root."""


class LocalFileStorage:
    """Reads and writes files below a root directory."""

    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()

    def resolve(self, relative_path: str) -> Path:
        """Absolute path for ``relative_path``; refuses anything outside the root."""
        rel = PurePosixPath(relative_path.replace("\\", "/"))
        if rel.is_absolute():
            raise PathOutsideRoot(relative_path)
        full = (self.root / Path(*rel.parts)).resolve() if rel.parts else self.root
        if full != self.root and self.root not in full.parents:
            raise PathOutsideRoot(relative_path)
        return full

    def write(self, relative_path: str, content: bytes) -> Path:
        path = self.resolve(relative_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        logger.info("Saved locally: %s (%d bytes)", path, len(content))
        return path

    def read(self, relative_path: str) -> Optional[bytes]:
        path = self.resolve(relative_path)
        if path.is_file():
            return path.read_bytes()
        return None

    def exists(self, relative_path: str) -> bool:
        try:
            return self.resolve(relative_path).is_file()
        except PathOutsideRoot:
            return False

    def delete(self, relative_path: str) -> bool:
        path = self.resolve(relative_path)
        if path.is_file():
            path.unlink()
            logger.info("Deleted locally: %s", path)
            return True
        return False


def snapshot_path(folder_name: str, step_folder: str, step: int) -> str:
    """Relative path of a step snapshot: ``<folder>/<step-folder>/step<N>_data.json``."""
    return f"{folder_name}/{step_folder}/step{step}_data.json"


def render_snapshot(project_id: str, step: int, data: Any, saved_at: Optional[datetime] = None) -> bytes:
    """Serialise a step payload the way it is staged on disk and on the NAS."""
    doc = {
        "project_id": project_id,
        "step": step,
        "data": data,
        "saved_at": (saved_at or datetime.now(timezone.utc)).isoformat(),
    }
    return json.dumps(doc, ensure_ascii=False, indent=2, default=str).encode("utf-8")
