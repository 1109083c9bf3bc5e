"""Site asset uploads: local disk first, NAS mirror best-effort.

Accepted files are written to ``<upload_dir>/<project>/<category>/<uuid><ext>``
and recorded in the project's step 7 file list.  Uploading never completes
step 7 by itself; the client submits step 7 when it is done.
"""

from __future__ import annotations

import logging
import os
import re
import uuid
from typing import Any, Dict, List, Optional

from core.storage import LocalFileStorage, PathOutsideRoot
from core.transports.base import DeliveryFailure, MirrorStorage
from core.transports.null import NullMirrorStorage
from src.config.settings import DEFAULT_MAX_UPLOAD_BYTES
from shared.schemas.projects import Project
from shared.schemas.steps import Step7Data, UploadedCategory
from shared.schemas.uploads import FileAttachment

from .errors import (
    FieldError,
    FileNotFound,
    FileTooLarge,
    StepValidationError,
    UnsupportedFileType,
)
from .steps import get_step
from .store import ProjectStore

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "application/pdf",
    "application/zip",
    "application/x-zip-compressed",
    "application/vnd.adobe.illustrator",
    "application/postscript",
})

ALLOWED_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp", ".pdf", ".zip", ".ai"})

_CATEGORY_RE = re.compile(r"^[\w\-]{1,64}$", re.UNICODE)


def file_extension(filename: str) -> str:
    return os.path.splitext(filename or "")[1].lower()


def is_allowed(filename: str, content_type: str) -> bool:
    """Both the declared MIME type and the extension must be on the allow-list."""
    mime = (content_type or "").split(";")[0].strip().lower()
    return mime in ALLOWED_CONTENT_TYPES and file_extension(filename) in ALLOWED_EXTENSIONS


class UploadHandler:
    def __init__(
        self,
        store: ProjectStore,
        storage: LocalFileStorage,
        mirror: MirrorStorage | None = None,
        *,
        max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
    ):
        self.store = store
        self.storage = storage
        self.mirror = mirror or NullMirrorStorage()
        self.max_bytes = max_bytes

    def _mirror_path(self, project: Project, category: str, stored_name: str) -> str:
        return f"{project.folder_name}/{get_step(7).folder}/{category}/{stored_name}"

    def upload(
        self,
        project_id: str,
        category: str,
        content: bytes,
        filename: str,
        content_type: str,
        *,
        declared_size: Optional[int] = None,
    ) -> FileAttachment:
        """Store one file and append it to the project's file list.

        Checks run before anything is written, so a rejected file leaves the
        disk and the project untouched.  ``content`` may be cut off just past
        the limit; ``declared_size`` then carries the real length.
        """
        project = self.store.get(project_id)

        size = max(len(content), declared_size or 0)
        if size > self.max_bytes:
            logger.warning("Upload rejected for %s: %s is %d bytes", project_id, filename, size)
            raise FileTooLarge(size, self.max_bytes)
        if not is_allowed(filename, content_type):
            logger.warning("Upload rejected for %s: %s (%s)", project_id, filename, content_type)
            raise UnsupportedFileType(filename, content_type)

        category = (category or "").strip()
        if not _CATEGORY_RE.match(category):
            raise StepValidationError(
                [FieldError("category", "category must be 1-64 letters, digits, '_' or '-'")]
            )

        stored_name = f"{uuid.uuid4().hex}{file_extension(filename)}"
        rel = f"{project_id}/{category}/{stored_name}"
        self.storage.write(rel, content)

        try:
            self.mirror.write_file(self._mirror_path(project, category, stored_name), content)
        except DeliveryFailure as e:
            logger.warning("NAS upload failed for %s, kept locally: %s", rel, e)

        attachment = FileAttachment(
            name=filename,
            size=size,
            type=content_type,
            upload_path=rel,
            uploaded_at=self.store.now(),
        )

        def _changes(current: Project) -> Dict[str, Any]:
            data = current.step7_data or Step7Data()
            groups: List[UploadedCategory] = [g.model_copy(deep=True) for g in data.uploaded_files]
            for group in groups:
                if group.category == category:
                    group.files.append(attachment)
                    break
            else:
                groups.append(UploadedCategory(category=category, files=[attachment]))
            return {"step7_data": Step7Data(uploaded_files=groups)}

        self.store.apply(project_id, _changes)
        logger.info("Upload stored for %s: %s -> %s (%d bytes)", project_id, filename, rel, size)
        return attachment

    def delete(self, project_id: str, path: str) -> None:
        """Remove an uploaded file that belongs to ``project_id``."""
        project = self.store.get(project_id)

        rel = (path or "").replace("\\", "/").lstrip("/")
        if not rel.startswith(f"{project_id}/"):
            raise FileNotFound(path)
        try:
            if not self.storage.exists(rel):
                raise FileNotFound(path)
            self.storage.delete(rel)
        except PathOutsideRoot:
            raise FileNotFound(path) from None

        parts = rel.split("/")
        if len(parts) == 3:
            try:
                self.mirror.delete_file(self._mirror_path(project, parts[1], parts[2]))
            except DeliveryFailure as e:
                logger.warning("NAS delete failed for %s: %s", rel, e)

        def _changes(current: Project) -> Dict[str, Any]:
            if current.step7_data is None:
                return {}
            groups = []
            for group in current.step7_data.uploaded_files:
                files = [f for f in group.files if f.upload_path != rel]
                groups.append(UploadedCategory(category=group.category, files=files))
            return {"step7_data": Step7Data(uploaded_files=groups)}

        self.store.apply(project_id, _changes)
        logger.info("Upload deleted for %s: %s", project_id, rel)
