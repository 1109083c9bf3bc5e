"""In-memory project store.

One instance is constructed at process start and shared by every request
handler.  A single re-entrant lock serialises all access, which makes the
read-modify-write of a step submission atomic.  State is volatile: it lives
exactly as long as the process.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from core.storage import safe_segment
from shared.schemas.projects import Project, ProjectCreate, ProgressFlags

from .errors import ProjectNotFound

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def project_folder_name(company_name: str, created_at: datetime, project_id: str) -> str:
    """``<company>_<YYYY-MM-DD>_<id[:8]>``, safe to use as one path segment."""
    return f"{safe_segment(company_name)}_{created_at.date().isoformat()}_{project_id[:8]}"


class ProjectStore:
    """Mapping of project id to :class:`Project`, guarded by one lock.

    Records handed out are deep copies, so callers never alias the shared
    state; the only way to change a project is :meth:`update` / :meth:`apply`.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._projects: Dict[str, Project] = {}
        self._lock = threading.RLock()
        self._clock: Clock = clock or utc_now

    @property
    def clock(self) -> Clock:
        return self._clock

    def now(self) -> datetime:
        return self._clock()

    # -- reads ---------------------------------------------------------------

    def get(self, project_id: str) -> Project:
        with self._lock:
            project = self._projects.get(project_id)
            if project is None:
                logger.info("Project lookup: %s - NOT FOUND", project_id)
                raise ProjectNotFound(project_id)
            return project.model_copy(deep=True)

    def list(self) -> List[Project]:
        with self._lock:
            return [p.model_copy(deep=True) for p in self._projects.values()]

    def __contains__(self, project_id: object) -> bool:
        with self._lock:
            return project_id in self._projects

    def __len__(self) -> int:
        with self._lock:
            return len(self._projects)

    # -- writes --------------------------------------------------------------

    def create(self, fields: ProjectCreate) -> Project:
        now = self.now()
        pid = str(uuid.uuid4())
        project = Project(
            id=pid,
            company_name=fields.company_name,
            manager_name=fields.manager_name,
            email=str(fields.email),
            phone=fields.phone,
            folder_name=project_folder_name(fields.company_name, now, pid),
            created_at=now,
            updated_at=now,
            status="active",
            progress=ProgressFlags(),
            completion_rate=0,
        )
        with self._lock:
            self._projects[pid] = project
            total = len(self._projects)
        logger.info("Project saved: %s - %s (total %d)", pid, project.company_name, total)
        return project.model_copy(deep=True)

    def update(self, project_id: str, **changes: Any) -> Project:
        """Shallow-override ``changes`` onto the project and refresh ``updated_at``."""
        with self._lock:
            current = self._projects.get(project_id)
            if current is None:
                raise ProjectNotFound(project_id)
            changes.pop("id", None)
            changes["updated_at"] = self.now()
            updated = current.model_copy(update=changes)
            self._projects[project_id] = updated
            return updated.model_copy(deep=True)

    def apply(self, project_id: str, fn: Callable[[Project], Dict[str, Any]]) -> Project:
        """Atomically compute changes from the current record and store them.

        ``fn`` receives a private copy of the project and returns the fields
        to override.  If ``fn`` raises, the store is left untouched.
        """
        with self._lock:
            current = self.get(project_id)
            changes = fn(current)
            return self.update(project_id, **changes)

    def delete(self, project_id: str) -> bool:
        with self._lock:
            removed = self._projects.pop(project_id, None)
        if removed is not None:
            logger.info("Project deleted: %s", project_id)
            return True
        return False
