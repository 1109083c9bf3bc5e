"""Wizard operations: open a project, submit a step, change status.

The service composes the store, the validator and the progress calculator.
It never sends mail itself; callers receive a :class:`StepOutcome` and decide
which notification to schedule, so delivery can never roll back a submission.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.storage import LocalFileStorage, render_snapshot, snapshot_path
from core.transports.base import DeliveryFailure, MirrorStorage
from core.transports.null import NullMirrorStorage
from shared.schemas.projects import Project, ProjectCreate
from shared.schemas.steps import Step7Data

from . import progress
from .errors import StatusConflict
from .steps import STEP_FOLDERS, get_step
from .store import ProjectStore
from .validator import validate

logger = logging.getLogger(__name__)

UPLOAD_STEP = 7


@dataclass
class StepOutcome:
    """Result of a successful step submission."""

    project: Project
    step: int
    previous_rate: int
    project_completed: bool

    @property
    def next_step(self) -> Optional[int]:
        return self.project.next_step


class WizardService:
    def __init__(
        self,
        store: ProjectStore,
        *,
        staging: Optional[LocalFileStorage] = None,
        mirror: Optional[MirrorStorage] = None,
    ):
        self.store = store
        self.staging = staging
        self.mirror = mirror or NullMirrorStorage()

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def create_project(self, fields: ProjectCreate) -> Project:
        project = self.store.create(fields)
        self._mirror_project_folders(project)
        return project

    def _mirror_project_folders(self, project: Project) -> None:
        try:
            self.mirror.ensure_dir(project.folder_name)
            for folder in STEP_FOLDERS:
                self.mirror.ensure_dir(f"{project.folder_name}/{folder}")
        except DeliveryFailure as e:
            logger.warning("NAS folder creation failed for %s, continuing locally: %s", project.id, e)

    def set_status(self, project_id: str, status: str) -> Project:
        """Change the lifecycle status.

        ``completion_rate`` is authoritative: ``completed`` requires 100%, and
        a fully submitted project cannot leave ``completed``.
        """

        current = self.store.get(project_id)
        if current.status == status:
            return current

        def _changes(current: Project) -> Dict[str, Any]:
            if status == "completed" and current.completion_rate < 100:
                raise StatusConflict(
                    f"Project is {current.completion_rate}% complete; submit all steps before completing it"
                )
            if current.completion_rate == 100 and status != "completed":
                raise StatusConflict("All steps are submitted; the project stays completed")
            return {"status": status}

        project = self.store.apply(project_id, _changes)
        logger.info("Project %s status -> %s", project_id, project.status)
        return project

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def submit_step(self, project_id: str, step: int, raw: Any, *, skip: bool = False) -> StepOutcome:
        """Validate and record step data.

        Raises ``ProjectNotFound`` or ``StepValidationError`` without touching
        the store.  On success exactly one progress flag is set, the step
        payload is replaced wholesale and the percentage is recomputed.

        Step 7 is the exception: its file list belongs to the upload handler,
        so submitting it only marks the step done and keeps the recorded files.
        """
        self.store.get(project_id)
        payload = validate(step, raw, skip=skip)
        previous: Dict[str, int] = {}

        def _changes(current: Project) -> Dict[str, Any]:
            previous["rate"] = current.completion_rate
            flags = current.progress.with_step(step)
            rate = progress.completion_rate(flags)
            data = payload
            if step == UPLOAD_STEP:
                data = current.step7_data or Step7Data()
            changes: Dict[str, Any] = {
                "progress": flags,
                "completion_rate": rate,
                f"step{step}_data": data,
            }
            if rate == 100:
                changes["status"] = "completed"
            return changes

        project = self.store.apply(project_id, _changes)
        completed_now = previous["rate"] < 100 and project.completion_rate == 100
        logger.info(
            "Project %s step %d saved (%d%% -> %d%%)",
            project_id, step, previous["rate"], project.completion_rate,
        )

        saved = getattr(project, f"step{step}_data")
        self._stage_snapshot(project, step, saved.model_dump(mode="json"))
        return StepOutcome(
            project=project,
            step=step,
            previous_rate=previous["rate"],
            project_completed=completed_now,
        )

    def _stage_snapshot(self, project: Project, step: int, data: Any) -> None:
        rel = snapshot_path(project.folder_name, get_step(step).folder, step)
        content = render_snapshot(project.id, step, data, saved_at=self.store.now())
        if self.staging is not None:
            try:
                self.staging.write(rel, content)
            except OSError as e:
                logger.error("Failed to stage step %d data for %s: %s", step, project.id, e)
        try:
            self.mirror.write_file(rel, content)
        except DeliveryFailure as e:
            logger.warning("NAS snapshot failed for %s step %d: %s", project.id, step, e)
