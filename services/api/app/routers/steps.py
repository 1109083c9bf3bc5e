"""Wizard step endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Query

from src.intake.steps import STEPS
from src.intake.wizard import StepOutcome

from ..context import PortalContext, get_context

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/steps")
async def list_steps():
    """Static metadata for the seven wizard steps."""
    return [s.as_dict() for s in STEPS]


def schedule_notifications(background: BackgroundTasks, ctx: PortalContext, outcome: StepOutcome) -> None:
    """Reaching 100% sends the completion mails instead of the step mails."""
    if outcome.project_completed:
        background.add_task(ctx.notifier.notify_project_completed, outcome.project)
    else:
        background.add_task(ctx.notifier.notify_step_completed, outcome.project, outcome.step)


@router.post("/projects/{project_id}/steps/{step}")
def submit_step(
    project_id: str,
    step: int,
    background: BackgroundTasks,
    body: Any = Body(default=None),
    skip: bool = Query(default=False, description="Skip step 3 or 7"),
    ctx: PortalContext = Depends(get_context),
):
    """Validate and save one step, then notify the client and the operator.

    Mail goes out after the response; a delivery failure never undoes the save.
    """
    outcome = ctx.wizard.submit_step(project_id, step, body, skip=skip)
    schedule_notifications(background, ctx, outcome)
    return {
        "project": outcome.project,
        "step": outcome.step,
        "completion_rate": outcome.project.completion_rate,
        "next_step": outcome.next_step,
        "project_completed": outcome.project_completed,
    }
