"""Project endpoints: open, list, inspect and change status."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from shared.schemas.projects import Project, ProjectCreate, ProjectStatusUpdate

from ..context import PortalContext, get_context

router = APIRouter()


@router.post("/projects", status_code=201, response_model=Project)
def create_project(body: ProjectCreate, ctx: PortalContext = Depends(get_context)):
    """Open a new intake project (status active, 0%)."""
    return ctx.wizard.create_project(body)


@router.get("/projects", response_model=List[Project])
def list_projects(ctx: PortalContext = Depends(get_context)):
    """List all projects, newest first."""
    projects = ctx.store.list()
    projects.sort(key=lambda p: p.created_at, reverse=True)
    return projects


@router.get("/projects/{project_id}", response_model=Project)
def get_project(project_id: str, ctx: PortalContext = Depends(get_context)):
    return ctx.store.get(project_id)


@router.patch("/projects/{project_id}", response_model=Project)
def update_project_status(
    project_id: str,
    body: ProjectStatusUpdate,
    ctx: PortalContext = Depends(get_context),
):
    """Pause, resume or complete a project.

    ``completed`` is only accepted at 100%, and a fully submitted project
    cannot be moved out of ``completed``; both answer 409.
    """
    return ctx.wizard.set_status(project_id, body.status)
