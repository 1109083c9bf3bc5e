"""Site asset upload endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile

from shared.schemas.uploads import FileDeleteRequest, UploadResponse

from ..context import PortalContext, get_context

router = APIRouter()


@router.post("/uploads", status_code=201, response_model=UploadResponse)
def upload_file(
    project_id: str = Form(...),
    category: str = Form(...),
    file: UploadFile = File(...),
    ctx: PortalContext = Depends(get_context),
):
    """Store one file (max 10 MiB by default; images, PDF, ZIP, AI)."""
    # never buffer more than one byte past the limit
    content = file.file.read(ctx.uploads.max_bytes + 1)
    attachment = ctx.uploads.upload(
        project_id,
        category,
        content,
        file.filename or "",
        file.content_type or "",
        declared_size=file.size,
    )
    return UploadResponse(project_id=project_id, category=category.strip(), file=attachment)


@router.delete("/uploads")
def delete_file(body: FileDeleteRequest, ctx: PortalContext = Depends(get_context)):
    ctx.uploads.delete(body.project_id, body.path)
    return {"status": "deleted", "project_id": body.project_id, "path": body.path}
