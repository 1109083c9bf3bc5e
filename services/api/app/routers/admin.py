"""Admin dashboard and Excel export."""

from __future__ import annotations

import io

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from shared.schemas.admin import Dashboard, StatusFilter
from src.intake.dashboard import build_dashboard
from src.intake.export import export_workbook

from ..context import PortalContext, get_context

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/admin/dashboard", response_model=Dashboard)
def dashboard(
    status: StatusFilter = Query(default="all"),
    ctx: PortalContext = Depends(get_context),
):
    return build_dashboard(ctx.store.list(), status_filter=status, now=ctx.store.now())


@router.get("/admin/export.xlsx")
def export_projects(ctx: PortalContext = Depends(get_context)):
    """Download every project as an Excel workbook."""
    now = ctx.store.now()
    content = export_workbook(ctx.store.list(), now=now)
    filename = f"intake_projects_{now:%Y%m%d}.xlsx"
    return StreamingResponse(
        io.BytesIO(content),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
