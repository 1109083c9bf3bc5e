"""Excel export of all projects for the operator."""

from __future__ import annotations

import io
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from shared.schemas.projects import Project

from .dashboard import urgency
from .steps import STEPS

logger = logging.getLogger(__name__)

HEADER_FILL = PatternFill(patternType="solid", fgColor="FF4472C4")
HEADER_FONT = Font(size=11, bold=True, color="FFFFFFFF")
DONE_FILL = PatternFill(patternType="solid", fgColor="FFC6EFCE")
OPEN_FILL = PatternFill(patternType="solid", fgColor="FFFFF2CC")

PROJECT_COLUMNS = [
    ("ID", 38),
    ("Company", 28),
    ("Contact", 18),
    ("Email", 30),
    ("Phone", 16),
    ("Status", 12),
    ("Completion %", 14),
    ("Next step", 10),
    ("Urgency", 10),
    ("Created", 20),
    ("Updated", 20),
    ("Folder", 40),
]


def _header(ws, columns: List[tuple]) -> None:
    for idx, (title, width) in enumerate(columns, start=1):
        cell = ws.cell(row=1, column=idx, value=title)
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        cell.alignment = Alignment(horizontal="center")
        ws.column_dimensions[get_column_letter(idx)].width = width
    ws.freeze_panes = "A2"


def _naive(moment: datetime) -> datetime:
    # openpyxl cannot store tz-aware datetimes
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def export_workbook(projects: Iterable[Project], now: Optional[datetime] = None) -> bytes:
    """Build an .xlsx with a ``Projects`` sheet and a per-step ``Progress`` matrix."""
    now = now or datetime.now(timezone.utc)
    projects = sorted(projects, key=lambda p: p.created_at)

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Projects"
    _header(ws, PROJECT_COLUMNS)
    for row, p in enumerate(projects, start=2):
        values = [
            p.id,
            p.company_name,
            p.manager_name,
            p.email,
            p.phone,
            p.status,
            p.completion_rate,
            p.next_step,
            urgency(p, now),
            _naive(p.created_at),
            _naive(p.updated_at),
            p.folder_name,
        ]
        for col, value in enumerate(values, start=1):
            ws.cell(row=row, column=col, value=value)

    matrix = wb.create_sheet("Progress")
    _header(matrix, [("Company", 28)] + [(f"{s.number}. {s.title}", 16) for s in STEPS] + [("Completion %", 14)])
    for row, p in enumerate(projects, start=2):
        matrix.cell(row=row, column=1, value=p.company_name)
        for step in STEPS:
            done = p.progress.is_done(step.number)
            cell = matrix.cell(row=row, column=step.number + 1, value="done" if done else None)
            cell.fill = DONE_FILL if done else OPEN_FILL
            cell.alignment = Alignment(horizontal="center")
        matrix.cell(row=row, column=len(STEPS) + 2, value=p.completion_rate)

    buf = io.BytesIO()
    wb.save(buf)
    logger.info("Exported %d project(s) to Excel", len(projects))
    return buf.getvalue()
