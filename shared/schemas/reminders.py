"""Reminder scan schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, computed_field


class ReminderOutcome(BaseModel):
    project_id: str
    company_name: str = ""
    status: Literal["sent", "failed"]
    error: Optional[str] = None


class ReminderScanResult(BaseModel):
    """Outcome of one stale-project sweep."""

    scanned_at: datetime
    stale_days: int
    candidates: int = 0
    results: List[ReminderOutcome] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def sent(self) -> int:
        return sum(1 for r in self.results if r.status == "sent")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.status == "failed")

    @property
    def notified(self) -> List[str]:
        return [r.project_id for r in self.results if r.status == "sent"]
