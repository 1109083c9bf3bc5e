"""Project schemas for API contracts and the in-memory store."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, computed_field

from src.intake.progress import TOTAL_STEPS, completed_steps, next_incomplete_step

from .steps import (
    Step1Data,
    Step2Data,
    Step3Data,
    Step4Data,
    Step5Data,
    Step6Data,
    Step7Data,
)

ProjectStatus = Literal["active", "completed", "paused"]


class ProgressFlags(BaseModel):
    """One flag per wizard step; a flag is never cleared once set."""

    step1: bool = False
    step2: bool = False
    step3: bool = False
    step4: bool = False
    step5: bool = False
    step6: bool = False
    step7: bool = False

    def as_list(self) -> List[bool]:
        return [getattr(self, f"step{n}") for n in range(1, TOTAL_STEPS + 1)]

    def is_done(self, step: int) -> bool:
        return bool(getattr(self, f"step{step}"))

    def with_step(self, step: int) -> "ProgressFlags":
        return self.model_copy(update={f"step{step}": True})


class ProjectCreate(BaseModel):
    """Request to open a new intake project."""

    model_config = ConfigDict(str_strip_whitespace=True)

    company_name: str = Field(..., min_length=1, max_length=200)
    manager_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=40)


class ProjectStatusUpdate(BaseModel):
    status: ProjectStatus


class Project(BaseModel):
    """A client intake project as held by the store and returned by the API."""

    id: str
    company_name: str
    manager_name: str
    email: str
    phone: str
    folder_name: str
    created_at: datetime
    updated_at: datetime
    status: ProjectStatus = "active"
    progress: ProgressFlags = Field(default_factory=ProgressFlags)
    completion_rate: int = Field(default=0, ge=0, le=100)

    step1_data: Optional[Step1Data] = None
    step2_data: Optional[Step2Data] = None
    step3_data: Optional[Step3Data] = None
    step4_data: Optional[Step4Data] = None
    step5_data: Optional[Step5Data] = None
    step6_data: Optional[Step6Data] = None
    step7_data: Optional[Step7Data] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def next_step(self) -> Optional[int]:
        return next_incomplete_step(self.progress)

    @property
    def completed_step_count(self) -> int:
        return completed_steps(self.progress)

    @property
    def is_complete(self) -> bool:
        return self.completion_rate == 100

    def step_data(self, step: int) -> Optional[Any]:
        return getattr(self, f"step{step}_data")
