"""File upload schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class FileAttachment(BaseModel):
    """Metadata of one stored upload."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, description="Original file name as uploaded")
    size: int = Field(..., ge=0, description="Size in bytes")
    type: str = Field(..., min_length=1, description="Declared MIME type")
    upload_path: str = Field(..., min_length=1, description="<project>/<category>/<generated-name>")
    uploaded_at: datetime


class UploadResponse(BaseModel):
    """Response after a successful upload."""

    project_id: str
    category: str
    file: FileAttachment


class FileDeleteRequest(BaseModel):
    project_id: str = Field(..., min_length=1)
    path: str = Field(..., min_length=1)
