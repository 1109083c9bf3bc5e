"""Payload shapes for the seven wizard steps.

Every shape is closed (unknown keys are rejected) and strips surrounding
whitespace before length checks, so ``"  "`` counts as empty.
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationInfo,
    field_validator,
)

from .uploads import FileAttachment


class _Closed(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


# ---------------------------------------------------------------------------
# Step 1: company and contact person
# ---------------------------------------------------------------------------

class ManagerInfo(_Closed):
    name: str = Field(..., min_length=2)
    position: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=10)
    email: EmailStr


class CompanyInfo(_Closed):
    name: str = Field(..., min_length=2)
    representative: str = Field(..., min_length=2)
    address: str = Field(..., min_length=10)
    business_number: str = Field(..., min_length=10)
    phone: str = Field(..., min_length=10)
    fax: Optional[str] = None
    email: EmailStr


class Step1Data(_Closed):
    manager: ManagerInfo
    company: CompanyInfo


# ---------------------------------------------------------------------------
# Step 2: hosting and domain credentials
# ---------------------------------------------------------------------------

class HostingInfo(_Closed):
    provider: str = Field(..., min_length=1)
    id: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    ftp_db_password: str = Field(..., min_length=1)


class DomainInfo(_Closed):
    provider: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    id: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class Step2Data(_Closed):
    hosting: HostingInfo
    domain: DomainInfo


# ---------------------------------------------------------------------------
# Step 3: mail DNS records (skippable: empty list)
# ---------------------------------------------------------------------------

MailRecordType = Literal["MX", "CNAME", "TXT"]


class MailRecord(_Closed):
    type: MailRecordType
    host: str = Field(..., min_length=1)
    value: str = Field(..., min_length=1)
    priority: Optional[int] = Field(default=None, ge=0, le=65535, validate_default=True)

    @field_validator("priority")
    @classmethod
    def _priority_only_for_mx(cls, v: Optional[int], info: ValidationInfo) -> Optional[int]:
        record_type = info.data.get("type")
        if record_type == "MX" and v is None:
            raise ValueError("MX records require a numeric priority")
        if record_type in ("CNAME", "TXT") and v is not None:
            raise ValueError(f"priority is only allowed on MX records, not {record_type}")
        return v


class Step3Data(_Closed):
    mail_records: List[MailRecord] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Step 4: SEO credentials and site metadata
# ---------------------------------------------------------------------------

class AccountCredentials(_Closed):
    id: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SiteInfo(_Closed):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=10)


class Step4Data(_Closed):
    google: AccountCredentials
    naver: AccountCredentials
    site_info: SiteInfo


# ---------------------------------------------------------------------------
# Step 5: design references
# ---------------------------------------------------------------------------

class DesignReference(_Closed):
    site: str = Field(..., min_length=1)
    template_name: Optional[str] = None
    description: str = Field(..., min_length=1)


class Step5Data(_Closed):
    references: List[DesignReference] = Field(..., min_length=1)


# ---------------------------------------------------------------------------
# Step 6: two-level sitemap
# ---------------------------------------------------------------------------

class MenuStructure(_Closed):
    primary_menu: List[str] = Field(..., min_length=1)
    secondary_menu: Dict[str, List[str]] = Field(default_factory=dict)

    @field_validator("primary_menu")
    @classmethod
    def _no_blank_menu_names(cls, v: List[str]) -> List[str]:
        if any(not name for name in v):
            raise ValueError("menu names must not be empty")
        return v

    @field_validator("secondary_menu")
    @classmethod
    def _secondary_under_primary(cls, v: Dict[str, List[str]], info: ValidationInfo) -> Dict[str, List[str]]:
        primary = info.data.get("primary_menu")
        if primary is None:
            return v
        unknown = sorted(k for k in v if k not in primary)
        if unknown:
            raise ValueError(f"secondary menus reference unknown primary entries: {', '.join(unknown)}")
        return v


class Step6Data(_Closed):
    menu_structure: MenuStructure


# ---------------------------------------------------------------------------
# Step 7: uploaded site assets (skippable: empty list)
# ---------------------------------------------------------------------------

class UploadedCategory(_Closed):
    category: str = Field(..., min_length=1)
    files: List[FileAttachment] = Field(default_factory=list)


class Step7Data(_Closed):
    uploaded_files: List[UploadedCategory] = Field(default_factory=list)

    def files_in(self, category: str) -> List[FileAttachment]:
        for group in self.uploaded_files:
            if group.category == category:
                return group.files
        return []


STEP_MODELS = {
    1: Step1Data,
    2: Step2Data,
    3: Step3Data,
    4: Step4Data,
    5: Step5Data,
    6: Step6Data,
    7: Step7Data,
}
