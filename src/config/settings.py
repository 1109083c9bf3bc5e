"""Portal settings loaded from environment variables.

All integrations are optional.  Leaving ``SMTP_HOST`` or ``NAS_HOST`` empty
selects the no-op transport for that integration at startup.
"""

from __future__ import annotations

import os
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB


class PortalSettings(BaseModel):
    """Runtime configuration for the API, CLI and worker."""

    # -- storage -------------------------------------------------------------
    upload_dir: str = "uploads"
    staging_dir: str = "temp"
    max_upload_bytes: int = Field(default=DEFAULT_MAX_UPLOAD_BYTES, gt=0)

    # -- mail ----------------------------------------------------------------
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_starttls: bool = True
    smtp_ssl: bool = False
    smtp_from: str = "Intake Portal <noreply@example.com>"
    smtp_timeout: float = Field(default=10.0, gt=0)
    operator_email: str = ""

    # -- NAS mirror (SMB) ------------------------------------------------------
    nas_host: str = ""
    nas_share: str = "projects"
    nas_username: str = ""
    nas_password: str = ""
    nas_base_path: str = ""
    nas_timeout: float = Field(default=10.0, gt=0)

    # -- portal --------------------------------------------------------------
    base_url: str = "http://localhost:8000"
    brand: str = "Intake Portal"
    cron_secret: str = ""
    reminder_stale_days: int = Field(default=3, ge=0)
    reminder_cron_hour: int = Field(default=9, ge=0, le=23)
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    log_level: str = "INFO"
    redis_url: str = "redis://localhost:6379/0"

    @property
    def mail_enabled(self) -> bool:
        return bool(self.smtp_host)

    @property
    def nas_enabled(self) -> bool:
        return bool(self.nas_host)


# env var -> settings field
_ENV_MAP = {
    "LOCAL_UPLOAD_DIR": "upload_dir",
    "STAGING_DIR": "staging_dir",
    "MAX_UPLOAD_BYTES": "max_upload_bytes",
    "SMTP_HOST": "smtp_host",
    "SMTP_PORT": "smtp_port",
    "SMTP_USER": "smtp_user",
    "SMTP_PASSWORD": "smtp_password",
    "SMTP_STARTTLS": "smtp_starttls",
    "SMTP_SSL": "smtp_ssl",
    "SMTP_FROM": "smtp_from",
    "SMTP_TIMEOUT": "smtp_timeout",
    "ADMIN_EMAIL": "operator_email",
    "NAS_HOST": "nas_host",
    "NAS_SHARE": "nas_share",
    "NAS_USERNAME": "nas_username",
    "NAS_PASSWORD": "nas_password",
    "NAS_BASE_PATH": "nas_base_path",
    "NAS_TIMEOUT": "nas_timeout",
    "PORTAL_BASE_URL": "base_url",
    "PORTAL_BRAND": "brand",
    "CRON_SECRET": "cron_secret",
    "REMINDER_STALE_DAYS": "reminder_stale_days",
    "REMINDER_CRON_HOUR": "reminder_cron_hour",
    "LOG_LEVEL": "log_level",
    "REDIS_URL": "redis_url",
}

_BOOL_FIELDS = {"smtp_starttls", "smtp_ssl"}


def load_settings(env: Optional[Mapping[str, str]] = None) -> PortalSettings:
    """Build settings from ``env`` (defaults to ``os.environ``).

    Unset or empty variables keep the model default.  Numeric values are
    coerced by pydantic, so a malformed number raises ``ValidationError``.
    """
    if env is None:
        env = os.environ

    values: dict = {}
    for var, field in _ENV_MAP.items():
        raw = env.get(var)
        if raw is None or raw == "":
            continue
        if field in _BOOL_FIELDS:
            values[field] = raw.strip().lower() in ("1", "true", "yes", "on")
        else:
            values[field] = raw.strip()

    origins = env.get("CORS_ORIGINS")
    if origins:
        values["cors_origins"] = [o.strip() for o in origins.split(",") if o.strip()]

    return PortalSettings(**values)
