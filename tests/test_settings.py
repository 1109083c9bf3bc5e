"""Tests for src.config.settings -- environment loading."""

import pytest
from pydantic import ValidationError

from src.config.settings import DEFAULT_MAX_UPLOAD_BYTES, PortalSettings, load_settings


class TestDefaults:
    def test_empty_environment(self):
        s = load_settings({})
        assert s.upload_dir == "uploads"
        assert s.staging_dir == "temp"
        assert s.max_upload_bytes == DEFAULT_MAX_UPLOAD_BYTES == 10 * 1024 * 1024
        assert s.reminder_stale_days == 3
        assert s.smtp_port == 587
        assert s.cron_secret == ""

    def test_integrations_off_by_default(self):
        s = PortalSettings()
        assert s.mail_enabled is False
        assert s.nas_enabled is False


class TestEnvironment:
    def test_overrides(self):
        s = load_settings({
            "SMTP_HOST": "smtp.mailplug.co.kr",
            "SMTP_PORT": "465",
            "SMTP_SSL": "true",
            "SMTP_STARTTLS": "no",
            "ADMIN_EMAIL": "ops@studio.co.kr",
            "NAS_HOST": "nas.local",
            "REMINDER_STALE_DAYS": "5",
            "CRON_SECRET": "s3cret",
            "MAX_UPLOAD_BYTES": "2048",
        })
        assert s.smtp_host == "smtp.mailplug.co.kr"
        assert s.smtp_port == 465
        assert s.smtp_ssl is True
        assert s.smtp_starttls is False
        assert s.operator_email == "ops@studio.co.kr"
        assert s.mail_enabled and s.nas_enabled
        assert s.reminder_stale_days == 5
        assert s.cron_secret == "s3cret"
        assert s.max_upload_bytes == 2048

    def test_empty_values_keep_defaults(self):
        assert load_settings({"SMTP_PORT": ""}).smtp_port == 587

    def test_cors_origins_split(self):
        s = load_settings({"CORS_ORIGINS": "https://a.example.com, https://b.example.com,"})
        assert s.cors_origins == ["https://a.example.com", "https://b.example.com"]

    def test_malformed_number(self):
        with pytest.raises(ValidationError):
            load_settings({"REMINDER_STALE_DAYS": "three"})
