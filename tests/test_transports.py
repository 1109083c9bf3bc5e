"""Tests for core.transports -- registry selection, SMTP and SMB clients."""

import smtplib

import pytest

from core.transports import (
    DeliveryFailure,
    MailMessage,
    NullMailTransport,
    NullMirrorStorage,
    create_mail_transport,
    create_mirror_storage,
)
from core.transports import smb as smb_module
from core.transports import smtp as smtp_module
from core.transports.smb import SMBMirrorStorage
from core.transports.smtp import SMTPMailTransport
from src.config.settings import PortalSettings

MESSAGE = MailMessage(to="minsu@acme.co.kr", subject="Hello", html="<p>Hi</p>", text="Hi")


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host, self.port, self.timeout = host, port, timeout
        self.started_tls = False
        self.logged_in = None
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, user, password):
        self.logged_in = (user, password)

    def sendmail(self, sender, recipients, body):
        self.sent.append((sender, recipients, body))


class TestRegistry:
    def test_null_when_unconfigured(self):
        s = PortalSettings()
        assert isinstance(create_mail_transport(s), NullMailTransport)
        assert isinstance(create_mirror_storage(s), NullMirrorStorage)

    def test_real_when_configured(self):
        s = PortalSettings(smtp_host="smtp.example.com", nas_host="nas.local", nas_share="clients")
        mail = create_mail_transport(s)
        mirror = create_mirror_storage(s)
        assert isinstance(mail, SMTPMailTransport)
        assert mail.host == "smtp.example.com"
        assert isinstance(mirror, SMBMirrorStorage)
        assert mirror.share == "clients"
        assert mirror.is_connected is False

    def test_null_transports_accept_everything(self):
        NullMailTransport().send(MESSAGE)
        NullMirrorStorage().write_file("a/b.json", b"{}")


class TestSMTP:
    @pytest.fixture(autouse=True)
    def _fake_smtp(self, monkeypatch):
        FakeSMTP.instances = []
        monkeypatch.setattr(smtp_module.smtplib, "SMTP", FakeSMTP)

    def test_sends_multipart(self):
        t = SMTPMailTransport("smtp.example.com", 587, username="bot", password="pw", sender="bot@example.com")
        t.send(MESSAGE)
        conn = FakeSMTP.instances[0]
        assert conn.started_tls is True
        assert conn.logged_in == ("bot", "pw")
        sender, recipients, body = conn.sent[0]
        assert sender == "bot@example.com"
        assert recipients == ["minsu@acme.co.kr"]
        assert "multipart/alternative" in body
        assert "text/html" in body and "text/plain" in body

    def test_one_connection_per_message(self):
        t = SMTPMailTransport("smtp.example.com", starttls=False)
        t.send(MESSAGE)
        t.send(MESSAGE)
        assert len(FakeSMTP.instances) == 2
        assert FakeSMTP.instances[0].started_tls is False
        assert FakeSMTP.instances[0].logged_in is None

    def test_smtp_error_becomes_delivery_failure(self, monkeypatch):
        def _refuse(self, sender, recipients, body):
            raise smtplib.SMTPRecipientsRefused({"minsu@acme.co.kr": (550, b"no such user")})

        monkeypatch.setattr(FakeSMTP, "sendmail", _refuse)
        with pytest.raises(DeliveryFailure) as exc_info:
            SMTPMailTransport("smtp.example.com").send(MESSAGE)
        assert exc_info.value.target == "minsu@acme.co.kr"
        assert exc_info.value.transport == "smtp"

    def test_timeout_becomes_delivery_failure(self, monkeypatch):
        def _timeout(*args, **kwargs):
            raise TimeoutError("timed out")

        monkeypatch.setattr(smtp_module.smtplib, "SMTP", _timeout)
        with pytest.raises(DeliveryFailure):
            SMTPMailTransport("smtp.example.com", timeout=0.1).send(MESSAGE)


class TestSMB:
    def test_unc_path(self):
        m = SMBMirrorStorage("nas.local", "projects", base_path="/intake/")
        assert m.unc_path("Acme/01_company_info/step1_data.json") == (
            "\\\\nas.local\\projects\\intake\\Acme\\01_company_info\\step1_data.json"
        )

    def test_unc_path_rejects_escape(self):
        with pytest.raises(DeliveryFailure):
            SMBMirrorStorage("nas.local").unc_path("../outside")

    def test_write_creates_parent_and_file(self, monkeypatch):
        calls = []
        written = {}

        class _File:
            def __init__(self, path):
                self.path = path

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

            def write(self, data):
                written[self.path] = data

        monkeypatch.setattr(smb_module.smbclient, "register_session", lambda *a, **k: calls.append("session"))
        monkeypatch.setattr(smb_module.smbclient, "makedirs", lambda p, exist_ok=False: calls.append(("mkdir", p)))
        monkeypatch.setattr(smb_module.smbclient, "open_file", lambda p, mode="r": _File(p))

        m = SMBMirrorStorage("nas.local", "projects")
        m.write_file("Acme/02_hosting_domain/step2_data.json", b"{}")

        assert calls[0] == "session"
        assert ("mkdir", "\\\\nas.local\\projects\\Acme\\02_hosting_domain") in calls
        assert written == {"\\\\nas.local\\projects\\Acme\\02_hosting_domain\\step2_data.json": b"{}"}
        assert m.is_connected is True

    def test_os_error_becomes_delivery_failure(self, monkeypatch):
        def _unreachable(*args, **kwargs):
            raise OSError("host unreachable")

        monkeypatch.setattr(smb_module.smbclient, "register_session", _unreachable)
        with pytest.raises(DeliveryFailure) as exc_info:
            SMBMirrorStorage("nas.local").ensure_dir("Acme")
        assert exc_info.value.transport == "smb"
