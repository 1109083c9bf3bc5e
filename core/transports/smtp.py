"""SMTP mail transport."""

from __future__ import annotations

import logging
import smtplib
import socket
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from .base import DeliveryFailure, MailMessage, MailTransport

logger = logging.getLogger(__name__)


class SMTPMailTransport(MailTransport):
    """Sends each message over a fresh SMTP connection.

    One connection per message keeps recipients independent: a dropped
    connection while mailing the operator never affects the client mail.
    """

    transport_name = "smtp"

    def __init__(
        self,
        host: str,
        port: int = 587,
        *,
        username: str = "",
        password: str = "",
        sender: str = "",
        starttls: bool = True,
        use_ssl: bool = False,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username
        self.starttls = starttls
        self.use_ssl = use_ssl
        self.timeout = timeout

    def _build(self, message: MailMessage) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = message.subject
        msg["From"] = self.sender
        msg["To"] = message.to
        if message.text:
            msg.attach(MIMEText(message.text, "plain", "utf-8"))
        msg.attach(MIMEText(message.html, "html", "utf-8"))
        return msg

    def _connect(self) -> smtplib.SMTP:
        if self.use_ssl:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        conn = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        if self.starttls:
            conn.starttls()
        return conn

    def send(self, message: MailMessage) -> None:
        mime = self._build(message)
        try:
            with self._connect() as conn:
                if self.username:
                    conn.login(self.username, self.password)
                conn.sendmail(self.sender, [message.to], mime.as_string())
        except (smtplib.SMTPException, socket.timeout, OSError) as e:
            raise DeliveryFailure(
                f"SMTP delivery to {message.to} failed: {e}",
                transport=self.transport_name,
                target=message.to,
            ) from e
        logger.info("Mail sent via %s:%s to %s", self.host, self.port, message.to)
