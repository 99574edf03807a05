"""Delivery of contact form submissions by email."""

from __future__ import annotations

import html
import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ContactMessage:
    name: str
    email: str
    message: str
    company: Optional[str] = None


class ContactMailer:
    """Sends contact form submissions via SMTP, or logs them when SMTP is not configured."""

    def __init__(
        self,
        recipient: str,
        smtp_host: str = "",
        smtp_port: int = 587,
        smtp_username: str = "",
        smtp_password: str = "",
        from_email: str = "",
        from_name: str = "Training Portal",
    ):
        self.recipient = recipient
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username
        self.smtp_password = smtp_password
        self.from_email = from_email
        self.from_name = from_name
        self.enabled = bool(self.smtp_host and self.smtp_username and self.from_email)

    def send_contact_message(self, contact: ContactMessage) -> bool:
        """
        Deliver one submission to the configured recipient.

        Returns:
            True once the message was handed to the SMTP server, or logged
            when SMTP delivery is disabled.
        """
        subject = f"Contact Form Submission from {contact.name}"
        text_body = (
            "New Contact Form Submission from the website\n\n"
            f"From: {contact.name}\n"
            f"Email: {contact.email}\n"
            f"Company: {contact.company or 'Not provided'}\n\n"
            f"Message:\n{contact.message}\n"
        )
        if not self.enabled:
            logger.info("SMTP disabled; contact message from %s:\n%s", contact.email, text_body)
            return True

        html_body = f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h2 style="color: #1e40af;">New Contact Form Submission</h2>
            <p><strong>From:</strong> {html.escape(contact.name)}</p>
            <p><strong>Email:</strong> {html.escape(contact.email)}</p>
            <p><strong>Company:</strong> {html.escape(contact.company or "Not provided")}</p>
            <p style="white-space: pre-wrap;">{html.escape(contact.message)}</p>
        </div>
        """
        return self._send_email(subject, html_body, text_body, reply_to=contact.email)

    def _send_email(self, subject: str, html_body: str, text_body: str, reply_to: str) -> bool:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.from_name, self.from_email))
        msg["To"] = self.recipient
        msg["Reply-To"] = reply_to
        msg.attach(MIMEText(text_body, "plain", "utf-8"))
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=10) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send contact message from %s: %s", reply_to, exc)
            return False
        return True
