"""Notification e-mail - rendering and SMTP delivery via aiosmtplib.

Connection settings come from the SMTP_* variables in config.py. Whether
notifications are mailed at all is decided by the caller
(EMAIL_NOTIFICATIONS_ENABLED).
"""

from email.message import EmailMessage
from html import escape

import aiosmtplib

from foodhub.config import settings

_PRIORITY_COLORS: dict[str, str] = {
    "low": "#6b7280",
    "normal": "#2563eb",
    "high": "#ea580c",
    "urgent": "#dc2626",
}


def render_notification(title: str, message: str, priority: str = "normal") -> tuple[str, str]:
    """Build the (html, text) bodies for a notification e-mail."""
    color: str = _PRIORITY_COLORS.get(priority, _PRIORITY_COLORS["normal"])
    html = (
        f'<div style="font-family:sans-serif">'
        f'<h3 style="color:{color}">{escape(title)}</h3>'
        f"<p>{escape(message)}</p>"
        f'<p style="color:#9ca3af;font-size:12px">{escape(settings.SMTP_FROM_NAME)}</p>'
        f"</div>"
    )
    text = f"{title}\n\n{message}\n\n-- {settings.SMTP_FROM_NAME}"
    return html, text


async def send_email(to: str, subject: str, html: str, text: str) -> None:
    """Send a multipart (plain + HTML) message over STARTTLS."""
    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = f"{settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_EMAIL}>"
    msg["To"] = to
    msg.set_content(text)
    msg.add_alternative(html, subtype="html")

    await aiosmtplib.send(
        msg,
        hostname=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USER or None,
        password=settings.SMTP_PASSWORD or None,
        start_tls=True,
    )
