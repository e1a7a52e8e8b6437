import logging
from datetime import datetime
from html import escape
from typing import Optional

import httpx

from storefront.core.config import settings

logger = logging.getLogger(__name__)


def build_forward_html(
    name: str,
    email: str,
    message: str,
    subject: Optional[str] = None,
    country: Optional[str] = None,
    order_no: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> str:
    """HTML body of a forwarded customer message. Every user field is escaped."""
    parts = [
        f"<p><strong>Name:</strong> {escape(name)}</p>",
        f"<p><strong>Email:</strong> {escape(email)}</p>",
        f"<p><strong>Country:</strong> {escape(country or '-')}</p>",
        f"<p><strong>Order No:</strong> {escape(order_no or '-')}</p>",
        f"<p><strong>Subject:</strong> {escape(subject or '-')}</p>",
        "<p><strong>Message:</strong></p>",
        f'<pre style="white-space:pre-wrap;font-family:inherit;">{escape(message)}</pre>',
    ]
    if created_at is not None:
        parts.append(f"<p><strong>Received:</strong> {created_at.strftime('%Y-%m-%d %H:%M:%S')} UTC</p>")
    return "".join(parts)


def send_email(to_email: str, subject: str, html: str, api_key: Optional[str] = None) -> bool:
    """
    Send one email through the Resend HTTP API.
    Returns True on a 2xx answer; failures are logged and reported as False.
    """
    key = (api_key if api_key is not None else settings.RESEND_API_KEY) or ""
    key = key.strip()
    if not key:
        logger.warning("RESEND_API_KEY is not configured; email to %s not sent.", to_email)
        return False

    payload = {
        "from": settings.MAIL_FROM,
        "to": [to_email],
        "subject": subject,
        "html": html,
    }
    try:
        response = httpx.post(
            settings.RESEND_API_URL,
            json=payload,
            headers={"Authorization": f"Bearer {key}"},
            timeout=settings.MAIL_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"Failed to send email to {to_email}: {e}", exc_info=True)
        return False
    logger.info(f"Email '{subject}' sent to {to_email}.")
    return True


def forward_message(
    to_email: str,
    name: str,
    email: str,
    message: str,
    subject: Optional[str] = None,
    country: Optional[str] = None,
    order_no: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> bool:
    """Forward a customer message to the configured inbox."""
    mail_subject = f"New message: {name}{f' - {subject}' if subject else ''}".strip()
    html = build_forward_html(name, email, message, subject, country, order_no, created_at)
    return send_email(to_email, mail_subject, html)
