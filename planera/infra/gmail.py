"""Transactional email through the Gmail API.

Mail is sent as the configured support mailbox using a long-lived OAuth
refresh token; an access token is minted per send.
"""

import base64
import logging
import re
from dataclasses import dataclass
from email.message import EmailMessage

import httpx

from planera.core.config import settings

logger = logging.getLogger(__name__)

GMAIL_TOKEN_URL = "https://oauth2.googleapis.com/token"
GMAIL_SEND_URL = "https://gmail.googleapis.com/gmail/v1/users/me/messages/send"

_TAG_RE = re.compile(r"<[^>]*>")
_SPACE_RE = re.compile(r"\s+")


class EmailConfigurationError(Exception):
    """Raised when Gmail OAuth credentials are not configured."""


@dataclass
class EmailResult:
    """Outcome of a send attempt."""

    success: bool
    message_id: str | None = None
    error: str | None = None


def _credentials() -> tuple[str, str, str]:
    client_id = settings.GMAIL_CLIENT_ID or settings.GOOGLE_CLIENT_ID
    client_secret = settings.GMAIL_CLIENT_SECRET or settings.GOOGLE_CLIENT_SECRET
    refresh_token = settings.GMAIL_REFRESH_TOKEN or settings.GOOGLE_REFRESH_TOKEN
    if not (client_id and client_secret and refresh_token):
        raise EmailConfigurationError(
            "Missing Gmail OAuth credentials. Required: GMAIL_CLIENT_ID, "
            "GMAIL_CLIENT_SECRET, GMAIL_REFRESH_TOKEN (or legacy GOOGLE_* names)"
        )
    return client_id, client_secret, refresh_token


def html_to_text(html: str) -> str:
    """Strip tags and collapse whitespace."""
    return _SPACE_RE.sub(" ", _TAG_RE.sub("", html)).strip()


def build_mime_message(
    to: str,
    subject: str,
    html: str,
    text: str | None = None,
    sender: str | None = None,
) -> str:
    """Build a multipart/alternative message with text and HTML parts."""
    message = EmailMessage()
    message["From"] = f"Planera <{sender or settings.GMAIL_SENDER}>"
    message["To"] = to
    message["Subject"] = subject
    message.set_content(text or html_to_text(html))
    message.add_alternative(html, subtype="html")
    return message.as_string()


def base64url_encode(raw: str) -> str:
    """Gmail's ``raw`` field: URL-safe base64 with padding stripped."""
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


async def _get_access_token(client: httpx.AsyncClient) -> str:
    client_id, client_secret, refresh_token = _credentials()
    response = await client.post(
        GMAIL_TOKEN_URL,
        data={
            "client_id": client_id,
            "client_secret": client_secret,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        },
    )
    if response.status_code != 200:
        raise RuntimeError(f"Failed to refresh access token: {response.text}")
    return response.json()["access_token"]


async def send_email(
    to: str,
    subject: str,
    html: str,
    text: str | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> EmailResult:
    """Send one email.

    Args:
        to: Recipient address
        subject: Subject line
        html: HTML body
        text: Plain-text body; derived from ``html`` when omitted
        client: Optional HTTP client (tests pass one with a mock transport)

    Returns:
        EmailResult describing the outcome

    Raises:
        EmailConfigurationError: If Gmail credentials are missing
    """
    _credentials()
    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=30.0)
    try:
        access_token = await _get_access_token(client)
        raw = base64url_encode(build_mime_message(to, subject, html, text))
        response = await client.post(
            GMAIL_SEND_URL,
            headers={"Authorization": f"Bearer {access_token}"},
            json={"raw": raw},
        )
        if response.status_code >= 400:
            logger.warning(f"Gmail API error {response.status_code}: {response.text}")
            return EmailResult(
                success=False,
                error=f"Gmail API error: {response.status_code} - {response.text}",
            )
        message_id = response.json().get("id")
        logger.info(f"Email sent to {to}, messageId: {message_id}")
        return EmailResult(success=True, message_id=message_id)
    except (httpx.HTTPError, RuntimeError) as e:
        logger.warning(f"Send email error: {e}")
        return EmailResult(success=False, error=str(e))
    finally:
        if owns_client:
            await client.aclose()
