"""
Tests for Gmail email delivery.
"""

import base64
import json
from email import message_from_bytes, message_from_string
from email.message import Message
from unittest.mock import patch

import httpx
import pytest

from planera.core.config import settings
from planera.infra.gmail import (
    GMAIL_SEND_URL,
    GMAIL_TOKEN_URL,
    EmailConfigurationError,
    base64url_encode,
    build_mime_message,
    html_to_text,
    send_email,
)


@pytest.fixture
def gmail_credentials():
    with patch.multiple(
        settings,
        GMAIL_CLIENT_ID="client-id",
        GMAIL_CLIENT_SECRET="client-secret",
        GMAIL_REFRESH_TOKEN="refresh-token",
    ):
        yield


def _decode_raw(raw: str) -> Message:
    padded = raw + "=" * (-len(raw) % 4)
    return message_from_bytes(base64.urlsafe_b64decode(padded))


class TestMessageBuilding:
    """Tests for MIME building and encoding."""

    def test_base64url_has_no_padding(self):
        encoded = base64url_encode("ab?>")
        assert "=" not in encoded
        assert "+" not in encoded and "/" not in encoded

    def test_html_to_text(self):
        assert html_to_text("<p>Booking   <b>RZPNX8</b></p>\n<p>done</p>") == "Booking RZPNX8 done"

    def test_multipart_alternative(self):
        raw = build_mime_message("maria@example.com", "Hello", "<p>Hi there</p>", sender="support@planeraai.app")
        message = message_from_string(raw)

        assert message["To"] == "maria@example.com"
        assert message["From"] == "Planera <support@planeraai.app>"
        assert message.get_content_type() == "multipart/alternative"
        assert [p.get_content_type() for p in message.get_payload()] == ["text/plain", "text/html"]


class TestSendEmail:
    """Tests for send_email against a mock transport."""

    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        with pytest.raises(EmailConfigurationError):
            await send_email("maria@example.com", "Hi", "<p>Hi</p>")

    @pytest.mark.asyncio
    async def test_legacy_credential_names(self):
        with patch.multiple(
            settings,
            GOOGLE_CLIENT_ID="legacy-id",
            GOOGLE_CLIENT_SECRET="legacy-secret",
            GOOGLE_REFRESH_TOKEN="legacy-refresh",
        ):
            seen = {}

            def handler(request: httpx.Request) -> httpx.Response:
                if str(request.url) == GMAIL_TOKEN_URL:
                    seen["form"] = request.content.decode()
                    return httpx.Response(200, json={"access_token": "ya29.token"})
                return httpx.Response(200, json={"id": "msg-2"})

            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
                result = await send_email("maria@example.com", "Hi", "<p>Hi</p>", client=client)

        assert result.success is True
        assert "client_id=legacy-id" in seen["form"]

    @pytest.mark.asyncio
    async def test_sends_raw_message(self, gmail_credentials):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            if str(request.url) == GMAIL_TOKEN_URL:
                return httpx.Response(200, json={"access_token": "ya29.token"})
            assert str(request.url) == GMAIL_SEND_URL
            seen["auth"] = request.headers["Authorization"]
            seen["raw"] = json.loads(request.content)["raw"]
            return httpx.Response(200, json={"id": "msg-1"})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await send_email(
                "maria@example.com", "Flight Confirmation", "<p>Booked</p>", "Booked", client=client
            )

        assert result.success is True
        assert result.message_id == "msg-1"
        assert seen["auth"] == "Bearer ya29.token"
        assert "=" not in seen["raw"]
        message = _decode_raw(seen["raw"])
        assert message["Subject"] == "Flight Confirmation"
        assert message["To"] == "maria@example.com"

    @pytest.mark.asyncio
    async def test_token_refresh_failure(self, gmail_credentials):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, text="invalid_grant")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await send_email("maria@example.com", "Hi", "<p>Hi</p>", client=client)

        assert result.success is False
        assert "invalid_grant" in result.error

    @pytest.mark.asyncio
    async def test_send_rejected(self, gmail_credentials):
        def handler(request: httpx.Request) -> httpx.Response:
            if str(request.url) == GMAIL_TOKEN_URL:
                return httpx.Response(200, json={"access_token": "ya29.token"})
            return httpx.Response(403, text="insufficient scope")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await send_email("maria@example.com", "Hi", "<p>Hi</p>", client=client)

        assert result.success is False
        assert result.error == "Gmail API error: 403 - insufficient scope"
