"""
Tests for native sign-in, identity token validation and token refresh.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
import pytest_asyncio

from planera.core.auth import token_service
from planera.core.config import settings
from planera.core.exceptions import AuthenticationError, InactiveUserError, InvalidTokenError
from planera.domains.user.models import AuthProvider
from planera.domains.user.service import AuthService
from planera.domains.user.social_auth import (
    GOOGLE_JWKS_URL,
    JWKSCache,
    SocialAuthError,
    SocialAuthValidator,
    SocialUserInfo,
)


def _validator(**methods):
    validator = MagicMock()
    validator.__aenter__ = AsyncMock(return_value=validator)
    validator.__aexit__ = AsyncMock(return_value=False)
    for name, mock in methods.items():
        setattr(validator, name, mock)
    return validator


def _google_info(**overrides) -> SocialUserInfo:
    data = {
        "provider": AuthProvider.GOOGLE,
        "social_id": "google-sub-1",
        "email": "eleni@example.com",
        "full_name": "Eleni K",
        "avatar_url": "https://lh3.example.com/a.png",
        "email_verified": True,
    }
    data.update(overrides)
    return SocialUserInfo(**data)


@pytest.fixture
def jwks_calls():
    return []


@pytest_asyncio.fixture
async def jwks_client(jwks_calls):
    def handler(request: httpx.Request) -> httpx.Response:
        jwks_calls.append(str(request.url))
        return httpx.Response(200, json={"keys": []})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    yield client
    await client.aclose()


class TestSignIn:
    """Tests for AuthService sign-in."""

    @pytest.mark.asyncio
    async def test_new_google_user(self, session):
        validator = _validator(verify_google=AsyncMock(return_value=_google_info()))

        response = await AuthService(session, validator).sign_in_with_google("id-token", "Eleni")

        assert response.is_new_user is True
        assert response.user.email == "eleni@example.com"
        assert response.user.provider == AuthProvider.GOOGLE
        payload = token_service.decode_access_token(response.tokens.access_token)
        assert payload.sub == str(response.user.id)
        validator.verify_google.assert_awaited_once_with("id-token", "Eleni")

    @pytest.mark.asyncio
    async def test_returning_user_keeps_stored_profile(self, session):
        validator = _validator(verify_google=AsyncMock(return_value=_google_info()))
        first = await AuthService(session, validator).sign_in_with_google("id-token")

        validator.verify_google.return_value = _google_info(full_name="Someone Else")
        second = await AuthService(session, validator).sign_in_with_google("id-token")

        assert second.is_new_user is False
        assert second.user.id == first.user.id
        assert second.user.full_name == "Eleni K"

    @pytest.mark.asyncio
    async def test_apple_links_to_existing_email(self, session):
        google = _validator(verify_google=AsyncMock(return_value=_google_info()))
        first = await AuthService(session, google).sign_in_with_google("id-token")

        apple = _validator(
            verify_apple=AsyncMock(
                return_value=SocialUserInfo(
                    provider=AuthProvider.APPLE,
                    social_id="apple-sub-1",
                    email="eleni@example.com",
                )
            )
        )
        second = await AuthService(session, apple).sign_in_with_apple("identity-token")

        assert second.user.id == first.user.id

    @pytest.mark.asyncio
    async def test_invalid_token(self, session):
        validator = _validator(
            verify_apple=AsyncMock(side_effect=SocialAuthError("Invalid Apple identity token", AuthProvider.APPLE))
        )

        with pytest.raises(AuthenticationError) as exc_info:
            await AuthService(session, validator).sign_in_with_apple("bad")
        assert exc_info.value.detail == "Invalid Apple identity token"

    @pytest.mark.asyncio
    async def test_inactive_user(self, session, user):
        user.is_active = False
        await session.commit()
        validator = _validator(
            verify_google=AsyncMock(return_value=_google_info(social_id=user.social_id, email=user.email))
        )

        with pytest.raises(InactiveUserError):
            await AuthService(session, validator).sign_in_with_google("id-token")


class TestRefresh:
    """Tests for AuthService.refresh."""

    @pytest.mark.asyncio
    async def test_refresh_issues_new_pair(self, session, user):
        tokens = token_service.create_token_pair(user.id)

        response = await AuthService(session).refresh(tokens.refresh_token)

        assert response.user.id == user.id
        assert token_service.decode_access_token(response.tokens.access_token) is not None

    @pytest.mark.asyncio
    async def test_access_token_is_not_a_refresh_token(self, session, user):
        tokens = token_service.create_token_pair(user.id)

        with pytest.raises(InvalidTokenError):
            await AuthService(session).refresh(tokens.access_token)


class TestSocialAuthValidator:
    """Tests for identity token verification failures."""

    @pytest.mark.asyncio
    async def test_google_requires_client_id(self, jwks_client, jwks_calls):
        with patch.object(settings, "GOOGLE_WEB_CLIENT_ID", ""):
            validator = SocialAuthValidator(client=jwks_client, cache=JWKSCache())
            with pytest.raises(SocialAuthError):
                await validator.verify_google("token")
        assert jwks_calls == []

    @pytest.mark.asyncio
    async def test_malformed_token_and_cached_keys(self, jwks_client, jwks_calls):
        validator = SocialAuthValidator(client=jwks_client, cache=JWKSCache())

        with patch.object(settings, "GOOGLE_WEB_CLIENT_ID", "web-client.apps.googleusercontent.com"):
            for _ in range(2):
                with pytest.raises(SocialAuthError) as exc_info:
                    await validator.verify_google("not-a-jwt")
                assert exc_info.value.provider == AuthProvider.GOOGLE

        assert jwks_calls == [GOOGLE_JWKS_URL]

    @pytest.mark.asyncio
    async def test_key_fetch_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            validator = SocialAuthValidator(client=client, cache=JWKSCache())
            with patch.object(settings, "APPLE_BUNDLE_ID", "app.planera.ios"):
                with pytest.raises(SocialAuthError) as exc_info:
                    await validator.verify_apple("token")

        assert "signing keys" in exc_info.value.message

    def test_cache_expires(self):
        cache = JWKSCache(ttl=-1)
        cache.put("url", {"keys": []})
        assert cache.get("url") is None
