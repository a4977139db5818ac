"""Native Google and Apple identity token verification.

The mobile apps sign in with the platform SDKs and send the resulting
ID token here. Tokens are verified locally against the provider's
published JWKS; nothing is exchanged with the provider besides
fetching the key set.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx
from jose import JWTError, jwt

from planera.core.config import settings
from planera.domains.user.models import AuthProvider

logger = logging.getLogger(__name__)

GOOGLE_JWKS_URL = "https://www.googleapis.com/oauth2/v3/certs"
GOOGLE_ISSUERS = ("https://accounts.google.com", "accounts.google.com")
APPLE_JWKS_URL = "https://appleid.apple.com/auth/keys"
APPLE_ISSUER = "https://appleid.apple.com"

JWKS_CACHE_TTL = 3600  # seconds


@dataclass
class SocialUserInfo:
    """User information extracted from a verified identity token."""

    provider: AuthProvider
    social_id: str
    email: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None
    email_verified: bool = False


class SocialAuthError(Exception):
    """Exception raised when identity token validation fails."""

    def __init__(self, message: str, provider: AuthProvider) -> None:
        self.message = message
        self.provider = provider
        super().__init__(message)


class JWKSCache:
    """In-process cache of provider key sets."""

    def __init__(self, ttl: float = JWKS_CACHE_TTL) -> None:
        self._ttl = ttl
        self._entries: dict[str, tuple[float, dict[str, Any]]] = {}

    def get(self, url: str) -> dict[str, Any] | None:
        entry = self._entries.get(url)
        if entry is None:
            return None
        fetched_at, jwks = entry
        if time.monotonic() - fetched_at > self._ttl:
            del self._entries[url]
            return None
        return jwks

    def put(self, url: str, jwks: dict[str, Any]) -> None:
        self._entries[url] = (time.monotonic(), jwks)

    def clear(self) -> None:
        self._entries.clear()


_jwks_cache = JWKSCache()


class SocialAuthValidator:
    """Verifies Google and Apple identity tokens.

    Example:
        async with SocialAuthValidator() as validator:
            info = await validator.verify_google(id_token)
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        cache: JWKSCache | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(timeout=10.0)
        self._owns_client = client is None
        self._cache = cache or _jwks_cache

    async def __aenter__(self) -> "SocialAuthValidator":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this validator created it."""
        if self._owns_client:
            await self._client.aclose()

    async def _get_jwks(self, url: str, provider: AuthProvider) -> dict[str, Any]:
        jwks = self._cache.get(url)
        if jwks is not None:
            return jwks
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise SocialAuthError(f"Could not fetch signing keys: {e}", provider)
        jwks = response.json()
        self._cache.put(url, jwks)
        return jwks

    async def _verify(
        self,
        token: str,
        provider: AuthProvider,
        jwks_url: str,
        issuer: str | tuple[str, ...],
        audience: str,
    ) -> dict[str, Any]:
        jwks = await self._get_jwks(jwks_url, provider)
        try:
            claims = jwt.decode(
                token,
                jwks,
                algorithms=["RS256"],
                audience=audience,
                issuer=issuer,
                # ID tokens from the native SDKs arrive without the access token
                options={"verify_at_hash": False},
            )
        except JWTError as e:
            logger.warning(f"{provider.value} token verification failed: {e}")
            raise SocialAuthError(
                f"Invalid {provider.value.capitalize()} identity token: {e}", provider
            )
        if not claims.get("sub"):
            raise SocialAuthError("Invalid token: missing user identifier", provider)
        return claims

    async def verify_google(
        self,
        id_token: str,
        display_name: str | None = None,
    ) -> SocialUserInfo:
        """Verify a Google ID token.

        Args:
            id_token: ID token from Google Sign-In
            display_name: Name reported by the SDK, used when the token has none

        Raises:
            SocialAuthError: If GOOGLE_WEB_CLIENT_ID is unset or the token is invalid
        """
        if not settings.GOOGLE_WEB_CLIENT_ID:
            raise SocialAuthError(
                "GOOGLE_WEB_CLIENT_ID environment variable is required",
                AuthProvider.GOOGLE,
            )
        claims = await self._verify(
            id_token,
            AuthProvider.GOOGLE,
            GOOGLE_JWKS_URL,
            GOOGLE_ISSUERS,
            settings.GOOGLE_WEB_CLIENT_ID,
        )
        return SocialUserInfo(
            provider=AuthProvider.GOOGLE,
            social_id=claims["sub"],
            email=claims.get("email"),
            full_name=claims.get("name") or display_name,
            avatar_url=claims.get("picture"),
            email_verified=bool(claims.get("email_verified", False)),
        )

    async def verify_apple(
        self,
        identity_token: str,
        full_name: str | None = None,
    ) -> SocialUserInfo:
        """Verify a Sign in with Apple identity token.

        Apple never puts the name in the token.

        Raises:
            SocialAuthError: If APPLE_BUNDLE_ID is unset or the token is invalid
        """
        if not settings.APPLE_BUNDLE_ID:
            raise SocialAuthError(
                "APPLE_BUNDLE_ID environment variable is required",
                AuthProvider.APPLE,
            )
        claims = await self._verify(
            identity_token,
            AuthProvider.APPLE,
            APPLE_JWKS_URL,
            APPLE_ISSUER,
            settings.APPLE_BUNDLE_ID,
        )
        # Apple sends email_verified as the string "true"
        verified = claims.get("email_verified")
        return SocialUserInfo(
            provider=AuthProvider.APPLE,
            social_id=claims["sub"],
            email=claims.get("email"),
            full_name=full_name,
            email_verified=verified is True or verified == "true",
        )
