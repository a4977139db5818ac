"""API bearer tokens issued after native sign-in.

Access and refresh tokens are HS256 JWTs signed with SECRET_KEY.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from uuid import UUID

from jose import JWTError, jwt
from pydantic import BaseModel

from planera.core.config import settings

ALGORITHM = "HS256"


class TokenType(str, Enum):
    """Enum for token types."""

    ACCESS = "access"
    REFRESH = "refresh"


class TokenPayload(BaseModel):
    """Decoded claims of an API token."""

    sub: str  # user id
    exp: datetime
    iat: datetime
    type: TokenType


class TokenPair(BaseModel):
    """Access and refresh token pair returned to the client."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class TokenService:
    """Creates and decodes API tokens.

    Example:
        tokens = token_service.create_token_pair(user.id)
        payload = token_service.decode_access_token(tokens.access_token)
    """

    def __init__(
        self,
        secret_key: str = settings.SECRET_KEY,
        algorithm: str = ALGORITHM,
        access_ttl: timedelta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        refresh_ttl: timedelta = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._access_ttl = access_ttl
        self._refresh_ttl = refresh_ttl

    def _encode(self, user_id: UUID | str, token_type: TokenType, ttl: timedelta) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + ttl,
            "type": token_type.value,
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def create_token_pair(self, user_id: UUID | str) -> TokenPair:
        """Create both access and refresh tokens.

        Args:
            user_id: The user's unique identifier

        Returns:
            TokenPair with both tokens
        """
        return TokenPair(
            access_token=self._encode(user_id, TokenType.ACCESS, self._access_ttl),
            refresh_token=self._encode(user_id, TokenType.REFRESH, self._refresh_ttl),
            expires_in=int(self._access_ttl.total_seconds()),
        )

    def decode_token(self, token: str) -> TokenPayload | None:
        """Decode and validate a token, returning None when invalid."""
        try:
            claims = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
            return TokenPayload(
                sub=claims["sub"],
                exp=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
                iat=datetime.fromtimestamp(claims["iat"], tz=timezone.utc),
                type=TokenType(claims["type"]),
            )
        except (JWTError, KeyError, ValueError):
            return None

    def decode_access_token(self, token: str) -> TokenPayload | None:
        """Decode an access token; refresh tokens are rejected."""
        payload = self.decode_token(token)
        if payload and payload.type == TokenType.ACCESS:
            return payload
        return None

    def decode_refresh_token(self, token: str) -> TokenPayload | None:
        """Decode a refresh token; access tokens are rejected."""
        payload = self.decode_token(token)
        if payload and payload.type == TokenType.REFRESH:
            return payload
        return None


# Global token service instance
token_service = TokenService()
