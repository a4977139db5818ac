"""FastAPI dependencies for authentication.

This module provides injectable dependencies for:
- Current user retrieval from the API bearer token
- Active user validation
- Optional user resolution for endpoints that tolerate a missing identity
"""

from typing import TYPE_CHECKING, Annotated, Any
from uuid import UUID

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from planera.core.auth import TokenPayload, token_service
from planera.core.exceptions import (
    InactiveUserError,
    InvalidTokenError,
    UserNotFoundError,
)
from planera.infra.database import get_db

# Type checking imports (not executed at runtime)
if TYPE_CHECKING:
    from planera.domains.user.models import User

# Tokens are issued by /auth/google and /auth/apple; tokenUrl only feeds the docs UI
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/refresh", auto_error=True)
oauth2_scheme_optional = OAuth2PasswordBearer(
    tokenUrl="/api/v1/auth/refresh", auto_error=False
)


def _get_user_repository(session: AsyncSession):
    """Lazy import and instantiate UserRepository."""
    from planera.domains.user.repository import UserRepository

    return UserRepository(session)


async def get_token_payload(
    token: Annotated[str, Depends(oauth2_scheme)],
) -> TokenPayload:
    """Extract and validate the access token from the Authorization header.

    Raises:
        InvalidTokenError: If token is invalid or expired
    """
    payload = token_service.decode_access_token(token)
    if payload is None:
        raise InvalidTokenError()
    return payload


async def get_current_user(
    token_payload: Annotated[TokenPayload, Depends(get_token_payload)],
    session: Annotated[AsyncSession, Depends(get_db)],
) -> "User":
    """Get the current authenticated user.

    Args:
        token_payload: Validated token payload
        session: Database session

    Returns:
        The authenticated User

    Raises:
        InvalidTokenError: If the subject is not a user id
        UserNotFoundError: If user doesn't exist
    """
    try:
        user_id = UUID(token_payload.sub)
    except ValueError:
        raise InvalidTokenError("Invalid user ID in token")

    user = await _get_user_repository(session).get_by_id(user_id)
    if user is None:
        raise UserNotFoundError()
    return user


async def get_current_active_user(
    current_user: Annotated[Any, Depends(get_current_user)],
) -> "User":
    """Get the current user and verify they are active.

    Raises:
        InactiveUserError: If user account is inactive
    """
    if not current_user.is_active:
        raise InactiveUserError()
    return current_user


async def get_optional_current_user(
    token: Annotated[str | None, Depends(oauth2_scheme_optional)],
    session: Annotated[AsyncSession, Depends(get_db)],
) -> "User | None":
    """Get current user if authenticated, None otherwise.

    Reads return empty results for None; writes raise AuthNotReadyError so
    the client can retry once its sign-in has settled.
    """
    if token is None:
        return None

    payload = token_service.decode_access_token(token)
    if payload is None:
        return None

    try:
        user_id = UUID(payload.sub)
    except ValueError:
        return None

    user = await _get_user_repository(session).get_by_id(user_id)
    if user is None or not user.is_active:
        return None
    return user


# Type aliases for cleaner dependency injection
# Using Any to avoid circular import issues at runtime
ActiveUser = Annotated[Any, Depends(get_current_active_user)]
OptionalUser = Annotated[Any, Depends(get_optional_current_user)]
