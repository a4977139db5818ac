"""Authentication service for native sign-in and token refresh."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from planera.core.auth import token_service
from planera.core.exceptions import (
    AuthenticationError,
    InactiveUserError,
    InvalidTokenError,
    UserNotFoundError,
)
from planera.domains.user.repository import UserRepository
from planera.domains.user.schemas import SignInResponse, UserCreateSocial, UserResponse
from planera.domains.user.social_auth import (
    SocialAuthError,
    SocialAuthValidator,
    SocialUserInfo,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Signs users in with verified identity tokens and issues API tokens."""

    def __init__(
        self,
        session: AsyncSession,
        validator: SocialAuthValidator | None = None,
    ) -> None:
        self._session = session
        self._repo = UserRepository(session)
        self._validator = validator

    async def _sign_in(self, info: SocialUserInfo) -> SignInResponse:
        user, created = await self._repo.find_or_create_social_user(
            UserCreateSocial(
                provider=info.provider,
                social_id=info.social_id,
                email=info.email,
                full_name=info.full_name,
                avatar_url=info.avatar_url,
            )
        )
        if not user.is_active:
            raise InactiveUserError()
        await self._session.commit()

        if created:
            logger.info(f"Created {info.provider.value} user {user.id}")
        return SignInResponse(
            tokens=token_service.create_token_pair(user.id),
            user=UserResponse.model_validate(user),
            is_new_user=created,
        )

    async def _verify(self, verify) -> SocialUserInfo:
        try:
            return await verify()
        except SocialAuthError as e:
            raise AuthenticationError(detail=e.message)

    async def sign_in_with_google(
        self, id_token: str, display_name: str | None = None
    ) -> SignInResponse:
        """Verify a Google ID token and sign the user in.

        Raises:
            AuthenticationError: If the token cannot be verified
        """
        async with self._validator or SocialAuthValidator() as validator:
            info = await self._verify(lambda: validator.verify_google(id_token, display_name))
        return await self._sign_in(info)

    async def sign_in_with_apple(
        self, identity_token: str, full_name: str | None = None
    ) -> SignInResponse:
        """Verify an Apple identity token and sign the user in.

        Raises:
            AuthenticationError: If the token cannot be verified
        """
        async with self._validator or SocialAuthValidator() as validator:
            info = await self._verify(lambda: validator.verify_apple(identity_token, full_name))
        return await self._sign_in(info)

    async def refresh(self, refresh_token: str) -> SignInResponse:
        """Exchange a refresh token for a new token pair.

        Raises:
            InvalidTokenError: If the refresh token is invalid
            UserNotFoundError: If the user no longer exists
        """
        payload = token_service.decode_refresh_token(refresh_token)
        if payload is None:
            raise InvalidTokenError("Invalid or expired refresh token")
        try:
            user_id = UUID(payload.sub)
        except ValueError:
            raise InvalidTokenError("Invalid user ID in token")

        user = await self._repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        if not user.is_active:
            raise InactiveUserError()
        return SignInResponse(
            tokens=token_service.create_token_pair(user.id),
            user=UserResponse.model_validate(user),
        )
