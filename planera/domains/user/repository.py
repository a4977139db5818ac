"""Repository for User domain."""

from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from planera.domains.shared.repository import GenericRepository
from planera.domains.user.models import AuthProvider, User
from planera.domains.user.schemas import UserCreateSocial, UserUpdate


class UserRepository(GenericRepository[User, UserCreateSocial, UserUpdate]):
    """Repository for User CRUD operations.

    Example:
        repo = UserRepository(session)
        user, created = await repo.find_or_create_social_user(data)
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(User, session)

    async def find_by_email(self, email: str) -> User | None:
        """Find a user by their email address."""
        return await self.find_one(User.email == email)

    async def find_by_social_id(
        self,
        provider: AuthProvider,
        social_id: str,
    ) -> User | None:
        """Find a user by provider and the provider's subject id."""
        return await self.find_one(
            User.provider == provider,
            User.social_id == social_id,
        )

    async def find_or_create_social_user(
        self,
        data: UserCreateSocial,
    ) -> tuple[User, bool]:
        """Find the user for a verified identity, creating one if needed.

        Lookup is by (provider, social_id) first, then by email so that a
        person signing in with both providers keeps one account. Profile
        fields only fill gaps; they never overwrite what is stored.

        Args:
            data: Verified identity

        Returns:
            Tuple of (User, created) where created is True if new
        """
        user = await self.find_by_social_id(data.provider, data.social_id)
        if user is None and data.email:
            user = await self.find_by_email(data.email)

        now = datetime.now(timezone.utc)
        if user is None:
            user = await self.create({**data.model_dump(), "last_login_at": now})
            return user, True

        changes: dict = {"last_login_at": now}
        if data.full_name and not user.full_name:
            changes["full_name"] = data.full_name
        if data.avatar_url and not user.avatar_url:
            changes["avatar_url"] = data.avatar_url
        if data.email and not user.email:
            changes["email"] = data.email
        return await self.apply(user, changes), False

    async def increment_trips_generated(self, user: User) -> User:
        """Count one more generated trip against the user's plan."""
        return await self.apply(user, {"trips_generated": user.trips_generated + 1})
