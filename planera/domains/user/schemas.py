"""Pydantic schemas for the User domain."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from planera.core.auth import TokenPair
from planera.domains.user.models import AuthProvider, PlanType


# ============ Create Schemas ============


class UserCreateSocial(BaseModel):
    """Schema for creating a user from a verified identity token."""

    provider: AuthProvider
    social_id: str = Field(..., min_length=1, max_length=255)
    email: EmailStr | None = None
    full_name: str | None = Field(None, max_length=255)
    avatar_url: str | None = Field(None, max_length=500)


class UserUpdate(BaseModel):
    """Schema for updating user profile."""

    full_name: str | None = Field(None, min_length=1, max_length=255)
    avatar_url: str | None = Field(None, max_length=500)


# ============ Sign-In Schemas ============


class GoogleSignInRequest(BaseModel):
    """Native Google Sign-In payload."""

    id_token: str = Field(..., min_length=1)
    display_name: str | None = None


class AppleSignInRequest(BaseModel):
    """Native Sign in with Apple payload.

    Apple only shares the user's name on the very first sign-in, so the
    client forwards it next to the identity token.
    """

    identity_token: str = Field(..., min_length=1)
    full_name: str | None = None


class RefreshRequest(BaseModel):
    refresh_token: str


# ============ Response Schemas ============


class UserResponse(BaseModel):
    """Public user profile."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str | None
    full_name: str | None
    avatar_url: str | None
    provider: AuthProvider
    plan: PlanType
    trips_generated: int


class SignInResponse(BaseModel):
    """Tokens plus the signed-in user."""

    tokens: TokenPair
    user: UserResponse
    is_new_user: bool = False
