"""Authentication API endpoints.

This module provides REST API endpoints for:
- Native Google Sign-In
- Native Sign in with Apple
- Token refresh
- Current user profile
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from planera.core.deps import ActiveUser
from planera.domains.user.schemas import (
    AppleSignInRequest,
    GoogleSignInRequest,
    RefreshRequest,
    SignInResponse,
    UserResponse,
)
from planera.domains.user.service import AuthService
from planera.infra.database import get_db

router = APIRouter(prefix="/auth", tags=["Authentication"])


async def get_auth_service(
    session: Annotated[AsyncSession, Depends(get_db)],
) -> AuthService:
    """Get auth service instance."""
    return AuthService(session)


@router.post(
    "/google",
    response_model=SignInResponse,
    summary="Sign in with Google",
    description="Verify a native Google ID token and issue API tokens.",
)
async def sign_in_with_google(
    data: GoogleSignInRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> SignInResponse:
    """Sign in or register with a Google ID token.

    Raises:
        401 Unauthorized: If the token cannot be verified
    """
    return await auth_service.sign_in_with_google(data.id_token, data.display_name)


@router.post(
    "/apple",
    response_model=SignInResponse,
    summary="Sign in with Apple",
    description="Verify a native Apple identity token and issue API tokens.",
)
async def sign_in_with_apple(
    data: AppleSignInRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> SignInResponse:
    """Sign in or register with an Apple identity token.

    Raises:
        401 Unauthorized: If the token cannot be verified
    """
    return await auth_service.sign_in_with_apple(data.identity_token, data.full_name)


@router.post(
    "/refresh",
    response_model=SignInResponse,
    summary="Refresh access token",
)
async def refresh_token(
    data: RefreshRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> SignInResponse:
    """Exchange a refresh token for a new token pair.

    Raises:
        401 Unauthorized: If refresh token invalid
    """
    return await auth_service.refresh(data.refresh_token)


@router.get("/me", response_model=UserResponse, summary="Get current user profile")
async def get_me(current_user: ActiveUser) -> UserResponse:
    return UserResponse.model_validate(current_user)
