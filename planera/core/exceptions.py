"""HTTP exceptions raised by services and dependencies.

Services raise these directly; FastAPI turns them into responses.
"""

from fastapi import HTTPException, status

AUTH_NOT_READY = "AUTH_NOT_READY"


class AuthenticationError(HTTPException):
    """Base exception for authentication errors."""

    def __init__(
        self,
        detail: str = "Could not validate credentials",
        headers: dict[str, str] | None = None,
    ) -> None:
        if headers is None:
            headers = {"WWW-Authenticate": "Bearer"}
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers=headers,
        )


class InvalidTokenError(AuthenticationError):
    """Raised when the bearer token is invalid or expired."""

    def __init__(self, detail: str = "Invalid or expired token") -> None:
        super().__init__(detail=detail)


class AuthNotReadyError(AuthenticationError):
    """Raised when a write arrives before the caller's identity is available.

    Clients match on the AUTH_NOT_READY detail and retry the write.
    """

    def __init__(self) -> None:
        super().__init__(detail=AUTH_NOT_READY)


class InactiveUserError(HTTPException):
    """Raised when user account is inactive."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )


class UserNotFoundError(HTTPException):
    """Raised when user is not found in database."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )


class PlanLimitError(HTTPException):
    """Raised when a free-plan user has used up their trip allowance."""

    def __init__(
        self,
        detail: str = "Free plan limit reached. Upgrade to Premium to generate more trips.",
    ) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )


class BadRequestError(HTTPException):
    """Raised for general bad request errors."""

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )


class NotFoundError(HTTPException):
    """Raised when a resource is not found or belongs to someone else."""

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
        )


class UpstreamServiceError(HTTPException):
    """Raised when a provider call the request depends on fails."""

    def __init__(self, detail: str = "Upstream service unavailable") -> None:
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=detail,
        )
