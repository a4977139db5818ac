"""Base classes shared by the provider API clients."""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ToolError(Exception):
    """Base exception for provider errors."""

    def __init__(self, message: str, tool_name: str, details: dict | None = None):
        self.message = message
        self.tool_name = tool_name
        self.details = details or {}
        super().__init__(self.message)


class APIClientError(ToolError):
    """Non-2xx response or transport failure."""


class RateLimitError(ToolError):
    """Provider answered 429."""


class ProviderAuthenticationError(ToolError):
    """Provider rejected our credentials."""


class ProviderNotConfiguredError(ToolError):
    """The provider's API key is not set."""


class BaseAsyncAPIClient(ABC):
    """Base class for async API clients.

    Each request is attempted once; failures surface as ``ToolError``
    subclasses carrying the provider's own error text.

    Example:
        async with DuffelClient() as duffel:
            result = await duffel.create_offer_request(...)
    """

    tool_name = "provider"

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether credentials for this provider are present."""

    async def __aenter__(self) -> "BaseAsyncAPIClient":
        if not self.is_configured:
            raise ProviderNotConfiguredError(
                f"{self.tool_name} credentials are not configured",
                tool_name=self.tool_name,
            )
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=await self._get_headers(),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @abstractmethod
    async def _get_headers(self) -> dict[str, str]:
        """Get headers for API requests. Override in subclasses."""

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict | None = None,
        json_data: dict | None = None,
        **kwargs: Any,
    ) -> dict:
        """Send one request and return the decoded JSON body.

        Raises:
            ProviderAuthenticationError: On 401
            RateLimitError: On 429
            APIClientError: On any other non-2xx status or transport error
        """
        if not self._client:
            raise APIClientError(
                "Client not initialized. Use async context manager.",
                tool_name=self.tool_name,
            )

        url = endpoint if endpoint.startswith("/") else f"/{endpoint}"
        try:
            response = await self._client.request(
                method=method,
                url=url,
                params=params,
                json=json_data,
                **kwargs,
            )
        except httpx.RequestError as e:
            raise APIClientError(f"Request error: {e}", tool_name=self.tool_name)

        if response.status_code == 401:
            raise ProviderAuthenticationError(
                f"Authentication failed: {response.text}",
                tool_name=self.tool_name,
                details={"status_code": 401},
            )
        if response.status_code == 429:
            raise RateLimitError(
                f"Rate limit exceeded: {response.text}",
                tool_name=self.tool_name,
                details={"status_code": 429},
            )
        if response.is_error:
            raise APIClientError(
                f"{self.tool_name} request failed: {response.status_code} - {response.text}",
                tool_name=self.tool_name,
                details={"status_code": response.status_code},
            )
        return response.json()

    async def get(self, endpoint: str, params: dict | None = None, **kwargs: Any) -> dict:
        """Make an async GET request."""
        return await self._request("GET", endpoint, params=params, **kwargs)

    async def post(
        self,
        endpoint: str,
        json_data: dict | None = None,
        params: dict | None = None,
        **kwargs: Any,
    ) -> dict:
        """Make an async POST request."""
        return await self._request("POST", endpoint, params=params, json_data=json_data, **kwargs)
