"""HTTP client for consuming the Banking Control Panel API."""
from typing import Any, Optional

from httpx import AsyncClient, Response

from src.client.schemas import (
    ClientView,
    CreateClientRequest,
    FilterCriteria,
    PagedResult,
    UpdateClientRequest,
)


class BankingControlPanelClient:
    """HTTP client for interacting with the Banking Control Panel API."""

    def __init__(
        self,
        base_url: str,
        client: Optional[AsyncClient] = None,
        headers: Optional[dict[str, str]] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Base URL of the API (e.g., "http://localhost:8000")
            client: Optional httpx.AsyncClient instance. If not provided, a new one will be created.
            headers: Headers sent with every request, typically the identity headers
                     set by the identity provider (e.g. {"X-Admin-Id": ..., "X-User-Role": "Admin"})
        """
        self.base_url = base_url.rstrip("/")
        self.headers = headers or {}
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self):
        """Async context manager entry."""
        if self._owns_client:
            self._client = AsyncClient(base_url=self.base_url)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._owns_client and self._client:
            await self._client.aclose()

    @property
    def client(self) -> AsyncClient:
        """Get the underlying httpx client."""
        if self._client is None:
            raise RuntimeError("Client not initialized. Use async context manager.")
        return self._client

    async def list_clients(self, criteria: Optional[FilterCriteria] = None) -> PagedResult[ClientView]:
        """
        List clients matching the criteria.

        Args:
            criteria: Filters, sort and paging. Defaults to the first page of all clients.

        Returns:
            One page of clients with paging figures

        Raises:
            httpx.HTTPStatusError: If the request fails
        """
        params: dict[str, Any] = {}
        if criteria is not None:
            params = criteria.model_dump(mode="json", by_alias=True, exclude_none=True)
        response: Response = await self.client.get(
            "/api/v1/clients/",
            params=params,
            headers=self.headers,
        )
        response.raise_for_status()
        return PagedResult[ClientView](**response.json())

    async def get_last_searches(self) -> list[FilterCriteria]:
        """
        Get the criteria of the caller's most recent listings, newest first.

        Raises:
            httpx.HTTPStatusError: If the request fails (404 when there is no history)
        """
        response: Response = await self.client.get("/api/v1/clients/last-searches", headers=self.headers)
        response.raise_for_status()
        return [FilterCriteria(**criteria) for criteria in response.json()]

    async def get_client(self, client_id: int) -> ClientView:
        """
        Get a client by ID.

        Raises:
            httpx.HTTPStatusError: If the request fails (e.g., 404 if not found)
        """
        response: Response = await self.client.get(f"/api/v1/clients/{client_id}", headers=self.headers)
        response.raise_for_status()
        return ClientView(**response.json())

    async def create_client(self, request: CreateClientRequest) -> ClientView:
        """
        Create a new client.

        Raises:
            httpx.HTTPStatusError: If the request fails (409 on a duplicate personal ID)
        """
        response: Response = await self.client.post(
            "/api/v1/clients/",
            json=request.model_dump(mode="json"),
            headers=self.headers,
        )
        response.raise_for_status()
        return ClientView(**response.json())

    async def update_client(self, request: UpdateClientRequest) -> ClientView:
        """
        Update an existing client.

        Raises:
            httpx.HTTPStatusError: If the request fails (e.g., 404 if not found)
        """
        response: Response = await self.client.put(
            "/api/v1/clients/",
            json=request.model_dump(mode="json"),
            headers=self.headers,
        )
        response.raise_for_status()
        return ClientView(**response.json())

    async def delete_client(self, client_id: int) -> None:
        """
        Delete a client.

        Raises:
            httpx.HTTPStatusError: If the request fails (e.g., 404 if not found)
        """
        response: Response = await self.client.delete(f"/api/v1/clients/{client_id}", headers=self.headers)
        response.raise_for_status()
