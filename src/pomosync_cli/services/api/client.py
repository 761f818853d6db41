"""HTTP client for the remote history sync endpoint."""

from typing import Any

import httpx

from pomosync_cli.models.config_models import SyncConfig
from pomosync_cli.utils.logger import get_logger


class SyncClient:
    """Posts history to the sync endpoint and returns the decoded JSON reply."""

    def __init__(self, config: SyncConfig | None = None):
        config = config or SyncConfig()
        self.endpoint = config.endpoint
        self.timeout = config.timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "SyncClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close the underlying connection pool."""
        await self.close()

    def _get_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=self._get_headers(),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def post(self, payload: dict[str, Any]) -> Any:
        """POST *payload* as JSON and return the parsed response body.

        Raises:
            httpx.HTTPError: transport failure, timeout or non-2xx status
            ValueError: the body is not JSON
        """
        client = await self._get_client()
        logger = get_logger("api")
        logger.debug("POST %s", self.endpoint)

        response = await client.post(self.endpoint, json=payload)
        response.raise_for_status()
        logger.debug("sync endpoint answered %s", response.status_code)
        return response.json()
