"""HTTP adapter for datastore and object storage APIs."""
from __future__ import annotations

from typing import Any, Dict, Optional

import httpx


class AssetAPIError(RuntimeError):
    """Raised when an API answers with an error status."""

    def __init__(self, status_code: int, method: str, endpoint: str, detail: Any):
        self.status_code = status_code
        self.method = method
        self.endpoint = endpoint
        self.detail = detail
        super().__init__(f"API error {status_code} on {method} {endpoint}: {detail}")


class HTTPAPIClient:
    """
    HTTP client adapter for API calls.

    Implements IAPIClient protocol. Errors are raised, never retried.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 60,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url
        self._timeout = timeout
        self._headers = headers or {}
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers=self._headers,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("HTTPAPIClient not initialized. Use 'async with' context.")
        return self._client

    @staticmethod
    def _raise_for_status(response: httpx.Response, method: str, endpoint: str) -> None:
        if response.status_code < 400:
            return
        try:
            error_detail = response.json()
        except ValueError:
            error_detail = response.text
        raise AssetAPIError(response.status_code, method, endpoint, error_detail)

    async def post(self, endpoint: str, json: Dict) -> httpx.Response:
        response = await self._require_client().post(endpoint, json=json)
        self._raise_for_status(response, "POST", endpoint)
        return response

    async def post_multipart(
        self,
        endpoint: str,
        data: Dict[str, str],
        files: Dict[str, Any],
    ) -> httpx.Response:
        response = await self._require_client().post(endpoint, data=data, files=files)
        self._raise_for_status(response, "POST", endpoint)
        return response

    async def get(self, endpoint: str, params: Optional[Dict] = None) -> httpx.Response:
        response = await self._require_client().get(endpoint, params=params)
        self._raise_for_status(response, "GET", endpoint)
        return response
