"""
Outbound REST client shared by the provider adapters.
"""

from typing import Any, Optional

import httpx

from mcp_relay import __version__
from mcp_relay.errors import ProviderError

DEFAULT_TIMEOUT = 30.0


class HttpClient:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": f"mcp-relay/{__version__}", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def _auth_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        """Pull the provider's own message out of an error body when there is one."""
        try:
            body = resp.json()
        except ValueError:
            return f"HTTP {resp.status_code}: {resp.text[:200]}"
        if isinstance(body, dict):
            if body.get("message"):
                return str(body["message"])
            errors = body.get("errors")
            if isinstance(errors, list) and errors and isinstance(errors[0], dict) and errors[0].get("message"):
                return str(errors[0]["message"])
            error = body.get("error")
            if isinstance(error, str) and error:
                return error
        return f"HTTP {resp.status_code}: {resp.text[:200]}"

    async def post(self, path: str, body: Optional[dict[str, Any]] = None) -> Any:
        resp = await self._client.post(path, json=body, headers=self._auth_headers())
        if resp.status_code >= 400:
            raise ProviderError(self._error_message(resp), status=resp.status_code)
        return resp.json()

    async def close(self) -> None:
        await self._client.aclose()
