"""
External capability ports and their REST adapters.

EmailProvider.send returns `{"data": {"id": ...}}` or `{"error": {"message": ...}}`
rather than raising for provider-reported failures. ModelRunner.run returns the
model output mapping and raises ProviderError when the runner reports a failure.
"""

from typing import Any, Protocol

from mcp_relay.errors import ProviderError
from mcp_relay.transport.http import HttpClient


class EmailProvider(Protocol):
    async def send(self, message: dict[str, Any]) -> dict[str, Any]:
        ...


class ModelRunner(Protocol):
    async def run(self, model: str, params: dict[str, Any]) -> dict[str, Any]:
        ...


class ResendProvider:
    """Resend email API: POST /emails."""

    def __init__(self, http: HttpClient):
        self._http = http

    async def send(self, message: dict[str, Any]) -> dict[str, Any]:
        try:
            data = await self._http.post("/emails", message)
        except ProviderError as e:
            return {"error": {"message": e.message, "status": e.status}}
        return {"data": data if isinstance(data, dict) else {}}

    async def close(self) -> None:
        await self._http.close()


class WorkersAIRunner:
    """Cloudflare Workers AI: POST /accounts/{account_id}/ai/run/{model}."""

    def __init__(self, http: HttpClient, account_id: str):
        self._http = http
        self._account_id = account_id

    @staticmethod
    def _unwrap(json_data: Any) -> dict[str, Any]:
        """Unwrap the Cloudflare response: { "success": true, "result": <model output> }"""
        if isinstance(json_data, dict) and "success" in json_data:
            if not json_data["success"]:
                errors = json_data.get("errors") or []
                message = errors[0].get("message") if errors and isinstance(errors[0], dict) else None
                raise ProviderError(message or "Model run failed")
            result = json_data.get("result")
            return result if isinstance(result, dict) else {}
        return json_data if isinstance(json_data, dict) else {}

    async def run(self, model: str, params: dict[str, Any]) -> dict[str, Any]:
        return self._unwrap(await self._http.post(f"/accounts/{self._account_id}/ai/run/{model}", params))

    async def close(self) -> None:
        await self._http.close()
