"""
Socket.IO entry point: long-lived connections to a session actor.

Connect with auth={"token": ...} (or an Authorization header). Events:
  list_tools            -> list of tool descriptors
  call_tool {name, arguments} -> envelope dict, or {status, media_type, headers, body}
"""

from typing import Any, Optional

import socketio
from pydantic import ValidationError
from socketio.exceptions import ConnectionRefusedError as SocketConnectionRefused

from mcp_relay.errors import AuthError, SessionError
from mcp_relay.gateway import Gateway
from mcp_relay.models.session import CallContext, ToolCallRequest
from mcp_relay.sessions import SessionActor


def environ_headers(environ: dict[str, Any]) -> dict[str, str]:
    """HTTP_* environ keys back to header names."""
    return {
        key[5:].replace("_", "-").title(): value
        for key, value in environ.items()
        if key.startswith("HTTP_") and isinstance(value, str)
    }


class ToolNamespace(socketio.AsyncNamespace):
    def __init__(self, gateway: Gateway, namespace: str = "/"):
        super().__init__(namespace)
        self._gateway = gateway
        self._connections: dict[str, tuple[SessionActor, CallContext]] = {}

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def on_connect(self, sid: str, environ: dict[str, Any], auth: Optional[Any] = None) -> None:
        token = auth.get("token") if isinstance(auth, dict) else None
        try:
            self._connections[sid] = self._gateway.connect(environ_headers(environ), token=token)
        except AuthError as e:
            raise SocketConnectionRefused(e.message)

    async def on_disconnect(self, sid: str, *_args: Any) -> None:
        self._connections.pop(sid, None)

    async def on_list_tools(self, sid: str, *_args: Any) -> list[dict[str, Any]]:
        actor, _ = self._connection(sid)
        return actor.list_tools()

    async def on_call_tool(self, sid: str, data: Any = None) -> dict[str, Any]:
        actor, context = self._connection(sid)
        if not isinstance(data, dict):
            return {"error": "call_tool expects {name, arguments}"}
        try:
            call = ToolCallRequest(name=data.get("name"), arguments=data.get("arguments") or {})
        except ValidationError:
            return {"error": "call_tool expects {name, arguments}"}
        response = await actor.dispatch(call, context)
        return response.model_dump()

    def _connection(self, sid: str) -> tuple[SessionActor, CallContext]:
        try:
            return self._connections[sid]
        except KeyError:
            raise SessionError(f"No authorized connection for sid {sid}", code="not_connected")


def create_socket_server(gateway: Gateway) -> socketio.AsyncServer:
    sio = socketio.AsyncServer(async_mode="asgi")
    sio.register_namespace(ToolNamespace(gateway))
    return sio
