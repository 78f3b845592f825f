"""
HTTP entry point: MCP JSON-RPC over `POST /mcp`, plus the socket.io
namespace mounted on the same ASGI app.

Every request passes the auth gate before a session actor is resolved. Tool
results that are envelopes go back as the JSON-RPC `result`; the image tool's
RawResponse goes back as the HTTP response itself.
"""

import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import socketio
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from mcp_relay import __version__
from mcp_relay.errors import AuthError
from mcp_relay.gateway import Gateway
from mcp_relay.models.envelope import RawResponse
from mcp_relay.models.session import CallContext, ToolCallRequest
from mcp_relay.sessions import SessionActor
from mcp_relay.transport.socketio import create_socket_server

PROTOCOL_VERSION = "2025-03-26"
SERVER_NAME = "mcp-relay"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602


def rpc_result(request_id: Any, result: Any) -> JSONResponse:
    return JSONResponse({"jsonrpc": "2.0", "id": request_id, "result": result})


def rpc_error(request_id: Any, code: int, message: str) -> JSONResponse:
    return JSONResponse({"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}})


def to_http(raw: RawResponse) -> Response:
    return Response(content=raw.body, status_code=raw.status, media_type=raw.media_type, headers=raw.headers)


async def handle_rpc(actor: SessionActor, context: CallContext, message: Any) -> Response:
    if not isinstance(message, dict) or message.get("jsonrpc") != "2.0" or not isinstance(message.get("method"), str):
        return rpc_error(None, INVALID_REQUEST, "Invalid JSON-RPC request")

    request_id = message.get("id")
    method = message["method"]
    params = message.get("params") or {}

    if method == "initialize":
        return rpc_result(request_id, {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        })
    if method.startswith("notifications/"):
        return Response(status_code=202)
    if method == "ping":
        return rpc_result(request_id, {})
    if method == "tools/list":
        return rpc_result(request_id, {"tools": actor.list_tools()})
    if method == "tools/call":
        try:
            call = ToolCallRequest(name=params.get("name"), arguments=params.get("arguments") or {})
        except (AttributeError, ValidationError):
            return rpc_error(request_id, INVALID_PARAMS, "tools/call requires a tool name and an arguments object")
        response = await actor.dispatch(call, context)
        if isinstance(response, RawResponse):
            return to_http(response)
        return rpc_result(request_id, response.model_dump())
    return rpc_error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")


def create_app(gateway: Gateway) -> FastAPI:
    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        await gateway.close()

    app = FastAPI(title=SERVER_NAME, version=__version__, lifespan=lifespan)
    app.state.gateway = gateway

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/mcp")
    async def mcp(request: Request) -> Response:
        try:
            actor, context = gateway.connect(request.headers, session_key=request.headers.get("mcp-session-id"))
        except AuthError as e:
            return JSONResponse({"error": e.message}, status_code=401)
        try:
            message = json.loads(await request.body())
        except ValueError:
            return rpc_error(None, PARSE_ERROR, "Parse error")
        return await handle_rpc(actor, context, message)

    return app


def create_asgi_app(gateway: Gateway, app: Optional[FastAPI] = None) -> Any:
    """FastAPI app with the socket.io namespace mounted alongside it."""
    app = app or create_app(gateway)
    return socketio.ASGIApp(create_socket_server(gateway), other_asgi_app=app)
