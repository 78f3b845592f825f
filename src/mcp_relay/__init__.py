"""
mcp-relay: authenticated MCP gateway for email and image generation tools.

Tool calls arrive over HTTP (JSON-RPC) or Socket.IO, pass an auth gate, and are
dispatched by a per-session actor to the Resend and Workers AI capabilities.
"""

__version__ = "0.1.0"

from mcp_relay.errors import (
    AuthError,
    ConfigurationError,
    ErrorKind,
    ProviderError,
    RelayError,
    SessionError,
)
from mcp_relay.config import RelayConfig, load_config
from mcp_relay.gateway import Gateway
from mcp_relay.dispatch import GENERATE_IMAGE, SEND_EMAIL, ToolDispatcher

__all__ = [
    "Gateway",
    "RelayConfig",
    "load_config",
    "ToolDispatcher",
    "SEND_EMAIL",
    "GENERATE_IMAGE",
    "RelayError",
    "AuthError",
    "ConfigurationError",
    "ProviderError",
    "SessionError",
    "ErrorKind",
]
