"""
Auth gate: first point of contact for every connection.

The bearer token is treated as opaque: it must be present, and it is forwarded
to the session as call context. No signature or expiry check is made here.
"""

import logging
from typing import Any, Mapping, Optional

from mcp_relay.errors import AuthError
from mcp_relay.models.session import Credential
from mcp_relay.observability import EventSink, LoggingEventSink

BEARER_PREFIX = "bearer "


def _header(headers: Mapping[str, Any], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is None:
        lowered = name.lower()
        for key, candidate in headers.items():
            if isinstance(key, str) and key.lower() == lowered:
                value = candidate
                break
    return value if isinstance(value, str) else None


def extract_token(raw: Any) -> Optional[str]:
    """Strip an optional `Bearer` scheme; blank results count as absent.

    Only a bare token or a `Bearer` credential is accepted. Non-string input and
    other schemes (`Basic ...`) count as absent.
    """
    if not isinstance(raw, str):
        return None
    token = raw.strip()
    if token.lower().startswith(BEARER_PREFIX) or token.lower() == BEARER_PREFIX.strip():
        token = token[len(BEARER_PREFIX) - 1:].strip()
    elif any(ch.isspace() for ch in token):
        return None
    return token or None


class AuthGate:
    def __init__(self, events: Optional[EventSink] = None):
        self._events = events or LoggingEventSink("mcp_relay.auth")

    def authorize(self, headers: Mapping[str, Any], token: Any = None) -> Credential:
        """Return the credential for a connection or raise AuthError.

        `token` is an explicit credential from a transport that carries it
        outside the headers (the socket.io auth payload).
        """
        value = extract_token(token) or extract_token(_header(headers, "Authorization"))
        if not value:
            self._events.emit("auth.rejected", logging.WARNING, reason="missing bearer token")
            raise AuthError("Unauthorized")
        return Credential(token=value)
