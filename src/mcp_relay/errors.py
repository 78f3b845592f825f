"""
mcp-relay error types and the failure taxonomy shared by every capability.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    INVALID_INPUT = "invalid_input"
    CONFIGURATION = "configuration"
    PROVIDER_ERROR = "provider_error"
    EMPTY_RESULT = "empty_result"
    DECODE_ERROR = "decode_error"
    TIMEOUT = "timeout"
    UNEXPECTED = "unexpected"


class RelayError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details


class AuthError(RelayError):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(ErrorKind.UNAUTHORIZED.value, message)


class ConfigurationError(RelayError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(ErrorKind.CONFIGURATION.value, message, details)


class ProviderError(RelayError):
    """Raised by provider adapters when the remote service reports a failure."""

    def __init__(self, message: str, status: Optional[int] = None, details: Optional[dict[str, Any]] = None):
        super().__init__(ErrorKind.PROVIDER_ERROR.value, message, details)
        self.status = status


class SessionError(RelayError):
    def __init__(self, message: str, code: str = "session_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)
