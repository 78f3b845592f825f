"""
Shared exception-to-Failure mapping for capability invokers.
"""

import httpx

from mcp_relay.errors import ErrorKind, RelayError
from mcp_relay.models.result import Failure


def failure_from_exception(exc: BaseException) -> Failure:
    if isinstance(exc, httpx.TimeoutException):
        return Failure(kind=ErrorKind.TIMEOUT, message=f"Request timed out: {exc}")
    if isinstance(exc, RelayError):
        try:
            kind = ErrorKind(exc.code)
        except ValueError:
            kind = ErrorKind.UNEXPECTED
        return Failure(kind=kind, message=exc.message)
    return Failure(kind=ErrorKind.UNEXPECTED, message=str(exc) or type(exc).__name__)
