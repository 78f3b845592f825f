"""
CapabilityResult: Success | Failure, returned as data by every capability.
"""

from typing import Any, Union

from pydantic import BaseModel

from mcp_relay.errors import ErrorKind


class Success(BaseModel):
    ok: bool = True
    payload: Any = None


class Failure(BaseModel):
    ok: bool = False
    kind: ErrorKind
    message: str


CapabilityResult = Union[Success, Failure]
