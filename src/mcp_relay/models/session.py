"""
Session models: credential, call context and tool call requests.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class Credential(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str

    def __repr__(self) -> str:
        return "Credential(token=***)"


class CallContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    credential: Credential
    session_key: str


class ToolCallRequest(BaseModel):
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
