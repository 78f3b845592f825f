"""
Tool response shapes returned over the wire.

Every tool call completes with either a ToolResponseEnvelope (text content,
used for success and failure alike) or a RawResponse (binary image tool).
"""

import json
from typing import Any, Literal, Union

from pydantic import BaseModel, Field


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResponseEnvelope(BaseModel):
    content: list[TextContent]

    @classmethod
    def text(cls, text: str) -> "ToolResponseEnvelope":
        return cls(content=[TextContent(text=text)])

    @property
    def first_text(self) -> str:
        return self.content[0].text if self.content else ""


class RawResponse(BaseModel):
    """HTTP-style response for tools whose success payload is not text."""
    status: int = 200
    media_type: str = "application/json"
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = b""

    @classmethod
    def json_error(cls, status: int, payload: dict[str, Any]) -> "RawResponse":
        return cls(status=status, media_type="application/json", body=json.dumps(payload).encode("utf-8"))

    def json_body(self) -> Any:
        return json.loads(self.body.decode("utf-8"))


ToolResponse = Union[ToolResponseEnvelope, RawResponse]
