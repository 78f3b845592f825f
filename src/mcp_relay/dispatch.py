"""
Tool dispatch: look up, validate, normalize, invoke, and map every outcome to
a wire response.

Tools are rows in a table: name, description, pydantic args model, handler and
a failure renderer. Nothing raised by a handler escapes `dispatch`.

The email tool reports both success and failure as text content inside a
normal tool result; callers distinguish "the tool ran" from "the email went
out" by reading the text. The image tool answers with a RawResponse: image
bytes on success, a non-2xx JSON diagnostic on failure.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel, ValidationError

from mcp_relay.capabilities.email import EmailCapability
from mcp_relay.capabilities.image import ImageCapability
from mcp_relay.errors import ErrorKind
from mcp_relay.models.email import EmailMessage, SendEmailArgs
from mcp_relay.models.envelope import RawResponse, ToolResponse, ToolResponseEnvelope
from mcp_relay.models.image import BinaryImage, GenerateImageArgs, ImageRequest
from mcp_relay.models.result import Failure
from mcp_relay.observability import EventSink, LoggingEventSink

SEND_EMAIL = "sendEmail"
GENERATE_IMAGE = "generateImage"


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    args_model: type[BaseModel]
    handler: Callable[[Any], Awaitable[ToolResponse]]
    render_failure: Callable[[Failure], ToolResponse]

    def descriptor(self) -> dict[str, Any]:
        """MCP tools/list entry."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.args_model.model_json_schema(by_alias=True),
        }


def describe_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(piece) for piece in item.get("loc", ()))
        message = item.get("msg", "invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "invalid arguments"


def email_failure_envelope(failure: Failure) -> ToolResponseEnvelope:
    return ToolResponseEnvelope.text(f"Failed to send email: {failure.message}")


def image_failure_response(failure: Failure) -> RawResponse:
    if failure.kind == ErrorKind.INVALID_INPUT:
        return RawResponse.json_error(400, {"error": failure.message})
    status = 504 if failure.kind == ErrorKind.TIMEOUT else 500
    return RawResponse.json_error(status, {"error": "Image generation failed", "details": failure.message})


class ToolDispatcher:
    def __init__(
        self,
        email: EmailCapability,
        image: ImageCapability,
        events: Optional[EventSink] = None,
    ):
        self._email = email
        self._image = image
        self._events = events or LoggingEventSink("mcp_relay.dispatch")
        self._tools: dict[str, ToolSpec] = {spec.name: spec for spec in self._build_table()}

    def _build_table(self) -> list[ToolSpec]:
        return [
            ToolSpec(
                name=SEND_EMAIL,
                description="Send an email to one or more recipients.",
                args_model=SendEmailArgs,
                handler=self._send_email,
                render_failure=email_failure_envelope,
            ),
            ToolSpec(
                name=GENERATE_IMAGE,
                description="Generate an image from a text prompt. Returns the image bytes.",
                args_model=GenerateImageArgs,
                handler=self._generate_image,
                render_failure=image_failure_response,
            ),
        ]

    def tools(self) -> list[ToolSpec]:
        return list(self._tools.values())

    async def dispatch(self, tool_name: str, raw_args: Optional[dict[str, Any]]) -> ToolResponse:
        spec = self._tools.get(tool_name)
        if spec is None:
            self._events.emit("tool.call.error", logging.WARNING, name=tool_name, error="unknown tool")
            return ToolResponseEnvelope.text(f"Unknown tool: {tool_name}")

        try:
            args = spec.args_model.model_validate(raw_args or {})
        except ValidationError as e:
            reason = describe_validation_error(e)
            self._events.emit("tool.call.error", logging.WARNING, name=tool_name, error=reason)
            return spec.render_failure(Failure(kind=ErrorKind.INVALID_INPUT, message=reason))

        self._events.emit("tool.call.start", name=tool_name)
        start = time.monotonic()
        try:
            return await spec.handler(args)
        except Exception as e:
            self._events.emit("tool.call.error", logging.ERROR, name=tool_name, error=repr(e))
            return spec.render_failure(Failure(kind=ErrorKind.UNEXPECTED, message=str(e) or type(e).__name__))
        finally:
            duration = time.monotonic() - start
            self._events.emit("tool.call.end", name=tool_name, duration_ms=f"{duration * 1000:.3f}")

    async def _send_email(self, args: SendEmailArgs) -> ToolResponseEnvelope:
        message = self._email.normalize(EmailMessage(
            to=args.to,
            subject=args.subject,
            sender=args.sender,
            text=args.body,
            html=args.html_body,
        ))
        result = await self._email.send_email(message)
        if isinstance(result, Failure):
            return email_failure_envelope(result)

        recipients = ", ".join(result.payload.to)
        if not result.payload.id:
            return ToolResponseEnvelope.text(
                f"Email sent to {recipients}, but the provider returned no confirmation id."
            )
        return ToolResponseEnvelope.text(
            f"Email sent successfully to {recipients}. Message ID: {result.payload.id}"
        )

    async def _generate_image(self, args: GenerateImageArgs) -> RawResponse:
        request = self._image.normalize(ImageRequest(prompt=args.prompt, steps=args.steps))
        result = await self._image.generate_image(request)
        if isinstance(result, Failure):
            return image_failure_response(result)

        image: BinaryImage = result.payload
        return RawResponse(
            status=200,
            media_type=image.content_type,
            headers={"Cache-Control": image.cache_control},
            body=image.data,
        )
