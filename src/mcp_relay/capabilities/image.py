"""
Image generation capability: enhance the prompt, run the diffusion model and
decode the base64 image it returns.
"""

import base64
import binascii
import logging
from typing import Optional

from mcp_relay.capabilities.base import failure_from_exception
from mcp_relay.capabilities.enhance import PromptEnhancer
from mcp_relay.config import IMAGE_MODEL
from mcp_relay.errors import ErrorKind
from mcp_relay.models.image import BinaryImage, ImageRequest
from mcp_relay.models.result import CapabilityResult, Failure, Success
from mcp_relay.normalize import StepRange, normalize_image_request
from mcp_relay.observability import EventSink, LoggingEventSink
from mcp_relay.providers import ModelRunner


class ImageCapability:
    def __init__(
        self,
        runner: Optional[ModelRunner],
        enhancer: PromptEnhancer,
        model: str = IMAGE_MODEL,
        steps: StepRange = StepRange(),
        content_type: str = "image/jpeg",
        cache_control: str = "public, max-age=86400",
        events: Optional[EventSink] = None,
    ):
        self._runner = runner
        self._enhancer = enhancer
        self._model = model
        self._steps = steps
        self._content_type = content_type
        self._cache_control = cache_control
        self._events = events or LoggingEventSink("mcp_relay.image")

    def normalize(self, request: ImageRequest) -> ImageRequest:
        return normalize_image_request(request, self._steps)

    async def generate_image(self, request: ImageRequest) -> CapabilityResult:
        request = self.normalize(request)
        if not request.prompt:
            return self._fail(ErrorKind.INVALID_INPUT, "Prompt cannot be empty")
        if self._runner is None:
            return self._fail(ErrorKind.CONFIGURATION, "AI binding not configured")

        try:
            prompt = await self._enhancer.enhance(request.prompt)
            output = await self._runner.run(self._model, {"prompt": prompt, "steps": request.steps})
        except Exception as e:
            failure = failure_from_exception(e)
            return self._fail(failure.kind, failure.message)

        encoded = output.get("image") if isinstance(output, dict) else None
        if not encoded:
            return self._fail(ErrorKind.EMPTY_RESULT, "No image data in response")
        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            return self._fail(ErrorKind.DECODE_ERROR, f"Image payload is not valid base64: {e}")

        self._events.emit("image.generated", bytes=len(data), steps=request.steps)
        return Success(payload=BinaryImage(
            data=data,
            content_type=self._content_type,
            cache_control=self._cache_control,
        ))

    def _fail(self, kind: ErrorKind, message: str) -> Failure:
        self._events.emit("image.failed", logging.ERROR, kind=kind.value, error=message)
        return Failure(kind=kind, message=message)
