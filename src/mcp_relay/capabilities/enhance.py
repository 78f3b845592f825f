"""
Prompt enhancement for image generation.

Short prompts without quality keywords get a fixed descriptor suffix and never
reach the model. Everything else is rewritten by the language model, falling
back to a deterministic value when the model fails or returns nothing.
"""

import logging
from typing import Optional

from mcp_relay.config import PROMPT_MODEL
from mcp_relay.observability import EventSink, LoggingEventSink
from mcp_relay.providers import ModelRunner

SHORT_PROMPT_THRESHOLD = 30
MAX_TOKENS = 150
QUALITY_SUFFIX = ", high resolution, detailed, professional quality"
QUALITY_KEYWORDS = (
    "high resolution",
    "detailed",
    "professional",
    "4k",
    "8k",
    "hyperdetailed",
    "photorealistic",
    "sharp focus",
)

SYSTEM_PROMPT = (
    "You are an expert image prompt engineer specializing in photorealistic detail. "
    "Your task is to enhance image prompts for AI image generation with 150 character as a minimum. "
    "Include specific photorealistic details like texture, lighting conditions, perspective, "
    "depth of field, and atmospheric elements. "
    "Specify high-resolution rendering terms (8K, hyperdetailed), professional photography "
    "techniques (RAW, sharp focus), and realistic lighting (volumetric, golden hour, studio lighting). "
    "Keep the original intent but strategically add quality-enhancing elements. "
    "Reply with the enhanced prompt only."
)


def has_quality_keyword(prompt: str) -> bool:
    lowered = prompt.lower()
    return any(keyword in lowered for keyword in QUALITY_KEYWORDS)


def is_short(prompt: str) -> bool:
    return len(prompt) < SHORT_PROMPT_THRESHOLD


def add_quality_suffix(prompt: str) -> str:
    return f"{prompt}{QUALITY_SUFFIX}"


class PromptEnhancer:
    def __init__(
        self,
        runner: Optional[ModelRunner],
        model: str = PROMPT_MODEL,
        events: Optional[EventSink] = None,
    ):
        self._runner = runner
        self._model = model
        self._events = events or LoggingEventSink("mcp_relay.enhance")

    async def enhance(self, prompt: str) -> str:
        prompt = prompt.strip()
        if is_short(prompt) and not has_quality_keyword(prompt):
            self._events.emit("prompt.enhance.shortcut", length=len(prompt))
            return add_quality_suffix(prompt)

        if self._runner is None:
            return self._fallback(prompt, "no model runner configured")
        try:
            output = await self._runner.run(self._model, {
                "messages": [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": f'Enhance this image prompt: "{prompt}"'},
                ],
                "stream": False,
                "max_tokens": MAX_TOKENS,
            })
        except Exception as e:
            return self._fallback(prompt, str(e) or type(e).__name__)

        enhanced = output.get("response") if isinstance(output, dict) else None
        if not isinstance(enhanced, str) or not enhanced.strip():
            return self._fallback(prompt, "empty model output")
        return enhanced.strip()

    def _fallback(self, prompt: str, reason: str) -> str:
        self._events.emit("prompt.enhance.fallback", logging.WARNING, reason=reason)
        if not is_short(prompt) or has_quality_keyword(prompt):
            return prompt
        return add_quality_suffix(prompt)
