"""
Image models: generateImage tool arguments, request and binary result.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_STEPS = 30


class GenerateImageArgs(BaseModel):
    """generateImage tool input schema."""
    prompt: str = Field(description="A text description of the image you want to generate")
    steps: int = Field(
        DEFAULT_STEPS,
        description="Number of diffusion steps; higher values can improve quality but take longer",
    )

    @field_validator("prompt")
    @classmethod
    def _check_prompt(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Prompt cannot be empty")
        return value


class ImageRequest(BaseModel):
    prompt: str
    steps: Optional[int] = DEFAULT_STEPS


class BinaryImage(BaseModel):
    data: bytes
    content_type: str = "image/jpeg"
    cache_control: str = "public, max-age=86400"
