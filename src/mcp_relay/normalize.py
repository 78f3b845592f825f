"""
Field normalization: pure, idempotent functions applied through one rule
table per entity.

Each rule maps a field name to a function of (current value, defaults). The
table order is the order defaults are resolved in.
"""

import re
from typing import TYPE_CHECKING, Any, Callable, NamedTuple, Optional, Union

if TYPE_CHECKING:
    from mcp_relay.models.email import EmailMessage
    from mcp_relay.models.image import ImageRequest

DEFAULT_SUBJECT = "(no subject)"
MIN_STEPS = 1
MAX_STEPS = 100

# Something before the @, and a dot somewhere after a non-empty domain label.
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s.][^@\s]*\.[^@\s]+$")


class EmailDefaults(NamedTuple):
    sender: str
    subject: str = DEFAULT_SUBJECT


class StepRange(NamedTuple):
    low: int = MIN_STEPS
    high: int = MAX_STEPS
    default: int = 30


def trim(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def optional_text(value: Optional[str]) -> Optional[str]:
    """Blank strings become None; anything else is kept as-is."""
    if value is None or not value.strip():
        return None
    return value


def text_or_default(value: Optional[str], default: str) -> str:
    value = trim(value)
    return value if value else default


def clean_recipients(value: Union[str, list[str], None]) -> list[str]:
    """Coerce to a list, trim each address and drop empty entries."""
    if value is None:
        return []
    items = [value] if isinstance(value, str) else value
    return [item.strip() for item in items if item and item.strip()]


def is_email_address(value: str) -> bool:
    return bool(_EMAIL_RE.match(value.strip()))


def clamp(value: Optional[int], low: int, high: int, default: Optional[int] = None) -> int:
    if value is None:
        value = default if default is not None else low
    return max(low, min(int(value), high))


EMAIL_RULES: dict[str, Callable[[Any, EmailDefaults], Any]] = {
    "to": lambda value, _d: clean_recipients(value),
    "subject": lambda value, d: text_or_default(value, d.subject),
    "sender": lambda value, d: text_or_default(value, d.sender),
    "text": lambda value, _d: optional_text(value),
    "html": lambda value, _d: optional_text(value),
}

IMAGE_RULES: dict[str, Callable[[Any, StepRange], Any]] = {
    "prompt": lambda value, _r: trim(value) or "",
    "steps": lambda value, r: clamp(value, r.low, r.high, r.default),
}


def _apply(model: Any, rules: dict[str, Callable[[Any, Any], Any]], defaults: Any) -> Any:
    values = {name: rule(getattr(model, name), defaults) for name, rule in rules.items()}
    return model.model_copy(update=values)


def normalize_email(message: "EmailMessage", defaults: EmailDefaults) -> "EmailMessage":
    return _apply(message, EMAIL_RULES, defaults)


def normalize_image_request(request: "ImageRequest", steps: StepRange = StepRange()) -> "ImageRequest":
    return _apply(request, IMAGE_RULES, steps)
