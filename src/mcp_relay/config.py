"""
Gateway configuration.

Every credential and binding the gateway needs is a field here. Values are
resolved from defaults, then the JSON config file, then environment variables.
"""

import json
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ValidationError

from mcp_relay.errors import ConfigurationError

CONFIG_FILE = Path.home() / ".mcp-relay" / "config.json"

DEFAULT_SENDER = "MCP Relay <onboarding@resend.dev>"
IMAGE_MODEL = "@cf/black-forest-labs/flux-1-schnell"
PROMPT_MODEL = "@cf/meta/llama-4-scout-17b-16e-instruct"

ENV_VARS = {
    "resend_api_key": "RESEND_API_KEY",
    "resend_base_url": "RESEND_BASE_URL",
    "default_sender": "RELAY_DEFAULT_SENDER",
    "cloudflare_account_id": "CLOUDFLARE_ACCOUNT_ID",
    "cloudflare_api_token": "CLOUDFLARE_API_TOKEN",
    "ai_base_url": "CLOUDFLARE_AI_BASE_URL",
    "image_model": "RELAY_IMAGE_MODEL",
    "prompt_model": "RELAY_PROMPT_MODEL",
    "session_key": "RELAY_SESSION_KEY",
    "request_timeout": "RELAY_REQUEST_TIMEOUT",
    "host": "RELAY_HOST",
    "port": "RELAY_PORT",
}

REQUIRED = ("resend_api_key", "cloudflare_account_id", "cloudflare_api_token")


class RelayConfig(BaseModel):
    resend_api_key: Optional[str] = None
    resend_base_url: str = "https://api.resend.com"
    # Fallback sender for messages without "from"; every use is logged.
    default_sender: str = DEFAULT_SENDER

    cloudflare_account_id: Optional[str] = None
    cloudflare_api_token: Optional[str] = None
    ai_base_url: str = "https://api.cloudflare.com/client/v4"
    image_model: str = IMAGE_MODEL
    prompt_model: str = PROMPT_MODEL
    image_content_type: str = "image/jpeg"
    image_cache_control: str = "public, max-age=86400"
    min_steps: int = 1
    max_steps: int = 100

    # One actor for every connection; null or "" gives each mcp-session-id its own actor.
    session_key: Optional[str] = "default"
    request_timeout: float = 30.0
    host: str = "127.0.0.1"
    port: int = 8787

    @property
    def email_configured(self) -> bool:
        return bool(self.resend_api_key)

    @property
    def ai_configured(self) -> bool:
        return bool(self.cloudflare_account_id and self.cloudflare_api_token)

    def missing(self) -> list[str]:
        return [name for name in REQUIRED if not getattr(self, name)]

    def ensure_complete(self) -> "RelayConfig":
        missing = self.missing()
        if missing:
            env = ", ".join(ENV_VARS[name] for name in missing)
            raise ConfigurationError(f"Missing required configuration: {env}", details={"missing": missing})
        return self

    def redacted(self) -> dict[str, Any]:
        data = self.model_dump()
        for name in ("resend_api_key", "cloudflare_api_token"):
            if data.get(name):
                data[name] = "***"
        return data


def read_config_file(path: Path) -> dict[str, Any]:
    try:
        return json.loads(path.read_text())
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Config file {path} is not valid JSON: {e}")


def load_config(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> RelayConfig:
    """Build a RelayConfig from the config file, the environment and explicit overrides."""
    environ = os.environ if environ is None else environ
    values: dict[str, Any] = read_config_file(path or CONFIG_FILE)
    for field, var in ENV_VARS.items():
        if environ.get(var):
            values[field] = environ[var]
    values.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return RelayConfig.model_validate(values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def save_config(values: dict[str, Any], path: Optional[Path] = None) -> None:
    path = path or CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(values, indent=2))
