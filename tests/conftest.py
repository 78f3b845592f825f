"""Shared test doubles for mcp-relay."""

import base64
import logging
from typing import Any, Optional

import pytest

from mcp_relay.config import IMAGE_MODEL, PROMPT_MODEL, RelayConfig
from mcp_relay.gateway import Gateway
from mcp_relay.sessions import SessionActor

IMAGE_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF-fake-jpeg"
IMAGE_B64 = base64.b64encode(IMAGE_BYTES).decode("ascii")
TOKEN = "test-token"
AUTH = {"Authorization": f"Bearer {TOKEN}"}


class FakeEmailProvider:
    """Records every send; returns `response` or raises `error`."""

    def __init__(self, response: Optional[dict[str, Any]] = None, error: Optional[Exception] = None):
        self.response = response if response is not None else {"data": {"id": "msg_123"}}
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def send(self, message: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(message)
        if self.error is not None:
            raise self.error
        return self.response


class FakeModelRunner:
    """Per-model canned outputs or errors; records (model, params) for each run."""

    def __init__(
        self,
        responses: Optional[dict[str, Any]] = None,
        errors: Optional[dict[str, Exception]] = None,
    ):
        self.responses = responses if responses is not None else {
            PROMPT_MODEL: {"response": "an enhanced prompt"},
            IMAGE_MODEL: {"image": IMAGE_B64},
        }
        self.errors = errors or {}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def run(self, model: str, params: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((model, params))
        if model in self.errors:
            raise self.errors[model]
        return self.responses.get(model, {})

    def calls_for(self, model: str) -> list[dict[str, Any]]:
        return [params for called, params in self.calls if called == model]


class RecordingEventSink:
    def __init__(self) -> None:
        self.events: list[tuple[str, int, dict[str, Any]]] = []

    def child(self, suffix: str) -> "RecordingEventSink":
        return self

    def emit(self, event: str, level: int = logging.INFO, **fields: Any) -> None:
        self.events.append((event, level, fields))

    def names(self) -> list[str]:
        return [name for name, _, _ in self.events]


class ActorFactorySpy:
    """Counts session actor constructions."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.gateway: Optional[Gateway] = None

    def __call__(self, key, credential) -> SessionActor:
        self.calls.append(key)
        return SessionActor(key, credential, self.gateway.dispatcher)


@pytest.fixture
def email_provider() -> FakeEmailProvider:
    return FakeEmailProvider()


@pytest.fixture
def model_runner() -> FakeModelRunner:
    return FakeModelRunner()


@pytest.fixture
def events() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def config() -> RelayConfig:
    return RelayConfig(
        resend_api_key="re_test",
        cloudflare_account_id="acct",
        cloudflare_api_token="cf_test",
        default_sender="Relay <relay@example.com>",
    )


@pytest.fixture
def actor_factory() -> ActorFactorySpy:
    return ActorFactorySpy()


@pytest.fixture
def gateway(config, email_provider, model_runner, events, actor_factory) -> Gateway:
    gw = Gateway(
        config,
        email_provider=email_provider,
        model_runner=model_runner,
        events=events,
        actor_factory=actor_factory,
    )
    actor_factory.gateway = gw
    return gw
