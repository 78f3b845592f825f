"""
Gateway: wires configuration, providers, capabilities, dispatch, sessions and
the auth gate together.
"""

from typing import Any, Mapping, Optional

from mcp_relay.auth import AuthGate
from mcp_relay.capabilities.email import EmailCapability
from mcp_relay.capabilities.enhance import PromptEnhancer
from mcp_relay.capabilities.image import ImageCapability
from mcp_relay.config import RelayConfig
from mcp_relay.dispatch import ToolDispatcher
from mcp_relay.models.session import CallContext, Credential
from mcp_relay.normalize import StepRange
from mcp_relay.observability import EventSink, LoggingEventSink
from mcp_relay.providers import EmailProvider, ModelRunner, ResendProvider, WorkersAIRunner
from mcp_relay.sessions import ActorFactory, SessionActor, SessionRegistry
from mcp_relay.transport.http import HttpClient


class Gateway:
    def __init__(
        self,
        config: RelayConfig,
        *,
        email_provider: Optional[EmailProvider] = None,
        model_runner: Optional[ModelRunner] = None,
        events: Optional[EventSink] = None,
        actor_factory: Optional[ActorFactory] = None,
    ):
        self.config = config
        self._events: EventSink = events or LoggingEventSink("mcp_relay")
        self._owned: list[Any] = []

        if email_provider is None and config.email_configured:
            email_provider = ResendProvider(HttpClient(
                config.resend_base_url, token=config.resend_api_key, timeout=config.request_timeout,
            ))
            self._owned.append(email_provider)
        if model_runner is None and config.ai_configured:
            model_runner = WorkersAIRunner(
                HttpClient(config.ai_base_url, token=config.cloudflare_api_token, timeout=config.request_timeout),
                account_id=config.cloudflare_account_id or "",
            )
            self._owned.append(model_runner)

        self.email = EmailCapability(email_provider, config.default_sender, events=self._events.child("email"))
        self.enhancer = PromptEnhancer(model_runner, model=config.prompt_model, events=self._events.child("enhance"))
        self.image = ImageCapability(
            model_runner,
            self.enhancer,
            model=config.image_model,
            steps=StepRange(low=config.min_steps, high=config.max_steps),
            content_type=config.image_content_type,
            cache_control=config.image_cache_control,
            events=self._events.child("image"),
        )
        self.dispatcher = ToolDispatcher(self.email, self.image, events=self._events.child("dispatch"))
        self.auth = AuthGate(events=self._events.child("auth"))
        self.sessions = SessionRegistry(
            actor_factory or self._new_actor,
            fixed_key=config.session_key,
            events=self._events.child("session"),
        )

    def _new_actor(self, key: str, credential: Credential) -> SessionActor:
        return SessionActor(key, credential, self.dispatcher, events=self._events.child("session"))

    def connect(
        self,
        headers: Mapping[str, Any],
        token: Any = None,
        session_key: Optional[str] = None,
    ) -> tuple[SessionActor, CallContext]:
        """Authorize a connection, then resolve its session actor.

        Raises AuthError before any actor is created or resumed.
        """
        credential = self.auth.authorize(headers, token=token)
        actor = self.sessions.resolve(credential, key=session_key)
        return actor, CallContext(credential=credential, session_key=actor.key)

    async def close(self) -> None:
        for owned in self._owned:
            await owned.close()
        self._owned.clear()
