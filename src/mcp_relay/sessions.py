"""
Session actors: one initialized tool registry per session key.
"""

import asyncio
from typing import Any, Callable, Optional

from mcp_relay.dispatch import ToolDispatcher, ToolSpec
from mcp_relay.errors import SessionError
from mcp_relay.models.envelope import ToolResponse
from mcp_relay.models.session import CallContext, Credential, SessionState, ToolCallRequest
from mcp_relay.observability import EventSink, LoggingEventSink

DEFAULT_SESSION_KEY = "default"


class SessionActor:
    """Owns the registered tools for one session key and serializes calls against them."""

    def __init__(
        self,
        key: str,
        credential: Credential,
        dispatcher: ToolDispatcher,
        events: Optional[EventSink] = None,
    ):
        self.key = key
        self.credential = credential
        self._dispatcher = dispatcher
        self._events = events or LoggingEventSink("mcp_relay.session")
        self._state = SessionState.UNINITIALIZED
        self._registry: dict[str, ToolSpec] = {}
        self._lock = asyncio.Lock()

    @property
    def state(self) -> SessionState:
        return self._state

    def initialize(self) -> None:
        if self._state is SessionState.READY:
            return
        self._registry = {spec.name: spec for spec in self._dispatcher.tools()}
        self._state = SessionState.READY
        self._events.emit("session.ready", key=self.key, tools=",".join(self._registry))

    def list_tools(self) -> list[dict[str, Any]]:
        self._ensure_ready()
        return [spec.descriptor() for spec in self._registry.values()]

    async def dispatch(self, call: ToolCallRequest, context: CallContext) -> ToolResponse:
        self._ensure_ready()
        async with self._lock:
            self._events.emit("session.call", key=context.session_key, tool=call.name)
            return await self._dispatcher.dispatch(call.name, call.arguments)

    def _ensure_ready(self) -> None:
        if self._state is not SessionState.READY:
            raise SessionError(f"Session {self.key!r} used before initialization", code="session_not_ready")


ActorFactory = Callable[[str, Credential], SessionActor]


class SessionRegistry:
    """Resolves session keys to actors; a key always maps to the same instance.

    With `fixed_key` set every connection shares one actor. Without it the
    requested key picks the actor, and requests with no key share the default.
    """

    def __init__(
        self,
        factory: ActorFactory,
        fixed_key: Optional[str] = DEFAULT_SESSION_KEY,
        events: Optional[EventSink] = None,
    ):
        self._factory = factory
        self._fixed_key = fixed_key
        self._events = events or LoggingEventSink("mcp_relay.session")
        self._actors: dict[str, SessionActor] = {}

    def key_for(self, requested: Optional[str] = None) -> str:
        return self._fixed_key or requested or DEFAULT_SESSION_KEY

    def resolve(self, credential: Credential, key: Optional[str] = None) -> SessionActor:
        key = self.key_for(key)
        actor = self._actors.get(key)
        if actor is None:
            actor = self._factory(key, credential)
            actor.initialize()
            self._actors[key] = actor
            self._events.emit("session.created", key=key)
        return actor

    def __len__(self) -> int:
        return len(self._actors)
