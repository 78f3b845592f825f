"""
Email capability: validates a normalized EmailMessage and hands it to the
email provider port.
"""

import logging
from typing import Optional

from mcp_relay.capabilities.base import failure_from_exception
from mcp_relay.errors import ErrorKind
from mcp_relay.models.email import EmailMessage, EmailReceipt
from mcp_relay.models.result import CapabilityResult, Failure, Success
from mcp_relay.normalize import EmailDefaults, is_email_address, normalize_email, trim
from mcp_relay.observability import EventSink, LoggingEventSink
from mcp_relay.providers import EmailProvider


class EmailCapability:
    def __init__(
        self,
        provider: Optional[EmailProvider],
        default_sender: str,
        events: Optional[EventSink] = None,
    ):
        self._provider = provider
        self._defaults = EmailDefaults(sender=default_sender)
        self._events = events or LoggingEventSink("mcp_relay.email")

    def normalize(self, message: EmailMessage) -> EmailMessage:
        if not trim(message.sender):
            self._events.emit("email.default_sender", logging.WARNING, sender=self._defaults.sender)
        return normalize_email(message, self._defaults)

    async def send_email(self, message: EmailMessage) -> CapabilityResult:
        message = self.normalize(message)

        if not message.recipients:
            return self._fail(ErrorKind.INVALID_INPUT, "At least one recipient address is required")
        for address in message.recipients:
            if not is_email_address(address):
                return self._fail(ErrorKind.INVALID_INPUT, f"Invalid email format: {address}")
        if self._provider is None:
            return self._fail(ErrorKind.CONFIGURATION, "Email provider API key is not configured")

        try:
            result = await self._provider.send(message.to_provider_payload())
        except Exception as e:
            failure = failure_from_exception(e)
            self._events.emit("email.failed", logging.ERROR, kind=failure.kind.value, error=failure.message)
            return failure

        error = result.get("error") if isinstance(result, dict) else None
        if error:
            message_text = error.get("message") if isinstance(error, dict) else str(error)
            return self._fail(ErrorKind.PROVIDER_ERROR, message_text or "Unknown provider error")

        data = result.get("data") if isinstance(result, dict) else None
        raw_id = data.get("id") if isinstance(data, dict) else None
        receipt = EmailReceipt(id=None if raw_id in (None, "") else str(raw_id), to=message.recipients)
        self._events.emit("email.sent", id=receipt.id, to=",".join(receipt.to))
        return Success(payload=receipt)

    def _fail(self, kind: ErrorKind, message: str) -> Failure:
        self._events.emit("email.failed", logging.WARNING, kind=kind.value, error=message)
        return Failure(kind=kind, message=message)
