"""Tool dispatch pipeline tests."""

import pytest

from mcp_relay.config import IMAGE_MODEL
from mcp_relay.dispatch import GENERATE_IMAGE, SEND_EMAIL
from mcp_relay.errors import ProviderError
from mcp_relay.models.envelope import RawResponse, ToolResponseEnvelope

from conftest import IMAGE_BYTES


class TestSendEmailTool:
    @pytest.mark.asyncio
    async def test_success_includes_message_id(self, gateway, email_provider):
        envelope = await gateway.dispatcher.dispatch(SEND_EMAIL, {"to": "a@b.com", "subject": "Hi", "body": "test"})
        assert isinstance(envelope, ToolResponseEnvelope)
        assert envelope.content[0].type == "text"
        assert "msg_123" in envelope.first_text
        assert len(email_provider.calls) == 1

    @pytest.mark.asyncio
    async def test_invalid_address_rejected_before_provider(self, gateway, email_provider):
        envelope = await gateway.dispatcher.dispatch(
            SEND_EMAIL, {"to": "not-an-email", "subject": "Hi", "body": "test"}
        )
        assert isinstance(envelope, ToolResponseEnvelope)
        assert "Invalid email format" in envelope.first_text
        assert email_provider.calls == []

    @pytest.mark.asyncio
    async def test_missing_required_field(self, gateway, email_provider):
        envelope = await gateway.dispatcher.dispatch(SEND_EMAIL, {"to": "a@b.com", "body": "test"})
        assert envelope.first_text.startswith("Failed to send email:")
        assert "subject" in envelope.first_text
        assert email_provider.calls == []

    @pytest.mark.asyncio
    async def test_all_blank_recipient_list(self, gateway, email_provider):
        envelope = await gateway.dispatcher.dispatch(SEND_EMAIL, {"to": ["", "  "], "subject": "Hi", "body": "x"})
        assert envelope.first_text.startswith("Failed to send email:")
        assert email_provider.calls == []

    @pytest.mark.asyncio
    async def test_aliases_for_html_and_from(self, gateway, email_provider):
        await gateway.dispatcher.dispatch(SEND_EMAIL, {
            "to": ["a@b.com", "c@d.org"],
            "subject": "Hi",
            "body": "plain",
            "htmlBody": "<p>rich</p>",
            "from": "me@example.com",
        })
        sent = email_provider.calls[0]
        assert sent["from"] == "me@example.com"
        assert sent["html"] == "<p>rich</p>"
        assert sent["to"] == ["a@b.com", "c@d.org"]

    @pytest.mark.asyncio
    async def test_no_confirmation_id_is_partial_success(self, gateway, email_provider):
        email_provider.response = {"data": {}}
        envelope = await gateway.dispatcher.dispatch(SEND_EMAIL, {"to": "a@b.com", "subject": "Hi", "body": "x"})
        assert "no confirmation id" in envelope.first_text
        assert "successfully" not in envelope.first_text
        assert not envelope.first_text.startswith("Failed")

    @pytest.mark.asyncio
    async def test_numeric_message_id_is_success(self, gateway, email_provider):
        email_provider.response = {"data": {"id": 42}}
        envelope = await gateway.dispatcher.dispatch(SEND_EMAIL, {"to": "a@b.com", "subject": "Hi", "body": "x"})
        assert envelope.first_text == "Email sent successfully to a@b.com. Message ID: 42"
        assert len(email_provider.calls) == 1

    @pytest.mark.asyncio
    async def test_provider_error_reported_as_text(self, gateway, email_provider):
        email_provider.response = {"error": {"message": "Invalid API key"}}
        envelope = await gateway.dispatcher.dispatch(SEND_EMAIL, {"to": "a@b.com", "subject": "Hi", "body": "x"})
        assert envelope.first_text == "Failed to send email: Invalid API key"

    @pytest.mark.asyncio
    async def test_handler_exception_becomes_envelope(self, gateway, monkeypatch):
        async def boom(message):
            raise RuntimeError("boom")

        monkeypatch.setattr(gateway.email, "send_email", boom)
        envelope = await gateway.dispatcher.dispatch(SEND_EMAIL, {"to": "a@b.com", "subject": "Hi", "body": "x"})
        assert envelope.first_text == "Failed to send email: boom"


class TestGenerateImageTool:
    @pytest.mark.asyncio
    async def test_steps_clamped_end_to_end(self, gateway, model_runner):
        response = await gateway.dispatcher.dispatch(GENERATE_IMAGE, {"prompt": "a castle", "steps": 1000})
        assert isinstance(response, RawResponse)
        assert response.status == 200
        assert model_runner.calls_for(IMAGE_MODEL)[0]["steps"] == 100

    @pytest.mark.asyncio
    async def test_binary_response(self, gateway):
        response = await gateway.dispatcher.dispatch(GENERATE_IMAGE, {"prompt": "a castle"})
        assert response.body == IMAGE_BYTES
        assert response.media_type == "image/jpeg"
        assert response.headers == {"Cache-Control": "public, max-age=86400"}

    @pytest.mark.asyncio
    async def test_empty_prompt_is_400(self, gateway, model_runner):
        response = await gateway.dispatcher.dispatch(GENERATE_IMAGE, {"prompt": "  "})
        assert response.status == 400
        assert "Prompt cannot be empty" in response.json_body()["error"]
        assert model_runner.calls == []

    @pytest.mark.asyncio
    async def test_wrong_type_is_400(self, gateway, model_runner):
        response = await gateway.dispatcher.dispatch(GENERATE_IMAGE, {"prompt": "x", "steps": "many"})
        assert response.status == 400
        assert model_runner.calls == []

    @pytest.mark.asyncio
    async def test_provider_failure_is_500_with_details(self, gateway, model_runner):
        model_runner.errors[IMAGE_MODEL] = ProviderError("capacity exceeded")
        response = await gateway.dispatcher.dispatch(GENERATE_IMAGE, {"prompt": "a castle"})
        assert response.status == 500
        assert response.media_type == "application/json"
        assert response.json_body() == {"error": "Image generation failed", "details": "capacity exceeded"}


class TestTable:
    @pytest.mark.asyncio
    async def test_unknown_tool(self, gateway, email_provider, model_runner):
        envelope = await gateway.dispatcher.dispatch("deleteEverything", {})
        assert isinstance(envelope, ToolResponseEnvelope)
        assert envelope.first_text == "Unknown tool: deleteEverything"
        assert email_provider.calls == []
        assert model_runner.calls == []

    def test_descriptors_use_wire_names(self, gateway):
        descriptors = {spec.name: spec.descriptor() for spec in gateway.dispatcher.tools()}
        assert set(descriptors) == {SEND_EMAIL, GENERATE_IMAGE}
        email_schema = descriptors[SEND_EMAIL]["inputSchema"]
        assert set(email_schema["properties"]) == {"to", "subject", "body", "htmlBody", "from"}
        assert set(email_schema["required"]) == {"to", "subject", "body"}
        image_schema = descriptors[GENERATE_IMAGE]["inputSchema"]
        assert image_schema["required"] == ["prompt"]
        assert image_schema["properties"]["steps"]["default"] == 30

    @pytest.mark.asyncio
    async def test_call_events_recorded(self, gateway, events):
        await gateway.dispatcher.dispatch(SEND_EMAIL, {"to": "a@b.com", "subject": "Hi", "body": "x"})
        names = events.names()
        assert names.index("tool.call.start") < names.index("tool.call.end")
