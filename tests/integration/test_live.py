"""
Integration tests for mcp-relay: calls the real Resend and Workers AI APIs.

Requires environment variables:
  RESEND_API_KEY, CLOUDFLARE_ACCOUNT_ID, CLOUDFLARE_API_TOKEN
  RELAY_TEST_RECIPIENT : address that may receive a test email

Run: RELAY_INTEGRATION=1 pytest tests/integration/ -v
"""

import os

import pytest
from fastapi.testclient import TestClient

from mcp_relay.config import load_config
from mcp_relay.gateway import Gateway
from mcp_relay.server import create_app

SKIP = not os.environ.get("RELAY_INTEGRATION")
RECIPIENT = os.environ.get("RELAY_TEST_RECIPIENT", "")
AUTH = {"Authorization": "Bearer integration"}

pytestmark = pytest.mark.skipif(SKIP, reason="RELAY_INTEGRATION not set")


@pytest.fixture
def client():
    with TestClient(create_app(Gateway(load_config().ensure_complete()))) as test_client:
        yield test_client


def call(client, name, arguments):
    return client.post("/mcp", headers=AUTH, json={
        "jsonrpc": "2.0", "id": 1, "method": "tools/call",
        "params": {"name": name, "arguments": arguments},
    })


@pytest.mark.skipif(not RECIPIENT, reason="RELAY_TEST_RECIPIENT not set")
def test_send_email(client):
    resp = call(client, "sendEmail", {"to": RECIPIENT, "subject": "mcp-relay integration", "body": "ping"})
    text = resp.json()["result"]["content"][0]["text"]
    assert text.startswith("Email sent successfully"), text


def test_generate_image(client):
    resp = call(client, "generateImage", {"prompt": "a lighthouse on a cliff at dusk", "steps": 4})
    assert resp.status_code == 200, resp.text
    assert resp.headers["content-type"] == "image/jpeg"
    assert len(resp.content) > 1000
