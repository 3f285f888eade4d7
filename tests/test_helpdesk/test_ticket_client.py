"""Tests for Freshservice ticket creation.

create_ticket must never raise: transport errors and unexpected responses are
logged and reported as None.
"""

import base64
import json
from unittest.mock import patch

import httpx
import pytest

from alert_relay.helpdesk.client import (
    build_ticket_payload,
    close_client,
    create_ticket,
    get_http_client,
    reset_client,
    ticket_url,
)

HOST = "acme.freshservice.com"
PAYLOAD = build_ticket_payload(
    subject="Backup failed on SERVER01",
    description="Agent offline for 3 days",
    email="noreply@dattobackup.com",
)


@pytest.fixture(autouse=True)
def _reset_singleton():
    reset_client()
    yield
    reset_client()


def _mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def test_create_ticket_returns_display_id():
    """A truthy status with a display_id yields that id; the request is well formed."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200, json={"status": True, "item": {"helpdesk_ticket": {"display_id": 42}}}
        )

    with patch("alert_relay.helpdesk.client.get_http_client", return_value=_mock_client(handler)):
        display_id = await create_ticket(HOST, "fs-key", PAYLOAD)

    assert display_id == 42
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://acme.freshservice.com/helpdesk/tickets.json"
    expected_auth = base64.b64encode(b"fs-key:dummy").decode()
    assert request.headers["Authorization"] == f"Basic {expected_auth}"

    body = json.loads(request.content)
    assert body == {
        "helpdesk_ticket": {
            "description": "Agent offline for 3 days",
            "subject": "Backup failed on SERVER01",
            "email": "noreply@dattobackup.com",
            "priority": 1,
            "status": 2,
            "source": 2,
            "ticket_type": "Incident",
        }
    }


async def test_falsy_status_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": False, "errors": ["bad email"]})

    with patch("alert_relay.helpdesk.client.get_http_client", return_value=_mock_client(handler)):
        assert await create_ticket(HOST, "fs-key", PAYLOAD) is None


async def test_missing_display_id_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": 1, "item": {}})

    with patch("alert_relay.helpdesk.client.get_http_client", return_value=_mock_client(handler)):
        assert await create_ticket(HOST, "fs-key", PAYLOAD) is None


async def test_non_object_body_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=["status", 1])

    with patch("alert_relay.helpdesk.client.get_http_client", return_value=_mock_client(handler)):
        assert await create_ticket(HOST, "fs-key", PAYLOAD) is None


async def test_non_json_body_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad Gateway</html>")

    with patch("alert_relay.helpdesk.client.get_http_client", return_value=_mock_client(handler)):
        assert await create_ticket(HOST, "fs-key", PAYLOAD) is None


async def test_transport_error_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with patch("alert_relay.helpdesk.client.get_http_client", return_value=_mock_client(handler)):
        assert await create_ticket(HOST, "fs-key", PAYLOAD) is None


def test_ticket_url():
    assert ticket_url(HOST, 42) == "https://acme.freshservice.com/helpdesk/tickets/42"


async def test_http_client_is_cached_and_closed():
    first = get_http_client()
    assert get_http_client() is first

    await close_client()

    assert first.is_closed
    assert get_http_client() is not first
