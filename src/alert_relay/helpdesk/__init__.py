"""Freshservice helpdesk integration: request building and ticket creation."""

from alert_relay.helpdesk.client import (
    build_ticket_payload,
    close_client,
    create_ticket,
    get_http_client,
    reset_client,
    ticket_url,
)
from alert_relay.helpdesk.request import build_ticket_request

__all__ = [
    "build_ticket_payload",
    "build_ticket_request",
    "close_client",
    "create_ticket",
    "get_http_client",
    "reset_client",
    "ticket_url",
]
