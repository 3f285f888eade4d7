"""Async Freshservice client: shared httpx client and ticket creation.

Follows the lazy-init singleton pattern used for the Slack clients. Ticket
creation never raises: transport failures and unexpected responses are logged
and reported as ``None`` so the caller can leave the Slack message unchanged.
"""

import logging

import httpx

from alert_relay.helpdesk.request import build_ticket_request
from alert_relay.models.helpdesk import HelpdeskTicket, TicketPayload, TicketRequest

logger = logging.getLogger(__name__)

TICKETS_RESOURCE = "/helpdesk/tickets.json"

_client: httpx.AsyncClient | None = None


def get_http_client() -> httpx.AsyncClient:
    """Return the cached httpx client, creating it on first call."""
    global _client
    if _client is None:
        _client = httpx.AsyncClient(timeout=httpx.Timeout(30.0))
    return _client


async def close_client() -> None:
    """Close and drop the cached client. Called on shutdown and in tests."""
    global _client
    if _client is not None:
        await _client.aclose()
    _client = None


def reset_client() -> None:
    """Drop the cached client without closing it. Used for testing."""
    global _client
    _client = None


async def send_request(request: TicketRequest) -> httpx.Response:
    """Issue a request described by a TicketRequest."""
    client = get_http_client()
    return await client.request(
        request.method,
        request.url,
        auth=request.auth,
        json=request.json_body,
        headers={"Accept": "application/json"} if request.expect_json else None,
    )


def build_ticket_payload(subject: str, description: str, email: str) -> TicketPayload:
    """Build a ticket payload; everything but subject/description is fixed."""
    return TicketPayload(
        helpdesk_ticket=HelpdeskTicket(
            description=description,
            subject=subject,
            email=email,
        )
    )


def ticket_url(host: str, display_id: int | str) -> str:
    """Link to a ticket in the Freshservice agent portal."""
    return f"https://{host}/helpdesk/tickets/{display_id}"


def _extract_display_id(body: object) -> int | str | None:
    """Return display_id from a successful create response, None if the shape is wrong."""
    if not isinstance(body, dict) or not body.get("status"):
        return None
    item = body.get("item")
    if not isinstance(item, dict):
        return None
    ticket = item.get("helpdesk_ticket")
    if not isinstance(ticket, dict):
        return None
    return ticket.get("display_id")


async def create_ticket(
    host: str, api_key: str, payload: TicketPayload
) -> int | str | None:
    """Create a helpdesk ticket and return its display id.

    Returns None on any transport error, non-JSON response, or a response
    without a truthy ``status`` and ``item.helpdesk_ticket.display_id``.
    No retry is attempted.
    """
    request = build_ticket_request(
        host, api_key, "POST", TICKETS_RESOURCE, payload.model_dump()
    )
    logger.info("Sending new ticket request to %s", request.url)

    try:
        response = await send_request(request)
    except httpx.HTTPError:
        logger.error("Ticket creation failed for %s", request.url, exc_info=True)
        return None

    logger.info("Helpdesk responded with status %d", response.status_code)

    try:
        body = response.json()
    except ValueError:
        logger.error(
            "Helpdesk returned a non-JSON body (status %d)", response.status_code
        )
        return None

    display_id = _extract_display_id(body)
    if display_id is None:
        logger.error("Unexpected helpdesk response shape: %s", body)
    return display_id
