"""Freshservice request descriptor builder.

Freshservice authenticates with HTTP basic auth where the API key is the
username and the password is ignored, so a fixed placeholder is sent.
"""

from alert_relay.models.helpdesk import TicketRequest

PLACEHOLDER_PASSWORD = "dummy"


def build_ticket_request(
    host: str,
    api_key: str,
    method: str,
    resource: str,
    payload: dict | None = None,
) -> TicketRequest:
    """Build a request descriptor for ``https://{host}/{resource}``.

    Inputs are not validated: a bad host or resource simply produces a bad URL.
    An empty payload means the request carries no body.
    """
    return TicketRequest(
        url=f"https://{host}/{resource.lstrip('/')}",
        method=method,
        auth=(api_key, PLACEHOLDER_PASSWORD),
        json_body=payload or None,
    )
