"""Freshservice ticket request and payload models."""

from pydantic import BaseModel


class HelpdeskTicket(BaseModel):
    """Fields of a Freshservice ``helpdesk_ticket``. Only subject/description vary."""

    description: str
    subject: str
    email: str
    priority: int = 1  # low
    status: int = 2  # open
    source: int = 2  # portal
    ticket_type: str = "Incident"


class TicketPayload(BaseModel):
    """JSON body of POST /helpdesk/tickets.json."""

    helpdesk_ticket: HelpdeskTicket


class TicketRequest(BaseModel):
    """Everything an HTTP client needs to call the helpdesk API."""

    url: str
    method: str
    auth: tuple[str, str]
    json_body: dict | None = None
    expect_json: bool = True
