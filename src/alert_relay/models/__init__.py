"""Data models for the alert relay."""

from alert_relay.models.alert import Alert, Team
from alert_relay.models.helpdesk import HelpdeskTicket, TicketPayload, TicketRequest
from alert_relay.models.slack import (
    Attachment,
    AttachmentAction,
    AttachmentField,
    Channel,
    ChatMessage,
    InteractionPayload,
)

__all__ = [
    "Alert",
    "Team",
    "HelpdeskTicket",
    "TicketPayload",
    "TicketRequest",
    "Attachment",
    "AttachmentAction",
    "AttachmentField",
    "Channel",
    "ChatMessage",
    "InteractionPayload",
]
