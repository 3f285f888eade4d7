"""Builders for the alert message and its in-place updates."""

from typing import Literal

from alert_relay.models.slack import (
    Attachment,
    AttachmentAction,
    AttachmentField,
    ChatMessage,
    InteractionPayload,
)

CALLBACK_ID = "alertResponse"
ALERT_FALLBACK = "New Datto Alert!"
ALERT_COLOR = "danger"
RESOLVED_COLOR = "good"

RESET_VALUE = "reset"
TICKET_VALUE = "ticket"

ALERT_ACTIONS = [
    AttachmentAction(name=RESET_VALUE, text="Reset Alert", value=RESET_VALUE),
    AttachmentAction(name=TICKET_VALUE, text="Create ticket", value=TICKET_VALUE),
]


def build_alert_message(
    channel_id: str,
    alert_text: str,
    *,
    username: str,
    icon_emoji: str,
    placement: Literal["attachment", "message"] = "attachment",
) -> ChatMessage:
    """Build the initial alert post with Reset and Create ticket buttons.

    With ``placement="attachment"`` the alert is the attachment title and the
    message body is the fallback text; with ``"message"`` it is the body.
    """
    in_attachment = placement == "attachment"
    return ChatMessage(
        channel=channel_id,
        text=ALERT_FALLBACK if in_attachment else alert_text,
        username=username,
        icon_emoji=icon_emoji,
        attachments=[
            Attachment(
                fallback=ALERT_FALLBACK,
                title=alert_text if in_attachment else None,
                color=ALERT_COLOR,
                callback_id=CALLBACK_ID,
                actions=list(ALERT_ACTIONS),
            )
        ],
    )


def _attribution(action: str, user_name: str | None) -> str:
    return f"{action} by {user_name}" if user_name else f"{action}!"


def _resolved_update(
    payload: InteractionPayload,
    fallback: str,
    field: AttachmentField,
    mode: Literal["append", "replace"],
) -> ChatMessage:
    original = payload.original_attachment
    fields = [field] if mode == "replace" else [*original.fields, field]
    return ChatMessage(
        text=payload.original_message.text,
        attachments=[
            Attachment(
                fallback=fallback,
                title=original.title,
                text=original.text,
                color=RESOLVED_COLOR,
                fields=fields,
            )
        ],
    )


def build_reset_update(
    payload: InteractionPayload,
    user_name: str | None,
    mode: Literal["append", "replace"] = "append",
) -> ChatMessage:
    """Replacement message marking the alert as reset. Buttons are dropped."""
    field = AttachmentField(title=_attribution("Alert has been reset", user_name))
    return _resolved_update(payload, "Alert reset", field, mode)


def build_ticket_update(
    payload: InteractionPayload,
    user_name: str | None,
    link: str,
    mode: Literal["append", "replace"] = "append",
) -> ChatMessage:
    """Replacement message linking to the created ticket. Buttons are dropped."""
    field = AttachmentField(
        title=_attribution("Alert made into a ticket", user_name),
        value=link,
    )
    return _resolved_update(payload, "Ticket created", field, mode)
