"""Button press handling for posted alerts.

Slack sends an ``interactive_message`` payload when a user presses Reset
Alert or Create ticket. The router resolves who pressed the button, then the
matching handler replaces the original message through the payload's
``response_url``, so a press is handled even while the team's Slack session
is down; only the user's name is lost then. Unknown buttons are logged no-ops.
"""

import logging

from slack_sdk.errors import SlackApiError
from slack_sdk.webhook.async_client import AsyncWebhookClient

from alert_relay.helpdesk import build_ticket_payload, create_ticket, ticket_url
from alert_relay.models.slack import ChatMessage, InteractionPayload
from alert_relay.slack.connection import CONNECTION_ERRORS, TeamConnection
from alert_relay.slack.lifecycle import BotCoordinator
from alert_relay.slack.messages import (
    RESET_VALUE,
    TICKET_VALUE,
    build_reset_update,
    build_ticket_update,
)

logger = logging.getLogger(__name__)


async def handle_interaction(payload: InteractionPayload, coordinator: BotCoordinator) -> None:
    """Dispatch a button press to the reset or ticket handler."""
    connection = coordinator.connection_for_team(payload.team.id)
    if connection is None:
        logger.warning(
            "No live connection for team %s; handling interaction anonymously",
            payload.team.id,
        )
        user_name = None
    else:
        user_name = await resolve_user_name(connection, payload.user.id)
    value = payload.action_value

    if value == RESET_VALUE:
        await handle_reset(payload, user_name, coordinator)
    elif value == TICKET_VALUE:
        await handle_ticket(payload, user_name, coordinator)
    else:
        logger.info("Ignoring interaction with action value %r", value)


async def resolve_user_name(connection: TeamConnection, user_id: str) -> str | None:
    """Return the user's Slack name, or None if users.info fails."""
    try:
        info = await connection.client.users_info(user=user_id)
    except (SlackApiError, *CONNECTION_ERRORS):
        logger.error("Could not get user name of button presser %s", user_id, exc_info=True)
        return None
    return (info.get("user") or {}).get("name")


async def handle_reset(
    payload: InteractionPayload, user_name: str | None, coordinator: BotCoordinator
) -> None:
    """Mark the alert as reset in place."""
    update = build_reset_update(payload, user_name, coordinator.settings.annotation_mode)
    if await replace_original(payload.response_url, update):
        coordinator.stats.alerts_reset += 1
        logger.info("Alert reset by %s", user_name or "unknown user")


async def handle_ticket(
    payload: InteractionPayload, user_name: str | None, coordinator: BotCoordinator
) -> None:
    """File a helpdesk ticket for the alert and link it in the message.

    On any helpdesk failure the Slack message is left exactly as it was.
    """
    settings = coordinator.settings
    original = payload.original_attachment
    fallback_text = payload.original_message.text
    ticket = build_ticket_payload(
        subject=original.title or fallback_text,
        description=original.text or fallback_text,
        email=settings.ticket_requester_email,
    )

    display_id = await create_ticket(
        settings.ticket_system_url, settings.ticket_system_api_key, ticket
    )
    if display_id is None:
        coordinator.stats.tickets_failed += 1
        return

    coordinator.stats.tickets_created += 1
    link = ticket_url(settings.ticket_system_url, display_id)
    logger.info("Ticket %s created by %s", display_id, user_name or "unknown user")

    update = build_ticket_update(payload, user_name, link, settings.annotation_mode)
    await replace_original(payload.response_url, update)


async def replace_original(response_url: str, message: ChatMessage) -> bool:
    """Replace the interactive message via its response_url. Returns success."""
    body = message.to_slack()
    webhook = AsyncWebhookClient(response_url)
    try:
        response = await webhook.send(
            text=body.get("text", ""),
            attachments=body.get("attachments"),
            replace_original=True,
        )
    except CONNECTION_ERRORS:
        logger.error("Failed to update interactive message", exc_info=True)
        return False

    if response.status_code != 200:
        logger.error(
            "Slack rejected message update (%d): %s", response.status_code, response.body
        )
        return False
    return True
