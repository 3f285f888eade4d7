"""Tests for alert message and update builders."""

from alert_relay.models.slack import InteractionPayload
from alert_relay.slack.messages import (
    CALLBACK_ID,
    build_alert_message,
    build_reset_update,
    build_ticket_update,
)


def _payload(fields: list[dict] | None = None) -> InteractionPayload:
    return InteractionPayload.model_validate(
        {
            "team": {"id": "T001"},
            "user": {"id": "U001"},
            "actions": [{"name": "reset", "value": "reset"}],
            "response_url": "https://hooks.slack.com/actions/T001/1/abc",
            "original_message": {
                "text": "New Datto Alert!",
                "attachments": [
                    {
                        "fallback": "New Datto Alert!",
                        "title": "Backup failed on SERVER01",
                        "text": "Agent offline",
                        "color": "danger",
                        "fields": fields or [],
                    }
                ],
            },
        }
    )


def test_alert_in_attachment_title():
    message = build_alert_message(
        "C_ALERTS", "Backup failed", username="dorian", icon_emoji=":panda_face:"
    )

    body = message.to_slack()
    assert body["channel"] == "C_ALERTS"
    assert body["username"] == "dorian"
    assert body["icon_emoji"] == ":panda_face:"
    attachment = body["attachments"][0]
    assert attachment["title"] == "Backup failed"
    assert attachment["callback_id"] == CALLBACK_ID
    assert [a["value"] for a in attachment["actions"]] == ["reset", "ticket"]
    assert [a["text"] for a in attachment["actions"]] == ["Reset Alert", "Create ticket"]


def test_alert_in_message_body():
    message = build_alert_message(
        "C_ALERTS",
        "Backup failed",
        username="dorian",
        icon_emoji=":panda_face:",
        placement="message",
    )

    assert message.text == "Backup failed"
    assert message.attachments[0].title is None
    assert len(message.attachments[0].actions) == 2


def test_reset_update_appends_attributed_field():
    """Reset keeps title, text and prior fields, turns green and drops the buttons."""
    payload = _payload(fields=[{"title": "Device", "value": "SERVER01"}])

    update = build_reset_update(payload, "alice")

    attachment = update.attachments[0]
    assert attachment.title == "Backup failed on SERVER01"
    assert attachment.text == "Agent offline"
    assert attachment.color == "good"
    assert attachment.actions == []
    assert [f.title for f in attachment.fields] == ["Device", "Alert has been reset by alice"]


def test_reset_update_anonymous():
    update = build_reset_update(_payload(), None)

    assert update.attachments[0].fields[-1].title == "Alert has been reset!"


def test_reset_update_replace_mode_discards_prior_fields():
    payload = _payload(fields=[{"title": "Alert has been reset by bob"}])

    update = build_reset_update(payload, "alice", mode="replace")

    assert [f.title for f in update.attachments[0].fields] == ["Alert has been reset by alice"]


def test_ticket_update_links_ticket():
    link = "https://acme.freshservice.com/helpdesk/tickets/42"

    update = build_ticket_update(_payload(), "alice", link)

    attachment = update.attachments[0]
    assert attachment.fallback == "Ticket created"
    assert attachment.color == "good"
    field = attachment.fields[-1]
    assert field.title == "Alert made into a ticket by alice"
    assert field.value == link
