"""Slack interactivity endpoint with signature verification."""

import json
import logging
from urllib.parse import parse_qs

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from fastapi.responses import Response

from alert_relay.models.slack import InteractionPayload
from alert_relay.slack.interactions import handle_interaction
from alert_relay.slack.lifecycle import BotCoordinator
from alert_relay.slack.verification import verify_slack_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["slack"])


def get_coordinator(request: Request) -> BotCoordinator:
    """Return the coordinator created in the application lifespan."""
    return request.app.state.coordinator


def parse_interaction(body: str) -> InteractionPayload:
    """Parse the urlencoded ``payload=<json>`` body Slack posts on button press.

    Raises HTTPException(400) if the payload is missing or malformed.
    """
    raw = parse_qs(body).get("payload", [""])[0]
    try:
        return InteractionPayload.model_validate(json.loads(raw))
    except ValueError as exc:
        logger.warning("Malformed interaction payload: %s", exc)
        raise HTTPException(status_code=400, detail="Malformed interaction payload")


@router.post("/slack/interactive")
async def slack_interactive(
    background_tasks: BackgroundTasks,
    body: str = Depends(verify_slack_request),
    coordinator: BotCoordinator = Depends(get_coordinator),
) -> Response:
    """Receive button presses. Acknowledged at once, handled in the background."""
    payload = parse_interaction(body)
    background_tasks.add_task(handle_interaction, payload, coordinator)
    return Response(status_code=200)
