"""Datto alert webhook endpoint.

The caller (Datto or a Zapier zap in front of it) always gets ``200 Thanks!``:
a wrong or missing shared secret is not reported back, and downstream
posting happens after the response is sent.
"""

import hmac
import json
import logging
from urllib.parse import parse_qs

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import PlainTextResponse

from alert_relay.config import get_settings
from alert_relay.models.alert import Alert
from alert_relay.slack.lifecycle import BotCoordinator
from alert_relay.slack.router import get_coordinator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["webhook"])


async def read_webhook_body(request: Request) -> dict:
    """Parse a JSON or urlencoded body into a flat dict. Unparseable bodies give {}."""
    raw = await request.body()
    content_type = request.headers.get("Content-Type", "")

    if content_type.startswith("application/x-www-form-urlencoded"):
        try:
            text = raw.decode("utf-8")
        except ValueError:
            logger.warning("Webhook form body is not valid UTF-8")
            return {}
        return {k: v[0] for k, v in parse_qs(text).items()}

    try:
        body = json.loads(raw or b"{}")
    except ValueError:
        logger.warning("Webhook body is not valid JSON")
        return {}
    return body if isinstance(body, dict) else {}


def is_authenticated(body: dict, secret: str) -> bool:
    """Check the body's ``authentication`` field against the shared secret."""
    supplied = body.get("authentication")
    if not secret or not isinstance(supplied, str):
        return False
    return hmac.compare_digest(supplied.encode(), secret.encode())


@router.post("/datto", response_class=PlainTextResponse)
async def datto_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    coordinator: BotCoordinator = Depends(get_coordinator),
) -> str:
    """Receive a Datto alert and publish it to every connected team."""
    settings = get_settings()
    body = await read_webhook_body(request)

    if not is_authenticated(body, settings.datto_api_key):
        logger.warning("Datto webhook rejected: bad shared secret")
        return "Thanks!"

    alert_text = body.get("dattoalert")
    if not alert_text:
        logger.warning("Datto webhook without alert text ignored")
        return "Thanks!"

    coordinator.stats.alerts_received += 1
    background_tasks.add_task(coordinator.bus.publish, Alert(text=str(alert_text)))
    return "Thanks!"
