"""Signature check for Slack's interactive message callbacks."""

from fastapi import HTTPException, Request
from slack_sdk.signature import SignatureVerifier

from alert_relay.config import get_settings


async def verify_slack_request(request: Request) -> str:
    """Return the urlencoded button-press body once its signature checks out.

    The body is signed as sent, before ``payload=`` is unpacked, so the raw
    bytes are checked. Non-UTF-8 bytes are replaced while decoding, so such a
    body fails the check instead of raising.

    Raises HTTPException(403) if the signature is invalid.
    """
    settings = get_settings()
    body = (await request.body()).decode("utf-8", errors="replace")

    timestamp = request.headers.get("X-Slack-Request-Timestamp", "")
    signature = request.headers.get("X-Slack-Signature", "")

    verifier = SignatureVerifier(signing_secret=settings.slack_signing_secret)

    if not verifier.is_valid(body=body, timestamp=timestamp, signature=signature):
        raise HTTPException(status_code=403, detail="Invalid Slack signature")

    return body
