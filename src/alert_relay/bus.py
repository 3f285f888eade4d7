"""Alert fan-out between the webhook endpoint and per-team relays."""

import logging
from collections.abc import Awaitable, Callable

from alert_relay.models.alert import Alert

logger = logging.getLogger(__name__)

AlertHandler = Callable[[Alert], Awaitable[None]]


class AlertBus:
    """Typed publish/subscribe channel for inbound alerts.

    Subscribers are keyed (one per team bot token) so re-subscribing after a
    reconnect replaces the previous handler instead of adding a second one.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, AlertHandler] = {}

    @property
    def subscribers(self) -> list[str]:
        return list(self._subscribers)

    def subscribe(self, key: str, handler: AlertHandler) -> None:
        self._subscribers[key] = handler

    def unsubscribe(self, key: str) -> None:
        self._subscribers.pop(key, None)

    async def publish(self, alert: Alert) -> int:
        """Deliver an alert to every subscriber in subscription order.

        A failing subscriber is logged and skipped; the others still receive
        the alert. Returns the number of subscribers the alert was handed to.
        """
        handlers = list(self._subscribers.items())
        if not handlers:
            logger.warning("Alert received with no connected teams; dropping it")

        for key, handler in handlers:
            try:
                await handler(alert)
            except Exception:
                logger.error("Alert subscriber %s failed", mask_token(key), exc_info=True)
        return len(handlers)


def mask_token(token: str) -> str:
    """Shorten a bot token for log output."""
    return f"{token[:9]}..." if len(token) > 12 else "***"
