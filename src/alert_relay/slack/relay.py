"""Posts inbound alerts into a team's alerts channel."""

import logging
from collections.abc import Awaitable, Callable

from slack_sdk.errors import SlackApiError

from alert_relay.config import Settings
from alert_relay.models.alert import Alert
from alert_relay.slack.connection import CONNECTION_ERRORS, TeamConnection
from alert_relay.slack.messages import build_alert_message
from alert_relay.stats import RelayStats

logger = logging.getLogger(__name__)


class AlertRelay:
    """Alert bus subscriber for one team connection.

    Alerts are dropped (logged and counted) when the alerts channel cannot be
    resolved or Slack rejects the post. A lost connection is reported through
    ``on_connection_lost`` so the coordinator can reconnect.
    """

    def __init__(
        self,
        connection: TeamConnection,
        settings: Settings,
        stats: RelayStats,
        on_connection_lost: Callable[[str], Awaitable[None]] | None = None,
    ) -> None:
        self.connection = connection
        self.settings = settings
        self.stats = stats
        self.on_connection_lost = on_connection_lost

    async def handle_alert(self, alert: Alert) -> None:
        team_id = self.connection.team.team_id
        channel = self.connection.find_channel(self.settings.alerts_channel)
        if channel is None:
            self.stats.alerts_dropped += 1
            logger.warning(
                "No '%s' channel for team %s; alert dropped",
                self.settings.alerts_channel,
                team_id,
            )
            return

        message = build_alert_message(
            channel.id,
            alert.text,
            username=self.settings.bot_username,
            icon_emoji=self.settings.bot_icon_emoji,
            placement=self.settings.alert_placement,
        )

        try:
            await self.connection.client.chat_postMessage(**message.to_slack())
        except SlackApiError as exc:
            self.stats.alerts_dropped += 1
            error_code = exc.response.get("error", "") if exc.response else ""
            logger.error(
                "Failed to post alert to %s for team %s: %s",
                channel.id,
                team_id,
                error_code,
                exc_info=True,
            )
            return
        except CONNECTION_ERRORS:
            self.stats.alerts_dropped += 1
            logger.warning("Lost connection to Slack for team %s", team_id, exc_info=True)
            if self.on_connection_lost is not None:
                await self.on_connection_lost(self.connection.token)
            return

        self.stats.alerts_posted += 1
        logger.info("Posted alert to #%s for team %s", channel.name, team_id)
