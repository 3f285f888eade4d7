"""Per-team Slack session with its cached channel list."""

import asyncio
import enum
import logging

import aiohttp
from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from alert_relay.models.alert import Team
from alert_relay.models.slack import Channel

logger = logging.getLogger(__name__)

# Errors raised by the Slack client when the link to Slack itself is lost
CONNECTION_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


class ConnectionState(enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class TeamConnection:
    """An authenticated Slack Web API session for one installed team.

    ``open()`` verifies the bot token with auth.test and loads the channel
    list. Channel listing failures are logged and leave the cache empty, so
    the connection still counts as open but alerts for it are dropped.
    """

    def __init__(self, team: Team, client: AsyncWebClient | None = None) -> None:
        self.team = team
        self.client = client or AsyncWebClient(token=team.bot_token)
        self.channels: list[Channel] = []
        self.state = ConnectionState.DISCONNECTED

    @property
    def token(self) -> str:
        return self.team.bot_token

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    async def open(self) -> None:
        """Authenticate and load channels. Raises SlackApiError if auth fails."""
        self.state = ConnectionState.CONNECTING
        try:
            auth = await self.client.auth_test()
        except (SlackApiError, *CONNECTION_ERRORS):
            self.state = ConnectionState.DISCONNECTED
            raise

        self.team = self.team.model_copy(
            update={
                "team_name": auth.get("team") or self.team.team_name,
                "bot_user_id": auth.get("user_id") or self.team.bot_user_id,
            }
        )
        self.channels = await self.load_channels()
        self.state = ConnectionState.CONNECTED
        logger.info(
            "Connected to Slack team %s with %d channels",
            self.team.team_id,
            len(self.channels),
        )

    def mark_closed(self) -> None:
        self.state = ConnectionState.DISCONNECTED

    async def load_channels(self) -> list[Channel]:
        """Fetch all public, unarchived channels, following pagination.

        Returns an empty list if Slack rejects or fails to answer any page.
        """
        channels: list[Channel] = []
        cursor: str | None = None

        while True:
            kwargs: dict = {
                "types": "public_channel",
                "exclude_archived": True,
                "limit": 200,
            }
            if cursor:
                kwargs["cursor"] = cursor

            try:
                response = await self.client.conversations_list(**kwargs)
            except (SlackApiError, *CONNECTION_ERRORS):
                logger.error(
                    "Could not get channels for team %s", self.team.team_id, exc_info=True
                )
                return []

            channels.extend(
                Channel(name=ch["name"], id=ch["id"])
                for ch in response.get("channels", [])
            )

            cursor = (response.get("response_metadata") or {}).get("next_cursor")
            if not cursor:
                break

        return channels

    def find_channel(self, name: str) -> Channel | None:
        """Look up a cached channel by name."""
        return next((ch for ch in self.channels if ch.name == name), None)
