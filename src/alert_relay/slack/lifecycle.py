"""Bot lifecycle: one tracked Slack connection per installed team.

``BotCoordinator`` is the single owner of the connection registry and the
alert bus, and is handed to request handlers as their context. Connect paths
for the same bot token are serialized by a per-token lock, so the start-up
walk, the bot-created signal and reconnects can never leave two live
connections for one credential.
"""

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable

from slack_sdk.errors import SlackApiError

from alert_relay.bus import AlertBus, mask_token
from alert_relay.config import Settings
from alert_relay.models.alert import Team
from alert_relay.slack.connection import CONNECTION_ERRORS, TeamConnection
from alert_relay.slack.relay import AlertRelay
from alert_relay.slack.teams import TeamStore
from alert_relay.stats import RelayStats

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[Team], TeamConnection]


class BotCoordinator:
    """Owns team connections, their alert subscriptions and relay counters."""

    def __init__(
        self,
        settings: Settings,
        store: TeamStore,
        bus: AlertBus | None = None,
        stats: RelayStats | None = None,
        connection_factory: ConnectionFactory = TeamConnection,
    ) -> None:
        self.settings = settings
        self.store = store
        self.bus = bus or AlertBus()
        self.stats = stats or RelayStats()
        self.connection_factory = connection_factory
        self.connections: dict[str, TeamConnection] = {}
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._closing = False

    async def start_all(self) -> None:
        """Connect every team in the store. Failures are logged only."""
        teams = await self.store.all()
        logger.info("Connecting %d installed team(s)", len(teams))
        await asyncio.gather(*(self.connect(team) for team in teams))

    async def on_bot_created(self, team: Team) -> TeamConnection | None:
        """Handle a newly installed team: persist it and connect unless already online."""
        await self.store.save(team)
        return await self.connect(team)

    async def connect(self, team: Team) -> TeamConnection | None:
        """Open and register a connection for a team.

        Returns the already-tracked connection if one is live for the token,
        the new connection on success, or None if connecting failed.
        """
        async with self._locks[team.bot_token]:
            existing = self.connections.get(team.bot_token)
            if existing is not None and existing.is_connected:
                logger.info("Team %s already connected", team.team_id)
                return existing
            connection = existing or self.connection_factory(team)
            return await self._open(connection)

    async def on_connection_closed(self, token: str) -> TeamConnection | None:
        """Mark a tracked connection closed and try once to reopen it."""
        if self._closing:
            return None
        async with self._locks[token]:
            connection = self.connections.get(token)
            if connection is None:
                logger.warning("Close signal for untracked token %s", mask_token(token))
                return None
            if connection.is_connected:
                connection.mark_closed()
                logger.warning(
                    "Slack connection for team %s closed; reconnecting",
                    connection.team.team_id,
                )
            else:
                # A concurrent close already handled this connection
                return None
            reopened = await self._open(connection)
            if reopened is None:
                self.connections.pop(token, None)
                self.bus.unsubscribe(token)
            return reopened

    async def _open(self, connection: TeamConnection) -> TeamConnection | None:
        try:
            await connection.open()
        except SlackApiError as exc:
            error_code = exc.response.get("error", "") if exc.response else ""
            logger.error(
                "Could not connect to Slack for team %s: %s",
                connection.team.team_id,
                error_code,
            )
            return None
        except CONNECTION_ERRORS:
            logger.error(
                "Could not reach Slack for team %s", connection.team.team_id, exc_info=True
            )
            return None

        self.connections[connection.token] = connection
        relay = AlertRelay(
            connection,
            self.settings,
            self.stats,
            on_connection_lost=self.on_connection_closed,
        )
        self.bus.subscribe(connection.token, relay.handle_alert)
        return connection

    def connection_for_team(self, team_id: str) -> TeamConnection | None:
        """Find the live connection for a Slack team id."""
        return next(
            (
                conn
                for conn in self.connections.values()
                if conn.team.team_id == team_id and conn.is_connected
            ),
            None,
        )

    async def shutdown(self) -> None:
        """Stop reconnecting and detach every relay from the alert bus."""
        self._closing = True
        for token, connection in self.connections.items():
            self.bus.unsubscribe(token)
            connection.mark_closed()
        logger.info("Closed %d Slack connection(s)", len(self.connections))
