"""Slack side of the relay: team connections, alert posting and button handling."""

from alert_relay.slack.connection import TeamConnection
from alert_relay.slack.interactions import handle_interaction
from alert_relay.slack.lifecycle import BotCoordinator
from alert_relay.slack.relay import AlertRelay
from alert_relay.slack.router import router
from alert_relay.slack.teams import create_team_store

__all__ = [
    "AlertRelay",
    "BotCoordinator",
    "TeamConnection",
    "create_team_store",
    "handle_interaction",
    "router",
]
