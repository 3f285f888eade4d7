"""Tests for the per-team Slack connection and its channel cache."""

from unittest.mock import AsyncMock

import aiohttp
import pytest
from slack_sdk.errors import SlackApiError

from alert_relay.models.alert import Team
from alert_relay.slack.connection import ConnectionState, TeamConnection


@pytest.fixture
def slack_client() -> AsyncMock:
    client = AsyncMock()
    client.auth_test.return_value = {"ok": True, "team": "Acme Corp", "user_id": "UBOT"}
    client.conversations_list.return_value = {
        "ok": True,
        "channels": [{"name": "general", "id": "C1"}, {"name": "alerts", "id": "C2"}],
        "response_metadata": {"next_cursor": ""},
    }
    return client


async def test_open_authenticates_and_caches_channels(team: Team, slack_client: AsyncMock):
    connection = TeamConnection(team, client=slack_client)

    await connection.open()

    assert connection.state is ConnectionState.CONNECTED
    assert connection.team.team_name == "Acme Corp"
    assert connection.team.bot_user_id == "UBOT"
    assert connection.find_channel("alerts").id == "C2"
    assert connection.find_channel("random") is None


async def test_channel_listing_follows_cursor(team: Team, slack_client: AsyncMock):
    slack_client.conversations_list.side_effect = [
        {"channels": [{"name": "general", "id": "C1"}], "response_metadata": {"next_cursor": "abc"}},
        {"channels": [{"name": "alerts", "id": "C2"}], "response_metadata": {"next_cursor": ""}},
    ]
    connection = TeamConnection(team, client=slack_client)

    await connection.open()

    assert [ch.name for ch in connection.channels] == ["general", "alerts"]
    second_call = slack_client.conversations_list.call_args_list[1]
    assert second_call.kwargs["cursor"] == "abc"


async def test_channel_listing_error_leaves_empty_cache(team: Team, slack_client: AsyncMock):
    """A failed channel listing is logged; the connection is still open."""
    slack_client.conversations_list.side_effect = SlackApiError(
        "missing_scope", {"ok": False, "error": "missing_scope"}
    )
    connection = TeamConnection(team, client=slack_client)

    await connection.open()

    assert connection.is_connected
    assert connection.channels == []


async def test_auth_failure_raises_and_stays_disconnected(team: Team, slack_client: AsyncMock):
    slack_client.auth_test.side_effect = SlackApiError(
        "invalid_auth", {"ok": False, "error": "invalid_auth"}
    )
    connection = TeamConnection(team, client=slack_client)

    with pytest.raises(SlackApiError):
        await connection.open()

    assert connection.state is ConnectionState.DISCONNECTED


async def test_transport_failure_raises(team: Team, slack_client: AsyncMock):
    slack_client.auth_test.side_effect = aiohttp.ClientConnectionError("reset by peer")
    connection = TeamConnection(team, client=slack_client)

    with pytest.raises(aiohttp.ClientConnectionError):
        await connection.open()

    assert not connection.is_connected


def test_default_client_uses_bot_token(team: Team):
    connection = TeamConnection(team)

    assert connection.client.token == team.bot_token
    assert connection.token == team.bot_token


async def test_channel_listing_transport_error_leaves_empty_cache(
    team: Team, slack_client: AsyncMock
):
    """A dropped link while listing channels still ends in a settled state."""
    slack_client.conversations_list.side_effect = aiohttp.ServerTimeoutError()
    connection = TeamConnection(team, client=slack_client)

    await connection.open()

    assert connection.state is ConnectionState.CONNECTED
    assert connection.channels == []
