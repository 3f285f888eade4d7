"""Inbound alert and installed team models."""

from pydantic import BaseModel


class Alert(BaseModel):
    """A backup alert received on the Datto webhook. The text is opaque."""

    text: str


class Team(BaseModel):
    """An installed Slack workspace and its bot credential."""

    team_id: str
    team_name: str | None = None
    bot_token: str
    bot_user_id: str | None = None
