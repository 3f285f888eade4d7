"""Slack message and interaction models.

Only the subset of Slack's legacy attachment format that the relay posts and
reads back is modelled. Unknown keys in payloads sent by Slack are ignored.
"""

from pydantic import BaseModel, ConfigDict, Field


class Channel(BaseModel):
    """A Slack channel as returned by conversations.list."""

    name: str
    id: str


class AttachmentField(BaseModel):
    """A title/value row rendered under an attachment."""

    title: str
    value: str | None = None
    short: bool = False


class AttachmentAction(BaseModel):
    """An interactive button on a legacy message attachment."""

    name: str
    text: str
    value: str
    type: str = "button"


class Attachment(BaseModel):
    """A legacy message attachment."""

    model_config = ConfigDict(extra="ignore")

    fallback: str = ""
    title: str | None = None
    text: str | None = None
    color: str | None = None
    callback_id: str | None = None
    fields: list[AttachmentField] = Field(default_factory=list)
    actions: list[AttachmentAction] = Field(default_factory=list)


class ChatMessage(BaseModel):
    """A message the relay posts (channel set) or sends back through a response_url."""

    model_config = ConfigDict(extra="ignore")

    channel: str | None = None
    text: str = ""
    username: str | None = None
    icon_emoji: str | None = None
    attachments: list[Attachment] = Field(default_factory=list)

    def to_slack(self) -> dict:
        """Serialize for the Slack API, dropping unset optional keys."""
        return self.model_dump(exclude_none=True)


class InteractionAction(BaseModel):
    """The button a user pressed."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    value: str = ""


class IdRef(BaseModel):
    """A ``{"id": ..., "name": ...}`` reference inside an interaction payload."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str | None = None


class InteractionPayload(BaseModel):
    """An ``interactive_message`` callback posted by Slack on button press."""

    model_config = ConfigDict(extra="ignore")

    type: str = "interactive_message"
    callback_id: str | None = None
    team: IdRef
    channel: IdRef | None = None
    user: IdRef
    actions: list[InteractionAction] = Field(default_factory=list)
    response_url: str
    original_message: ChatMessage = Field(default_factory=ChatMessage)

    @property
    def action_value(self) -> str | None:
        """Value of the first pressed action, or None if Slack sent none."""
        return self.actions[0].value if self.actions else None

    @property
    def original_attachment(self) -> Attachment:
        """First attachment of the original message (empty if there is none)."""
        if self.original_message.attachments:
            return self.original_message.attachments[0]
        return Attachment()
