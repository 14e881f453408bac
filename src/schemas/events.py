"""Pydantic models for Slack Events API payloads."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SlackAttachment(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    color: Optional[str] = None
    title: Optional[str] = None
    text: Optional[str] = None
    fallback: Optional[str] = None


class SlackMessageEvent(BaseModel):
    """The ``event`` object of a ``message`` callback.

    Bot posts carry ``bot_id`` and usually no ``user``; the GoCD bot puts
    its status line in the first attachment's title.
    """

    model_config = ConfigDict(extra="ignore")

    type: str
    channel: Optional[str] = None
    channel_type: Optional[str] = None
    user: Optional[str] = None
    text: Optional[str] = None
    ts: Optional[str] = None
    subtype: Optional[str] = None
    bot_id: Optional[str] = None
    attachments: list[SlackAttachment] = Field(default_factory=list)

    @property
    def status_line(self) -> Optional[str]:
        if not self.attachments:
            return None
        return self.attachments[0].title


class SlackEventEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str
    token: Optional[str] = None
    challenge: Optional[str] = None
    team_id: Optional[str] = None
    event_id: Optional[str] = None
    event: Optional[dict] = None


class EventResponse(BaseModel):
    status: str
