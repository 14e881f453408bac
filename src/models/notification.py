"""In-memory records of Slack messages already posted for a build."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NotificationKey(BaseModel):
    """Identifies one build's notification thread.

    Keyed on the source revision rather than the GoCD counter, since
    counters restart when a pipeline is recreated.
    """

    model_config = ConfigDict(frozen=True)

    monitor_name: str
    revision_id: int = Field(ge=0, lt=2**64)


class NotificationEntry(BaseModel):
    message_ts: str
    channel: str
    failed: bool = False
    last_update_time: datetime
