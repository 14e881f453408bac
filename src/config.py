"""Configuration for gocd-slack-relay."""

import json

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings


class MonitorConfig(BaseModel):
    """A tracked pipeline family and the channel its notifications go to."""

    name: str
    filter_prefix: str
    post_channel: str


class Settings(BaseSettings):
    debug: bool = False

    # Slack app credentials
    slack_signing_secret: str = ""
    slack_verification_token: str = ""
    slack_bot_token: str = ""
    slack_timeout_seconds: float = 5.0

    # Sender identity of the GoCD bot posting status lines into Slack
    gocd_bot_id: str = ""

    # GoCD server — history lookups run on the webhook path, keep the timeout short
    gocd_base_url: str = ""
    gocd_auth: str = ""
    gocd_accept_header: str = "application/vnd.go.cd.v6+json"
    gocd_timeout_seconds: float = 1.0
    gocd_ca_cert_path: str = ""

    # Ordered; the first monitor whose prefix matches a pipeline wins
    monitors: list[MonitorConfig] = []

    model_config = {"env_prefix": "RELAY_"}

    @field_validator("monitors", mode="before")
    @classmethod
    def _parse_monitors(cls, value: object) -> object:
        if value in (None, ""):
            return []
        if isinstance(value, list):
            return value
        if isinstance(value, str):
            return json.loads(value)
        raise TypeError("monitors must be a list or JSON array string")


settings = Settings()
