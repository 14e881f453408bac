"""Slack Web API client (Bot token, Block Kit)."""

from __future__ import annotations

import logging

import httpx

from src.config import settings
from src.errors import NotificationError

logger = logging.getLogger(__name__)

_SLACK_POST_MESSAGE = "https://slack.com/api/chat.postMessage"
_SLACK_UPDATE = "https://slack.com/api/chat.update"


class SlackClient:
    """Post and edit messages via Slack Web API."""

    def __init__(self) -> None:
        if not settings.slack_bot_token:
            raise RuntimeError("Slack not configured — set RELAY_SLACK_BOT_TOKEN")
        self._headers = {
            "Authorization": f"Bearer {settings.slack_bot_token}",
            "Content-Type": "application/json; charset=utf-8",
        }
        self._client = httpx.AsyncClient(timeout=settings.slack_timeout_seconds)

    async def _call(self, url: str, payload: dict) -> dict:
        """Send one Web API request and return the response JSON."""
        resp = await self._client.post(url, json=payload, headers=self._headers)
        resp.raise_for_status()
        return resp.json()

    async def _call_with_fallback(self, url: str, payload: dict) -> dict:
        data = await self._call(url, payload)
        error_code = data.get("error", "unknown_error")
        if not data.get("ok") and payload.get("blocks") and error_code == "invalid_blocks":
            logger.warning("Slack rejected blocks; retrying with text-only fallback")
            text_only = {k: v for k, v in payload.items() if k != "blocks"}
            data = await self._call(url, text_only)
            error_code = data.get("error", error_code)

        if not data.get("ok"):
            logger.error("Slack API error: %s", error_code)
            raise NotificationError(error_code)
        return data

    async def send_message(
        self, channel: str, text: str, blocks: list[dict] | None = None
    ) -> dict:
        """Post a new message; the response carries ``channel`` and ``ts``."""
        payload: dict = {"channel": channel, "text": text}
        if blocks:
            payload["blocks"] = blocks

        data = await self._call_with_fallback(_SLACK_POST_MESSAGE, payload)
        logger.info("Slack message %s sent to %s", data.get("ts"), channel)
        return data

    async def update_message(
        self, channel: str, ts: str, text: str, blocks: list[dict] | None = None
    ) -> dict:
        """Replace the content of the message ``ts`` in ``channel``."""
        payload: dict = {"channel": channel, "ts": ts, "text": text}
        if blocks:
            payload["blocks"] = blocks

        data = await self._call_with_fallback(_SLACK_UPDATE, payload)
        logger.info("Slack message %s updated in %s", ts, channel)
        return data

    async def close(self) -> None:
        await self._client.aclose()
