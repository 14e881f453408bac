"""Tests for the Slack Web API client."""

from unittest.mock import AsyncMock, patch

import pytest

from src.clients.slack_client import SlackClient
from src.errors import NotificationError

BLOCKS = [{"type": "divider"}]


async def test_send_message_returns_handle():
    client = SlackClient()
    with patch.object(
        client, "_call", AsyncMock(return_value={"ok": True, "channel": "C1", "ts": "1.2"})
    ) as call:
        data = await client.send_message("#builds", "hello", BLOCKS)
    await client.close()

    assert data["ts"] == "1.2"
    url, payload = call.await_args.args
    assert url.endswith("chat.postMessage")
    assert payload == {"channel": "#builds", "text": "hello", "blocks": BLOCKS}


async def test_update_message_addresses_existing_ts():
    client = SlackClient()
    with patch.object(client, "_call", AsyncMock(return_value={"ok": True})) as call:
        await client.update_message("C1", "1.2", "hello again")
    await client.close()

    url, payload = call.await_args.args
    assert url.endswith("chat.update")
    assert payload == {"channel": "C1", "ts": "1.2", "text": "hello again"}


async def test_invalid_blocks_retries_text_only():
    client = SlackClient()
    responses = [{"ok": False, "error": "invalid_blocks"}, {"ok": True, "channel": "C1", "ts": "1.3"}]
    with patch.object(client, "_call", AsyncMock(side_effect=responses)) as call:
        data = await client.send_message("#builds", "hello", BLOCKS)
    await client.close()

    assert data["ts"] == "1.3"
    assert "blocks" not in call.await_args_list[1].args[1]


async def test_api_error_raises_notification_error():
    client = SlackClient()
    with patch.object(client, "_call", AsyncMock(return_value={"ok": False, "error": "message_not_found"})):
        with pytest.raises(NotificationError) as exc_info:
            await client.update_message("C1", "1.2", "hello")
    await client.close()

    assert exc_info.value.error_code == "message_not_found"
