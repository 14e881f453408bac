"""Keeps one Slack message per build and edits it as the build progresses.

For each BuildEvent:

1. Resolve the build's revision id from GoCD history.
2. Under the index lock, post a new message if the (monitor, revision) key
   is unknown, otherwise update the message recorded for it.
3. Run the eviction sweep if one is due.

Nothing here raises to the caller. A failed lookup or Slack call is logged
and the index is left as it was, so the next status line for the same
build retries naturally.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from src.clients.slack_client import SlackClient
from src.config import MonitorConfig, settings
from src.errors import HistoryLookupError
from src.handlers.history_correlator import resolve_revision
from src.models.build_event import BuildEvent
from src.models.notification import NotificationEntry, NotificationKey
from src.templates.slack_templates import build_status_blocks, build_status_text

logger = logging.getLogger(__name__)

SWEEP_INTERVAL = timedelta(hours=24)
STALE_AFTER = timedelta(hours=4)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NotificationManager:
    """Owns the notification index for this process."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._index: dict[NotificationKey, NotificationEntry] = {}
        self._lock = asyncio.Lock()
        self._last_sweep = clock()

    def __len__(self) -> int:
        return len(self._index)

    def get_entry(self, key: NotificationKey) -> Optional[NotificationEntry]:
        return self._index.get(key)

    def _monitor(self, name: str) -> Optional[MonitorConfig]:
        for monitor in settings.monitors:
            if monitor.name == name:
                return monitor
        return None

    async def handle_build_event(self, event: BuildEvent) -> None:
        try:
            await self._notify(event)
        except Exception:
            logger.exception(
                "Unexpected failure handling %s/%d", event.pipeline_stage, event.build_counter
            )
        finally:
            self.sweep()

    async def _notify(self, event: BuildEvent) -> None:
        monitor = self._monitor(event.monitor_name)
        if monitor is None:
            logger.warning("Monitor %s is no longer configured — dropping event", event.monitor_name)
            return

        try:
            revision_id = await resolve_revision(event.pipeline_stage, event.build_counter)
        except HistoryLookupError as exc:
            logger.warning(
                "Could not resolve revision for %s/%d: %s",
                event.pipeline_stage,
                event.build_counter,
                exc,
            )
            return

        key = NotificationKey(monitor_name=monitor.name, revision_id=revision_id)
        new_text = build_status_text(event)
        new_blocks = build_status_blocks(event)
        update_text = build_status_text(event, updated=True)
        update_blocks = build_status_blocks(event, updated=True)

        try:
            slack = SlackClient()
        except RuntimeError as exc:
            logger.error("Cannot notify %s revision %d: %s", monitor.name, revision_id, exc)
            return

        async with self._lock:
            entry = self._index.get(key)
            try:
                if entry is None:
                    data = await slack.send_message(monitor.post_channel, new_text, new_blocks)
                    self._index[key] = NotificationEntry(
                        message_ts=data["ts"],
                        channel=data.get("channel") or monitor.post_channel,
                        failed=event.failed,
                        last_update_time=self._clock(),
                    )
                    logger.info(
                        "Posted notification %s for %s revision %d",
                        data["ts"],
                        monitor.name,
                        revision_id,
                    )
                else:
                    await slack.update_message(
                        entry.channel, entry.message_ts, update_text, update_blocks
                    )
                    entry.failed = event.failed
                    entry.last_update_time = self._clock()
                    logger.info(
                        "Updated notification %s for %s revision %d",
                        entry.message_ts,
                        monitor.name,
                        revision_id,
                    )
            except Exception as exc:
                action = "post" if entry is None else "update"
                logger.error(
                    "Slack %s failed for %s revision %d: %s", action, monitor.name, revision_id, exc
                )
            finally:
                with suppress(Exception):
                    await slack.close()

    def sweep(self) -> int:
        """Evict entries untouched for STALE_AFTER, at most once per SWEEP_INTERVAL.

        Never waits: if a request currently holds the index lock the pass is
        skipped and the next call tries again. The pass has no suspension
        point, so it cannot interleave with another pass or with a request
        between its lookup and its entry mutation.
        """
        now = self._clock()
        if now - self._last_sweep < SWEEP_INTERVAL:
            return 0
        if self._lock.locked():
            return 0

        cutoff = now - STALE_AFTER
        stale = [key for key, entry in self._index.items() if entry.last_update_time < cutoff]
        for key in stale:
            del self._index[key]
        self._last_sweep = now

        if stale:
            logger.info("Evicted %d stale notification entries", len(stale))
        return len(stale)


notification_manager = NotificationManager()


def get_notification_manager() -> NotificationManager:
    return notification_manager
