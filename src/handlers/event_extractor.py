"""Turns GoCD bot status lines into BuildEvents.

Most traffic in the channel is unrelated chatter, so anything that does not
match is logged and dropped rather than treated as an error.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from src.config import MonitorConfig
from src.models.build_event import BuildEvent, PassFail
from src.schemas.events import SlackMessageEvent

logger = logging.getLogger(__name__)

STATUS_LINE_RE = re.compile(
    r"Go pipeline stage "
    r"\[(?P<pipeline_stage>[^/\]]+)"
    r"/(?P<build_counter>[^/\]]+)"
    r"/(?P<step_name>[^/\]]+)"
    r"/(?P<attempt>[^/\]]+)\] "
    r"(?P<pass_fail>passed|failed)"
)


def _parse_unsigned(value: str) -> int | None:
    if value.isascii() and value.isdigit():
        return int(value)
    return None


def match_monitor(pipeline_stage: str, monitors: Iterable[MonitorConfig]) -> MonitorConfig | None:
    """First monitor, in configuration order, whose prefix starts the stage name."""
    for monitor in monitors:
        if pipeline_stage.startswith(monitor.filter_prefix):
            return monitor
    return None


def extract_build_event(
    sender_id: str | None,
    text: str | None,
    bot_id: str,
    monitors: Iterable[MonitorConfig],
) -> BuildEvent | None:
    if not sender_id or sender_id != bot_id:
        return None
    if not text:
        return None

    match = STATUS_LINE_RE.search(text)
    if match is None:
        logger.info("Unable to handle message %r with status line pattern", text)
        return None

    build_counter = _parse_unsigned(match.group("build_counter"))
    attempt = _parse_unsigned(match.group("attempt"))
    if build_counter is None or attempt is None:
        logger.info("Non-numeric build counter or attempt in %r", text)
        return None

    pipeline_stage = match.group("pipeline_stage")
    monitor = match_monitor(pipeline_stage, monitors)
    if monitor is None:
        logger.debug("No monitor tracks pipeline %s", pipeline_stage)
        return None

    return BuildEvent(
        monitor_name=monitor.name,
        pipeline_stage=pipeline_stage,
        build_counter=build_counter,
        step_name=match.group("step_name"),
        stage_attempt=attempt,
        pass_fail=PassFail(match.group("pass_fail")),
    )


def extract_from_message(
    message: SlackMessageEvent,
    bot_id: str,
    monitors: Iterable[MonitorConfig],
) -> BuildEvent | None:
    """Extract from the first attachment title of a Slack message event."""
    return extract_build_event(message.bot_id, message.status_line, bot_id, monitors)
