"""Slack Block Kit message builders."""

from __future__ import annotations

from src.models.build_event import BuildEvent


def _status_emoji(event: BuildEvent) -> str:
    return ":red_circle:" if event.failed else ":large_green_circle:"


def build_status_text(event: BuildEvent, updated: bool = False) -> str:
    """Plain-text fallback, also used for notifications and search."""
    verb = "updated" if updated else "started"
    return (
        f"{event.monitor_name}: {event.pipeline_stage} #{event.build_counter} "
        f"{event.step_name} {event.pass_fail.value} ({verb})"
    )


def build_status_blocks(event: BuildEvent, updated: bool = False) -> list[dict]:
    """Build Block Kit blocks describing the latest state of one build."""
    heading = f"{event.monitor_name} build"
    if updated:
        heading += " (updated)"

    blocks: list[dict] = [
        {
            "type": "header",
            "text": {"type": "plain_text", "text": heading, "emoji": True},
        },
        {
            "type": "section",
            "fields": [
                {"type": "mrkdwn", "text": f"*Pipeline:*\n`{event.pipeline_stage}`"},
                {"type": "mrkdwn", "text": f"*Build:*\n#{event.build_counter}"},
                {"type": "mrkdwn", "text": f"*Step:*\n{event.step_name} (run {event.stage_attempt})"},
                {
                    "type": "mrkdwn",
                    "text": f"*Status:*\n{_status_emoji(event)} {event.pass_fail.value.upper()}",
                },
            ],
        },
    ]

    if event.failed:
        blocks.append({
            "type": "section",
            "text": {"type": "mrkdwn", "text": ":point_right: *Step failed, check the GoCD console.*"},
        })

    blocks.append({"type": "divider"})
    return blocks
