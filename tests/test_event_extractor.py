"""Tests for status line extraction."""

import pytest

from src.config import MonitorConfig
from src.handlers.event_extractor import extract_build_event, extract_from_message, match_monitor
from src.models.build_event import PassFail
from src.schemas.events import SlackMessageEvent

BOT_ID = "B0GOCD"
MONITORS = [
    MonitorConfig(name="Foo", filter_prefix="Foo_", post_channel="#foo"),
    MonitorConfig(name="FooBar", filter_prefix="Foo_Bar", post_channel="#foobar"),
    MonitorConfig(name="Zeus", filter_prefix="Zeus_", post_channel="#zeus"),
]


def test_passed_status_line_extracted():
    event = extract_build_event(
        BOT_ID, "Go pipeline stage [Foo_Bar/20/Deploy/1] passed", BOT_ID, MONITORS
    )

    assert event is not None
    assert event.monitor_name == "Foo"
    assert event.pipeline_stage == "Foo_Bar"
    assert event.build_counter == 20
    assert event.step_name == "Deploy"
    assert event.stage_attempt == 1
    assert event.pass_fail is PassFail.passed
    assert not event.failed


def test_failed_status_line_extracted():
    event = extract_build_event(
        BOT_ID, "Go pipeline stage [Zeus_ECS_Distro/7/Test/2] failed", BOT_ID, MONITORS
    )

    assert event is not None
    assert event.monitor_name == "Zeus"
    assert event.stage_attempt == 2
    assert event.failed


def test_unknown_sender_ignored():
    assert extract_build_event(
        "B0OTHER", "Go pipeline stage [Foo_Bar/20/Deploy/1] passed", BOT_ID, MONITORS
    ) is None
    assert extract_build_event(
        None, "Go pipeline stage [Foo_Bar/20/Deploy/1] passed", BOT_ID, MONITORS
    ) is None


def test_untracked_pipeline_ignored():
    assert extract_build_event(
        BOT_ID, "Go pipeline stage [Bar_Foo/20/Deploy/1] passed", BOT_ID, MONITORS
    ) is None


@pytest.mark.parametrize(
    "text",
    [
        "Live long and prospect.",
        "Go pipeline stage [Foo_Bar/20/Deploy] passed",
        "Go pipeline stage [Foo_Bar/20/Deploy/1] cancelled",
        "Go pipeline stage [Foo_Bar/abc/Deploy/1] passed",
        "Go pipeline stage [Foo_Bar/-3/Deploy/1] passed",
        "Go pipeline stage [Foo_Bar/20/Deploy/x] passed",
        "",
        None,
    ],
)
def test_non_matching_text_yields_nothing(text):
    assert extract_build_event(BOT_ID, text, BOT_ID, MONITORS) is None


def test_first_matching_monitor_wins():
    assert match_monitor("Foo_Bar_Deploy", MONITORS).name == "Foo"
    assert match_monitor("Zeus_API", MONITORS).name == "Zeus"
    assert match_monitor("Hermes", MONITORS) is None


def test_extract_from_message_reads_first_attachment_title():
    message = SlackMessageEvent.model_validate({
        "type": "message",
        "subtype": "bot_message",
        "bot_id": BOT_ID,
        "channel": "C024BE91L",
        "channel_type": "channel",
        "ts": "1355517523.000005",
        "attachments": [
            {"id": 1, "color": "2eb886", "title": "Go pipeline stage [Zeus_ECS_Distro/20/Deploy/1] passed"},
            {"id": 2, "title": "Go pipeline stage [Foo_Bar/99/Deploy/1] failed"},
        ],
    })

    event = extract_from_message(message, BOT_ID, MONITORS)

    assert event is not None
    assert event.pipeline_stage == "Zeus_ECS_Distro"
    assert event.build_counter == 20


def test_extract_from_message_without_attachments():
    message = SlackMessageEvent.model_validate({
        "type": "message",
        "bot_id": BOT_ID,
        "text": "Go pipeline stage [Foo_Bar/20/Deploy/1] passed",
    })

    assert extract_from_message(message, BOT_ID, MONITORS) is None
