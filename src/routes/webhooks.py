"""Slack Events API routes for gocd-slack-relay."""

import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import ValidationError

from src.config import settings
from src.errors import AuthenticationError, ParseError
from src.handlers.event_extractor import extract_from_message
from src.handlers.notification_manager import NotificationManager, get_notification_manager
from src.handlers.signature import SIGNATURE_HEADER, TIMESTAMP_HEADER, verify_slack_request
from src.schemas.events import EventResponse, SlackEventEnvelope, SlackMessageEvent

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])

_IGNORED = EventResponse(status="ignored")


async def verified_payload(request: Request) -> Optional[dict]:
    """Authenticate the raw request body before anything parses it.

    Returns None for a correctly signed body that is not a JSON object.
    """
    body = await request.body()
    try:
        return verify_slack_request(
            body,
            request.headers.get(TIMESTAMP_HEADER),
            request.headers.get(SIGNATURE_HEADER),
            settings.slack_signing_secret,
        )
    except AuthenticationError as exc:
        logger.warning("Rejected Slack request: %s", exc)
        raise HTTPException(status_code=401, detail="Invalid Slack signature") from exc
    except ParseError as exc:
        logger.info("Dropping unparseable Slack request: %s", exc)
        return None


def _check_token(envelope: SlackEventEnvelope) -> None:
    expected = settings.slack_verification_token
    if not expected:
        return
    if not envelope.token or not hmac.compare_digest(envelope.token.encode(), expected.encode()):
        logger.warning("Got a bad or empty verification token on a signed request")


@router.post("/event", response_model=None)
async def slack_event(
    payload: Optional[dict] = Depends(verified_payload),
    manager: NotificationManager = Depends(get_notification_manager),
) -> dict | EventResponse:
    """Receive a Slack Events API callback.

    Answers the URL verification handshake, and feeds GoCD bot messages to
    the notification manager. Everything that is not a tracked build status
    line is acknowledged and ignored so Slack does not retry it.
    """
    if payload is None:
        return _IGNORED
    try:
        envelope = SlackEventEnvelope.model_validate(payload)
    except ValidationError as exc:
        logger.info("Dropping malformed Slack envelope: %s", exc)
        return _IGNORED

    _check_token(envelope)

    if envelope.type == "url_verification":
        if not envelope.challenge:
            raise HTTPException(status_code=400, detail="Missing challenge")
        return {"challenge": envelope.challenge}

    if envelope.type != "event_callback" or envelope.event is None:
        logger.info("Ignoring Slack payload of type %s", envelope.type)
        return _IGNORED

    try:
        message = SlackMessageEvent.model_validate(envelope.event)
    except ValidationError as exc:
        logger.info("Dropping malformed Slack event: %s", exc)
        return _IGNORED
    if message.type != "message":
        logger.info("Ignoring Slack event of type %s", message.type)
        return _IGNORED

    build_event = extract_from_message(message, settings.gocd_bot_id, settings.monitors)
    if build_event is None:
        return _IGNORED

    logger.info(
        "Build event %s %s/%d %s %s",
        build_event.monitor_name,
        build_event.pipeline_stage,
        build_event.build_counter,
        build_event.step_name,
        build_event.pass_fail.value,
    )
    await manager.handle_build_event(build_event)
    return EventResponse(status="accepted")


@router.get("/app_status")
async def app_status() -> Response:
    return Response(status_code=200)
