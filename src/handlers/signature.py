"""Slack request signing (v0 scheme).

Slack signs every request with ``HMAC-SHA256(secret, "v0:<ts>:<body>")``
and sends the hex digest as ``X-Slack-Signature: v0=<hex>`` together with
``X-Slack-Request-Timestamp``. A request is accepted only when the
timestamp is within ``MAX_CLOCK_SKEW_SECONDS`` of our clock and the digest
matches.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time

from src.errors import (
    BadSignatureError,
    MalformedPayloadError,
    MissingHeadersError,
    StaleRequestError,
)

SIGNATURE_HEADER = "X-Slack-Signature"
TIMESTAMP_HEADER = "X-Slack-Request-Timestamp"
SIGNATURE_VERSION = "v0"
MAX_CLOCK_SKEW_SECONDS = 60


def compute_signature(signing_secret: str, timestamp: str, body: bytes) -> str:
    basestring = f"{SIGNATURE_VERSION}:{timestamp}:".encode() + body
    digest = hmac.new(signing_secret.encode(), basestring, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


def verify_slack_request(
    body: bytes,
    timestamp: str | None,
    signature: str | None,
    signing_secret: str,
    now: float | None = None,
) -> dict:
    """Authenticate a Slack request and return its JSON body.

    Raises MissingHeadersError, StaleRequestError or BadSignatureError.
    A correctly signed body that is not a JSON object raises
    MalformedPayloadError instead.
    """
    if not timestamp or not signature:
        raise MissingHeadersError("missing Slack signature or timestamp header")

    try:
        request_time = int(timestamp)
    except ValueError:
        raise StaleRequestError(f"unparseable request timestamp {timestamp!r}") from None

    current_time = time.time() if now is None else now
    if abs(current_time - request_time) > MAX_CLOCK_SKEW_SECONDS:
        raise StaleRequestError(f"request timestamp {request_time} outside tolerance")

    expected = compute_signature(signing_secret, timestamp, body)
    if not hmac.compare_digest(expected.encode(), signature.encode()):
        raise BadSignatureError("Slack signature mismatch")

    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise MalformedPayloadError(f"request body is not JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise MalformedPayloadError("request body is not a JSON object")
    return payload
