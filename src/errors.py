"""Error families for the relay.

Only ``AuthenticationError`` is ever reported back to the webhook caller.
The other families are logged and the event is dropped.
"""

from __future__ import annotations


class AuthenticationError(Exception):
    """The inbound request could not be proven to come from Slack."""


class MissingHeadersError(AuthenticationError):
    pass


class StaleRequestError(AuthenticationError):
    pass


class BadSignatureError(AuthenticationError):
    pass


class ParseError(Exception):
    """The inbound payload is not something we act on."""


class MalformedPayloadError(ParseError):
    pass


class HistoryLookupError(Exception):
    """The GoCD history could not be mapped to a revision id."""


class BuildNotFoundError(HistoryLookupError):
    def __init__(self, pipeline_name: str, build_counter: int) -> None:
        super().__init__(f"no history record for {pipeline_name}/{build_counter}")
        self.pipeline_name = pipeline_name
        self.build_counter = build_counter


class NoRevisionDataError(HistoryLookupError):
    def __init__(self, pipeline_name: str, build_counter: int) -> None:
        super().__init__(f"history record for {pipeline_name}/{build_counter} has no revision id")
        self.pipeline_name = pipeline_name
        self.build_counter = build_counter


class GoCDTransportError(HistoryLookupError):
    """Request to the GoCD history endpoint failed or returned garbage.

    The underlying exception is chained as ``__cause__``.
    """


class NotificationError(Exception):
    """Slack rejected a post or update."""

    def __init__(self, error_code: str) -> None:
        super().__init__(f"Slack API error: {error_code}")
        self.error_code = error_code
