"""Custom exception hierarchy for yfp."""

from typing import Any


class YfpError(Exception):
    """Base exception for all yfp errors.

    All exceptions carry an optional `context` dict for structured error
    metadata that can be logged or serialized without parsing the message.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ConfigError(YfpError):
    """Invalid or missing configuration.

    Raised by load_config() during startup. Should be treated as fatal.

    Context keys:
        field: str — the config field that failed validation
        value: Any — the offending value
    """


class DateParseError(YfpError):
    """A date string did not match the pattern its caller expects.

    Policy: fatal to the operation that produced it. Never defaulted.

    Context keys:
        value: str — the rejected input
        expected_format: str — the pattern it was checked against
    """


class FormatError(YfpError):
    """An epoch value cannot be rendered as a calendar date.

    Policy: fatal at the point of serialization.

    Context keys:
        epoch: int — the out-of-range value
    """


class ExtractionError(YfpError):
    """The history document could not be turned into price bars.

    Context keys:
        path: str — the saved page, when reading it failed
    """


class MissingTableError(ExtractionError):
    """No table body element was found in the supplied HTML.

    Usually means the response was an error page, a consent wall or a
    redirect rather than a quote history page. Not transient: do not retry.

    Context keys:
        document_length: int — size of the rejected document
    """


class FetchError(YfpError):
    """Failed to download the history page.

    Context keys:
        url: str — the URL that was being fetched
        status_code: int | None — HTTP status if a response arrived
    """


class RateLimitError(FetchError):
    """The data source kept answering HTTP 429 after all retries.

    Context keys:
        retry_after: int | None — seconds the server asked us to wait
    """


class ExportError(YfpError):
    """Writing extracted bars to storage failed.

    Context keys:
        path: str — the target file
    """
