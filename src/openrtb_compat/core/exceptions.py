"""Errors raised by openrtb_compat."""


class OpenRTBCompatError(Exception):
    """Base class for all errors raised by this package."""


class MalformedExtension(OpenRTBCompatError, ValueError):
    """An ``ext`` object that had to be merged into is not a valid JSON object.

    ``str(exc)`` is the parse diagnostic only, so callers can compare it
    verbatim. The offending document is kept on ``raw``.
    """

    def __init__(self, message: str, raw: bytes | None = None):
        super().__init__(message)
        self.message = message
        self.raw = raw

    def __str__(self) -> str:
        return self.message
