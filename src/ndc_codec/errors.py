"""Exception hierarchy and error kinds used across the codec."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Stable identifiers attached to decode failures."""

    UNDECODABLE_BUFFER = "undecodableBuffer"
    UNKNOWN_MESSAGE_CLASS = "unknownMessageClass"
    NO_PARSER_FOUND = "noParserFound"
    SPECIFIC_COMMAND_REJECT = "specificCommandReject"
    COMMAND_REJECT = "commandReject"
    INVALID_NUMERIC_FIELD = "invalidNumericField"
    UNEXPECTED_PARSER_FAILURE = "unexpectedParserFailure"


class NDCError(Exception):
    """Base class for all codec errors."""


class ConfigError(NDCError):
    """Invalid codec configuration or message format catalog."""


class ProtocolError(NDCError):
    """A rejection reported by the terminal, or a field it sent malformed.

    These are expected outcomes of talking to a device, so the decoder
    reports them without a traceback.
    """

    kind: ErrorKind

    def __init__(self, message: str, kind: ErrorKind | None = None,
                 code: str | None = None) -> None:
        super().__init__(message)
        if kind is not None:
            self.kind = kind
        elif not hasattr(self, "kind"):
            raise TypeError(f"{type(self).__name__} requires an error kind")
        self.code = code


class CommandReject(ProtocolError):
    """The terminal rejected the last command sent by the host."""

    kind = ErrorKind.COMMAND_REJECT


class InvalidNumericField(ProtocolError):
    """A fixed-offset numeric field contained non-digit characters."""

    kind = ErrorKind.INVALID_NUMERIC_FIELD

    def __init__(self, field: str, text: str) -> None:
        super().__init__(f"Field '{field}' is not numeric: {text!r}", code=field)
        self.field = field
        self.text = text
