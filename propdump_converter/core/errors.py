"""Exception hierarchy for propdump decoding.

WHY: Callers (the CLI, tests, library users) need to tell a broken header
apart from a broken record line, and need the line number of the record
that failed. Typed exceptions make both explicit.

HOW: PropdumpError is the common base. Header problems raise HeaderError.
Record problems raise RecordParseError (or a subclass) carrying the
1-based sequence number of the record line.

RULES:
- Every error is fatal to the current operation; nothing is retried
- Record errors always mention "line {sequence}" in their message
"""

from __future__ import annotations


class PropdumpError(Exception):
    """Base class for all propdump decoding failures."""


class HeaderError(PropdumpError):
    """The first line is missing, blank, or not "propdump version N"."""


class RecordParseError(PropdumpError):
    """A record line could not be decoded.

    Attributes:
        sequence: 1-based position of the record line (header excluded).
        reason: Short description of what went wrong, or None.
    """

    def __init__(self, sequence: int, reason: str | None = None) -> None:
        self.sequence = sequence
        self.reason = reason
        message = "Error parsing line {}".format(sequence)
        if reason:
            message = "{}: {}".format(message, reason)
        super().__init__(message)


class UnsupportedVersionError(RecordParseError):
    """The header declared a format version outside 2–5."""

    def __init__(self, sequence: int, version: int) -> None:
        self.version = version
        super().__init__(sequence)


class ShortReadError(RecordParseError):
    """A length indicator asked for more bytes than the remainder holds."""

    def __init__(self, sequence: int, field: str, expected: int, available: int) -> None:
        self.field = field
        self.expected = expected
        self.available = available
        super().__init__(
            sequence,
            "short read for {}: expected {} bytes, {} available".format(
                field, expected, available,
            ),
        )
