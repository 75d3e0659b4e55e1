"""Version-dispatched decoding of one propdump record line.

WHY: A record line is a run of space-separated integers whose layout
depends on the file's format version, followed by a single remainder that
holds up to four strings back to back (model, description, action and,
from version 4, an opaque binary payload). The strings may contain spaces
and newlines, so they cannot be split on delimiters; their byte lengths
are given by length-indicator tokens earlier on the line.

HOW: The line is decoded with the legacy codec and split on single
spaces into at most VersionLayout.token_count tokens, so the last token
keeps the remainder intact. Positional integers are read from fixed
indexes. The last token is re-encoded to bytes and the four blobs are
sliced off it in order with a moving cursor.

RULES:
- Unsupported versions fail first, before the line is looked at
- Integers: base 10, optional sign; timestamp 64-bit, others 32-bit
- Length indicators: non-negative, at most BLOB_SCRATCH_SIZE
- Length indicators count codec bytes, never characters
- A zero indicator leaves the field None and consumes nothing
- Too few remainder bytes for an indicator raises ShortReadError
- The payload blob is base64-encoded, never text-decoded
- Failure is all-or-nothing: no partial record is returned
"""

from __future__ import annotations

import base64
import re
from typing import List, Optional

from propdump_converter.config import BLOB_SCRATCH_SIZE
from propdump_converter.core.codec import LEGACY_CODEC, LegacyCodec
from propdump_converter.core.errors import (
    RecordParseError,
    ShortReadError,
    UnsupportedVersionError,
)
from propdump_converter.core.record import VERSION_LAYOUTS, PropdumpRecord

_INTEGER_RE = re.compile(r"\s*[+-]?[0-9]+\s*")

_INT32_MIN, _INT32_MAX = -(2 ** 31), 2 ** 31 - 1
_INT64_MIN, _INT64_MAX = -(2 ** 63), 2 ** 63 - 1

_BLOB_FIELDS = ("model", "description", "action", "v4_data")


def _parse_int(
    sequence: int,
    tokens: List[str],
    index: int,
    name: str,
    low: int = _INT32_MIN,
    high: int = _INT32_MAX,
) -> int:
    """Parse ``tokens[index]`` as a bounded base-10 integer."""
    if index >= len(tokens):
        raise RecordParseError(sequence, "missing {} field".format(name))
    token = tokens[index]
    if not _INTEGER_RE.fullmatch(token):
        raise RecordParseError(sequence, "invalid {} value {!r}".format(name, token))
    value = int(token)
    if value < low or value > high:
        raise RecordParseError(sequence, "{} value {} out of range".format(name, value))
    return value


class _BlobReader:
    """Cursor over the remainder bytes of one line."""

    def __init__(self, sequence: int, data: bytes) -> None:
        self._sequence = sequence
        self._view = memoryview(data)
        self._pos = 0

    def take(self, field: str, length: int) -> Optional[bytes]:
        if length == 0:
            return None
        available = len(self._view) - self._pos
        if length > available:
            raise ShortReadError(self._sequence, field, length, available)
        chunk = self._view[self._pos:self._pos + length].tobytes()
        self._pos += length
        return chunk


def split_tokens(line: str, token_count: int) -> List[str]:
    """Split on single spaces into at most ``token_count`` tokens.

    The last token holds everything after the final split, spaces included.
    """
    return line.split(" ", token_count - 1)


def decode_record(
    sequence: int,
    version: int,
    line: bytes | bytearray | memoryview,
    codec: LegacyCodec = LEGACY_CODEC,
) -> PropdumpRecord:
    """Decode one logical line into a PropdumpRecord.

    Args:
        sequence: 1-based record number, used only in error messages.
        version: Format version from the file header.
        line: Logical line bytes as produced by LineReassembler.
        codec: Byte↔text codec for the propdump code page.

    Returns:
        The fully populated record.

    Raises:
        UnsupportedVersionError: version is not 2, 3, 4 or 5.
        ShortReadError: a blob is longer than the bytes left on the line.
        RecordParseError: a field is missing, non-numeric or out of range.
    """
    layout = VERSION_LAYOUTS.get(version)
    if layout is None:
        raise UnsupportedVersionError(sequence, version)

    tokens = split_tokens(codec.decode(line), layout.token_count)

    lengths = []
    for field_name, index in zip(_BLOB_FIELDS, layout.length_indices):
        if index is None:
            lengths.append(0)
            continue
        length = _parse_int(sequence, tokens, index, field_name + " length", 0, _INT32_MAX)
        if length > BLOB_SCRATCH_SIZE:
            raise RecordParseError(
                sequence,
                "{} length {} exceeds limit of {} bytes".format(
                    field_name, length, BLOB_SCRATCH_SIZE,
                ),
            )
        lengths.append(length)

    owner = _parse_int(sequence, tokens, 0, "owner")
    build_timestamp = _parse_int(sequence, tokens, 1, "timestamp", _INT64_MIN, _INT64_MAX)
    x = _parse_int(sequence, tokens, 2, "x")
    y = _parse_int(sequence, tokens, 3, "y")
    z = _parse_int(sequence, tokens, 4, "z")
    y_orient = _parse_int(sequence, tokens, 5, "y orientation")

    x_orient = None
    z_orient = None
    if layout.has_orientation:
        x_orient = _parse_int(sequence, tokens, 6, "x orientation")
        z_orient = _parse_int(sequence, tokens, 7, "z orientation")

    object_type = 0
    if layout.has_object_type:
        object_type = _parse_int(sequence, tokens, 8, "object type")

    # indicators count bytes of the legacy encoding, so slice the re-encoded
    # remainder rather than the decoded text
    reader = _BlobReader(sequence, codec.encode(tokens[-1]))
    model_raw, description_raw, action_raw, data_raw = (
        reader.take(name, length) for name, length in zip(_BLOB_FIELDS, lengths)
    )

    return PropdumpRecord(
        owner=owner,
        build_timestamp=build_timestamp,
        x=x,
        y=y,
        z=z,
        y_orient=y_orient,
        x_orient=x_orient,
        z_orient=z_orient,
        object_type=object_type,
        model=None if model_raw is None else codec.decode(model_raw),
        description=None if description_raw is None else codec.decode(description_raw),
        action=None if action_raw is None else codec.decode(action_raw),
        v4_data=None if data_raw is None else base64.b64encode(data_raw).decode("ascii"),
    )
