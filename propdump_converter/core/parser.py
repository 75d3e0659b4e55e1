"""Propdump parsing session — header, version cache, and lazy record stream.

WHY: The format version is declared once, on the first line, and fixes
the layout of every record after it. Something has to own the stream,
read the header exactly once, and hand each logical line to the decoder
with that version. Files can be large, so records are produced lazily and
the caller may stop at any time without leaking the open file.

HOW: PropdumpParser wraps a binary stream in a LineReassembler. The
header is read into a small buffer and validated; the version is cached.
read_records() is a generator that reuses one line buffer for all lines
and closes the stream in a finally block, so exhaustion, an error, or an
abandoned iteration all release the file.

RULES:
- Header must be exactly "propdump version N" with N all digits
- N outside 2–5 passes here and fails at the first record
- The version is read once per parser, however many times it is asked for
- Empty-but-present lines are skipped; they are not records
- Sequence numbers count records, starting at 1
- Errors are raised, not logged; the generator stops after raising
- The record stream is not restartable
"""

from __future__ import annotations

import logging
import re
from itertools import islice
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from propdump_converter import config
from propdump_converter.core.codec import LEGACY_CODEC, LegacyCodec
from propdump_converter.core.decoder import decode_record
from propdump_converter.core.errors import HeaderError
from propdump_converter.core.reassembler import LineReassembler
from propdump_converter.core.record import PropdumpDump, PropdumpRecord

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"[0-9]+")


def parse_header(text: str) -> int:
    """Validate a "propdump version N" header and return N.

    Raises:
        HeaderError: The line is empty, has the wrong shape, or N is not
                     a non-negative decimal number.
    """
    if not text:
        raise HeaderError("Expected first line of propdump to be non-empty")
    tokens = text.split(" ")
    if len(tokens) != 3 or tokens[0] != "propdump" or tokens[1] != "version":
        raise HeaderError("Unknown or invalid propdump version")
    if not _VERSION_RE.fullmatch(tokens[2]):
        raise HeaderError("Unknown or invalid propdump version")
    return int(tokens[2])


class PropdumpParser:
    """Reads object records from an ActiveWorlds propdump stream.

    WHY: One object owns the stream, the cached version and the record
    counter, so callers only deal with records and exceptions.

    HOW: Use as a context manager, or call close() explicitly. Iterating
    read_records() to the end (or abandoning it) also closes the stream.

    Args:
        source: Binary stream positioned at the start of the file.
        codec: Byte↔text codec for the propdump code page.
    """

    def __init__(self, source: BinaryIO, codec: LegacyCodec = LEGACY_CODEC) -> None:
        self._source = source
        self._codec = codec
        self._reassembler = LineReassembler(source)
        self._version: Optional[int] = None
        self._closed = False

    def __enter__(self) -> PropdumpParser:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[PropdumpRecord]:
        return self.read_records()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def version(self) -> Optional[int]:
        """Cached format version, or None before the header was read."""
        return self._version

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._source.close()

    def read_version(self) -> int:
        """Return the format version, reading the header on first call."""
        if self._version is None:
            buffer = bytearray(config.HEADER_BUFFER_SIZE)
            nbytes = self._reassembler.next_line(buffer)
            self._version = parse_header(self._codec.decode(buffer[:nbytes]))
            logger.debug("Read propdump header, version %d", self._version)
        return self._version

    def read_records(self) -> Iterator[PropdumpRecord]:
        """Yield one PropdumpRecord per non-empty logical line.

        Raises:
            HeaderError: From the header, before the first record.
            RecordParseError: From the first line that fails to decode.
        """
        if self._closed:
            raise ValueError("propdump stream is closed; records can only be read once")
        count = 0
        try:
            version = self.read_version()
            buffer = bytearray(config.LINE_BUFFER_SIZE)
            sequence = 1
            while True:
                nbytes = self._reassembler.next_line(buffer)
                if nbytes == 0:
                    if self._reassembler.exhausted:
                        break
                    continue
                yield decode_record(sequence, version, memoryview(buffer)[:nbytes], self._codec)
                count += 1
                sequence += 1
        finally:
            logger.debug("Read %d propdump records", count)
            self.close()


def open_propdump(path: Union[str, Path]) -> PropdumpParser:
    """Open a propdump file in binary mode and wrap it in a parser."""
    return PropdumpParser(open(path, "rb"))


def read_dump(path: Union[str, Path], limit: Optional[int] = None) -> PropdumpDump:
    """Read a whole propdump file (or its first ``limit`` records).

    The file is closed before returning, also when fewer records than the
    file holds were read.
    """
    path = Path(path)
    with open_propdump(path) as parser:
        version = parser.read_version()
        records = list(islice(parser.read_records(), limit))
        return PropdumpDump(
            version=version,
            source_filename=path.name,
            records=records,
        )
