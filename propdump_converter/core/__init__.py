"""Core decoding and intermediate representation modules.

WHY: The core package contains the stable heart of the converter —
the IR dataclasses, the line reassembler, and the record decoder. These
are consumed by all formatters and by the CLI and must remain
backward-compatible.

HOW: record.py defines the data structures and version layouts,
reassembler.py rebuilds logical lines from the byte stream, decoder.py
turns one line into a record, parser.py owns the stream and the header,
codec.py supplies the Windows-1252 byte↔text conversion.

RULES:
- IR dataclasses are the contract — change with care
- Decoding logic is format-agnostic — no formatter-specific logic here
- Every failure is a PropdumpError subclass from errors.py
"""

from propdump_converter.core.errors import (
    HeaderError,
    PropdumpError,
    RecordParseError,
    ShortReadError,
    UnsupportedVersionError,
)
from propdump_converter.core.parser import PropdumpParser, open_propdump, read_dump
from propdump_converter.core.record import (
    SUPPORTED_VERSIONS,
    VERSION_LAYOUTS,
    PropdumpDump,
    PropdumpRecord,
    VersionLayout,
)

__all__ = [
    "HeaderError",
    "PropdumpError",
    "RecordParseError",
    "ShortReadError",
    "UnsupportedVersionError",
    "PropdumpParser",
    "open_propdump",
    "read_dump",
    "SUPPORTED_VERSIONS",
    "VERSION_LAYOUTS",
    "PropdumpDump",
    "PropdumpRecord",
    "VersionLayout",
]
