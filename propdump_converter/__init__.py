"""Propdump Converter — reader for ActiveWorlds property dumps.

WHY: ActiveWorlds world servers export their object placements as a
"propdump": a line-oriented file mixing space-separated integers with
length-prefixed text blobs in the Windows-1252 code page. No modern tool
reads it directly. This package decodes a propdump into typed records and
converts them to JSON, CSV and a plain-text summary.

HOW: Three-stage pipeline — reassemble (undo the embedded-newline escape),
decode (version-dispatched positional parsing), format (pluggable
formatters). Each stage is independently testable.

RULES:
- All formatters consume the same PropdumpDump IR
- Adding a new output format = one new formatter module, no core changes
- The core is decode-only; nothing writes propdump files
"""

__version__ = "0.1.0"
