"""Logical-line reassembly for the propdump byte stream.

WHY: Descriptions and actions may contain line breaks. The export tool
kept them from ending the record line by rewriting each embedded CR LF
pair as the two-byte sentinel {0x80, 0x7F}. Splitting the file on LF and
then unescaping would be wrong, because the scan below works on byte
*pairs*: a sentinel only counts when 0x80 is the first byte of a pair.
Every text field that can hold a newline depends on reproducing that
exact pairing.

HOW: LineReassembler reads the stream one byte at a time, two bytes per
iteration. A (0x80, 0x7F) pair becomes CR LF in the output. Any other
byte is copied unless it is a raw CR or LF. The line ends when the first
byte of a pair is LF or missing, or when the second byte is LF.

RULES:
- next_line() writes into a caller-owned bytearray and returns the length
- A full buffer ends the line early; the overflow is dropped silently
- 0 with exhausted=True means the stream is finished
- 0 with exhausted=False means an empty line is present (e.g. bare LF)
- The reassembler never closes the stream; its owner does
"""

from __future__ import annotations

from typing import BinaryIO

CR = 0x0D
LF = 0x0A

# Export tools write an embedded "\r\n" as this pair.
ESCAPE_FIRST = 0x80
ESCAPE_SECOND = 0x7F


class LineReassembler:
    """Pulls logical lines out of a binary stream.

    Args:
        stream: Any object with a ``read(n)`` method returning bytes;
                b"" signals end of stream.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self.exhausted = False

    def _read_byte(self) -> int | None:
        chunk = self._stream.read(1)
        if not chunk:
            return None
        return chunk[0]

    def next_line(self, buffer: bytearray) -> int:
        """Read the next logical line into ``buffer``.

        Args:
            buffer: Reusable output buffer; its length is the line capacity.

        Returns:
            Number of bytes written. ``buffer[:n]`` is the logical line.
        """
        capacity = len(buffer)
        idx = 0
        consumed = False

        def put(value: int) -> None:
            nonlocal idx
            if idx < capacity:
                buffer[idx] = value
                idx += 1

        while True:
            if idx >= capacity:
                return idx

            current = self._read_byte()
            if current is None:
                if not consumed:
                    self.exhausted = True
                break
            consumed = True
            if current == LF:
                break

            following = self._read_byte()
            if current == ESCAPE_FIRST and following == ESCAPE_SECOND:
                put(CR)
                put(LF)
            else:
                if current != CR:
                    put(current)
                if following is not None and following != CR and following != LF:
                    put(following)

            if following == LF:
                break

        return idx
