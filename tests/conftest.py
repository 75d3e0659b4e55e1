"""Shared test fixtures for the propdump_converter test suite.

WHY: Decoder, parser, formatter and CLI tests all need well-formed record
lines for each format version. Building them by hand in every test is
error-prone because the length indicators must match the blob bytes.

HOW: make_line() assembles a record line from named fields, computing
the length indicators from the blob bytes. make_propdump() joins a header
and lines into file content. Fixtures provide a small version 4 dump.

RULES:
- Blobs are given as Windows-1252 bytes, exactly as stored in the file
- make_line() never escapes newlines; tests that need the {0x80, 0x7F}
  sentinel write the bytes out explicitly
"""

from typing import List, Optional

import pytest

from propdump_converter.core.record import PropdumpDump, PropdumpRecord


def make_line(
    version: int,
    owner: int = 1,
    timestamp: int = 1000000000,
    x: int = 0,
    y: int = 0,
    z: int = 0,
    y_orient: int = 0,
    x_orient: int = 0,
    z_orient: int = 0,
    object_type: int = 0,
    model: bytes = b"",
    description: bytes = b"",
    action: bytes = b"",
    data: bytes = b"",
) -> bytes:
    """Build one record line (without terminator) for the given version."""
    fields: List[int] = [owner, timestamp, x, y, z, y_orient]
    if version >= 3:
        fields += [x_orient, z_orient]
    if version >= 4:
        fields.append(object_type)
    fields += [len(model), len(description), len(action)]
    if version >= 4:
        fields.append(len(data))
    head = " ".join(str(value) for value in fields).encode("ascii")
    return head + b" " + model + description + action + data


def make_propdump(version: int, lines: List[bytes], newline: bytes = b"\r\n",
                  header: Optional[bytes] = None) -> bytes:
    if header is None:
        header = "propdump version {}".format(version).encode("ascii")
    return newline.join([header] + lines) + newline


@pytest.fixture
def v4_lines() -> List[bytes]:
    return [
        make_line(4, owner=104, timestamp=1041379200, x=1500, y=-20, z=-3250,
                  y_orient=900, x_orient=0, z_orient=0, object_type=1,
                  model=b"tree5", description=b"Caf\xe9 sign", action=b"create color red"),
        make_line(4, owner=104, timestamp=1041379260, x=1600, y=0, z=-3000,
                  object_type=2, model=b"wall01", data=b"\xde\xad\xbe\xef"),
        make_line(4, owner=2, timestamp=1100000000, x=-500, y=100, z=700,
                  y_orient=1800, object_type=2, model=b"floor1"),
    ]


@pytest.fixture
def v4_dump_bytes(v4_lines) -> bytes:
    return make_propdump(4, v4_lines)


@pytest.fixture
def sample_dump() -> PropdumpDump:
    return PropdumpDump(
        version=4,
        source_filename="world.txt",
        records=[
            PropdumpRecord(owner=104, build_timestamp=1041379200, x=1500, y=-20, z=-3250,
                           y_orient=900, x_orient=0, z_orient=0, object_type=1,
                           model="tree5", description="Café sign\r\nline two",
                           action="create color red"),
            PropdumpRecord(owner=2, build_timestamp=1100000000, x=-500, y=100, z=700,
                           y_orient=1800, x_orient=0, z_orient=0, object_type=2,
                           model="wall01", v4_data="3q2+7w=="),
        ],
    )
