"""Intermediate representation dataclasses for decoded propdumps.

WHY: A propdump line is a flat run of integers followed by a blob of
concatenated strings. Formatters (JSON, CSV, summary) need typed objects
with named fields, and need to know which fields a given format version
actually carries. The IR decouples decoding from formatting.

HOW: Three dataclasses:
  VersionLayout   — token layout and field presence for one format version
  PropdumpRecord  — one decoded object placement
  PropdumpDump    — a materialized file: version, source name, records

RULES:
- VERSION_LAYOUTS is the single source of truth for version differences
- PropdumpRecord is frozen; records never change after decoding
- x_orient / z_orient are None for version 2
- object_type is 0 for versions 2 and 3
- model / description / action / v4_data are None when their length
  indicator is 0 (absent, not empty)
- v4_data holds the opaque version 4+ payload as base64 text
"""

from __future__ import annotations

import base64
from dataclasses import asdict, dataclass, field
from typing import Any, Optional, Tuple


@dataclass(frozen=True)
class VersionLayout:
    """Token layout of a record line for one propdump format version.

    RULES:
    - token_count: maximum number of space-separated tokens; the last one
      keeps the rest of the line (the blob remainder) unsplit
    - length_indices: token indexes of the model, description, action and
      data length indicators; data is None where the version has no payload
    """

    version: int
    token_count: int
    has_orientation: bool
    has_object_type: bool
    length_indices: Tuple[int, int, int, Optional[int]]


VERSION_LAYOUTS: dict[int, VersionLayout] = {
    2: VersionLayout(2, token_count=10, has_orientation=False, has_object_type=False,
                     length_indices=(6, 7, 8, None)),
    3: VersionLayout(3, token_count=12, has_orientation=True, has_object_type=False,
                     length_indices=(8, 9, 10, None)),
    4: VersionLayout(4, token_count=14, has_orientation=True, has_object_type=True,
                     length_indices=(9, 10, 11, 12)),
    5: VersionLayout(5, token_count=14, has_orientation=True, has_object_type=True,
                     length_indices=(9, 10, 11, 12)),
}

SUPPORTED_VERSIONS = frozenset(VERSION_LAYOUTS)


@dataclass(frozen=True)
class PropdumpRecord:
    """One object placement read from a propdump line.

    WHY: Every formatter needs the same view of an object: who built it,
    when, where, how it is rotated, and its model/description/action
    strings.

    HOW: Built by core.decoder.decode_record(); all fields are assigned at
    construction, never afterwards.

    RULES:
    - owner: citizen number of the builder
    - build_timestamp: Unix time of the build (64-bit)
    - x, y, z: world coordinates in centimeters
    - y_orient: yaw, always present
    - x_orient / z_orient: tilt and roll, versions 3–5 only
    - object_type: versions 4–5 only, else 0
    """

    owner: int
    build_timestamp: int
    x: int
    y: int
    z: int
    y_orient: int
    x_orient: int | None = None
    z_orient: int | None = None
    object_type: int = 0
    model: str | None = None
    description: str | None = None
    action: str | None = None
    v4_data: str | None = None

    @property
    def position(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)

    @property
    def v4_data_bytes(self) -> bytes | None:
        """The version 4+ payload as raw bytes, or None when absent."""
        if self.v4_data is None:
            return None
        return base64.b64decode(self.v4_data)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class PropdumpDump:
    """A fully read propdump file.

    WHY: Formatters produce whole-file outputs (a JSON document, a CSV
    table, a summary), so they receive the materialized records together
    with the format version and the source filename.

    RULES:
    - records: in file order
    - version: the value declared in the header
    - source_filename: input filename (for output naming)
    """

    version: int
    source_filename: str
    records: list[PropdumpRecord] = field(default_factory=list)

    @property
    def layout(self) -> VersionLayout | None:
        return VERSION_LAYOUTS.get(self.version)
