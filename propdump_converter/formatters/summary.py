"""Plain text summary of a propdump.

WHY: Before converting a whole world, users want a quick look at what a
dump contains: how many objects, which format version, how many builders,
how large the built area is. The summary is also the simplest formatter
and proves the pluggable pattern works for this IR.

HOW: One pass over the records collects distinct owners, the coordinate
bounding box, the build-time range, and a histogram of object types.

RULES:
- First line is "Objects parsed: N"
- Empty dumps report the count and version only
- Object types listed in ascending order, one per line
- Timestamps rendered as UTC ISO-8601
- No trailing whitespace on any line
- Output suffix: "-summary.txt"
- Media type: "text/plain"
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from typing import List

from propdump_converter.core.record import PropdumpDump
from propdump_converter.formatters.base import BaseFormatter, FormatterOutput


def _format_timestamp(value: int) -> str:
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    except (OverflowError, OSError, ValueError):
        return str(value)


def summarize(dump: PropdumpDump) -> List[str]:
    """Build the summary lines for a dump."""
    records = dump.records
    lines = [
        "Objects parsed: {}".format(len(records)),
        "Format version: {}".format(dump.version),
        "Source: {}".format(dump.source_filename),
    ]
    if not records:
        return lines

    owners = {r.owner for r in records}
    xs = [r.x for r in records]
    ys = [r.y for r in records]
    zs = [r.z for r in records]
    timestamps = [r.build_timestamp for r in records]

    lines.append("Distinct owners: {}".format(len(owners)))
    lines.append("Bounding box: x {}..{}, y {}..{}, z {}..{}".format(
        min(xs), max(xs), min(ys), max(ys), min(zs), max(zs),
    ))
    lines.append("Built: {} .. {}".format(
        _format_timestamp(min(timestamps)), _format_timestamp(max(timestamps)),
    ))
    lines.append("With description: {}".format(sum(1 for r in records if r.description is not None)))
    lines.append("With action: {}".format(sum(1 for r in records if r.action is not None)))

    layout = dump.layout
    if layout is not None and layout.has_object_type:
        type_counts = Counter(r.object_type for r in records)
        lines.append("Object types:")
        for object_type in sorted(type_counts):
            lines.append("  {}: {}".format(object_type, type_counts[object_type]))
    return lines


class SummaryFormatter(BaseFormatter):

    @property
    def name(self) -> str:
        return "Summary"

    def format(self, dump: PropdumpDump) -> List[FormatterOutput]:
        content = "\n".join(summarize(dump)) + "\n"
        return [
            FormatterOutput(
                suffix="-summary.txt",
                content=content,
                media_type="text/plain",
            )
        ]
