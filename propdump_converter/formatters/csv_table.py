"""CSV table formatter — one row per object.

WHY: Spreadsheet users want to sort and filter objects by owner, date or
position. A flat CSV table with a fixed header opens anywhere.

HOW: csv.DictWriter over PropdumpRecord.to_dict() rows, columns in
record field order. Embedded newlines in descriptions and actions are
kept; the csv module quotes those cells.

RULES:
- Header row always present, even for an empty dump
- Absent values (None) become empty cells
- Line terminator "\\n"
- Output suffix: "-objects.csv"
- Media type: "text/csv"
"""

from __future__ import annotations

import csv
import io
from dataclasses import fields
from typing import List

from propdump_converter.core.record import PropdumpDump, PropdumpRecord
from propdump_converter.formatters.base import BaseFormatter, FormatterOutput

COLUMNS: List[str] = [f.name for f in fields(PropdumpRecord)]


class CSVFormatter(BaseFormatter):

    @property
    def name(self) -> str:
        return "Objects CSV"

    def format(self, dump: PropdumpDump) -> List[FormatterOutput]:
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=COLUMNS, lineterminator="\n")
        writer.writeheader()
        for record in dump.records:
            row = {key: ("" if value is None else value) for key, value in record.to_dict().items()}
            writer.writerow(row)
        return [
            FormatterOutput(
                suffix="-objects.csv",
                content=buffer.getvalue(),
                media_type="text/csv",
            )
        ]
