"""Objects JSON formatter.

WHY: JSON is the easiest way to move decoded object placements into
other tools (world editors, databases, scripts). Absent fields must stay
distinguishable from empty ones, which JSON ``null`` does naturally.

HOW: The dump is serialized as one document with the format version,
source filename, object count, and an ``objects`` array of
PropdumpRecord.to_dict() mappings. The document is validated with
jsonschema against propdump_objects_schema.json before returning.

RULES:
- Absent fields (None) are emitted as null, never as "" or 0
- v4_data stays base64 text
- Non-ASCII text is emitted as-is (ensure_ascii=False)
- Output suffix: "-objects.json"
- Validate output against the schema before returning; raise on failure
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

from propdump_converter.core.record import PropdumpDump
from propdump_converter.formatters.base import BaseFormatter, FormatterOutput

SCHEMA_PATH = Path(__file__).resolve().parent / "propdump_objects_schema.json"

_CACHED_SCHEMA: dict[str, Any] | None = None


def get_schema() -> dict[str, Any]:
    """Load the objects JSON schema, cached after first call."""
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


def build_document(dump: PropdumpDump) -> dict[str, Any]:
    return {
        "version": dump.version,
        "source_filename": dump.source_filename,
        "object_count": len(dump.records),
        "objects": [record.to_dict() for record in dump.records],
    }


class JSONFormatter(BaseFormatter):
    """Formatter that produces a schema-validated JSON document."""

    @property
    def name(self) -> str:
        return "Objects JSON"

    def format(self, dump: PropdumpDump) -> list[FormatterOutput]:
        document = build_document(dump)
        jsonschema.validate(instance=document, schema=get_schema())
        content = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
        return [
            FormatterOutput(
                suffix="-objects.json",
                content=content,
                media_type="application/json",
            )
        ]
