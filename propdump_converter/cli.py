"""Command-line interface for the Propdump Converter.

WHY: Users need a simple way to inspect and convert a propdump from the
terminal. The CLI wires together the full pipeline — file validation,
header and record decoding, the PropdumpDump IR, pluggable formatter
output, and file saving — behind a single command.

HOW: Uses argparse to accept an input file, output format selection,
output directory, and an optional record limit. Records are streamed
from PropdumpParser; the parser closes the file even when --limit stops
early. Status messages go to stderr; output files are saved next to the
source (or to --output-dir).

RULES:
- Positional argument: input propdump file path
- --formats: comma-separated formatter keys (default: PROPDUMP_DEFAULT_FORMATS)
- --count-only: print the object count, write no files
- Output naming: {stem}{suffix}, numeric suffix for conflicts (-objects-2.json)
- A decoding error prints "Error: ..." with the line number and exits 1
- Status output goes to stderr (not stdout)
"""

from __future__ import annotations

import argparse
import logging
import sys
from itertools import islice
from pathlib import Path
from typing import List, Optional

from propdump_converter import config
from propdump_converter.core.errors import PropdumpError
from propdump_converter.core.parser import open_propdump
from propdump_converter.core.record import PropdumpDump
from propdump_converter.formatters import FORMATTERS
from propdump_converter.formatters.base import FormatterOutput

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """Resolve the output file path, adding numeric suffix on conflict.

    WHY: Users may run the converter multiple times on the same dump.
    Overwriting previous output would lose work. Numeric suffixes
    (-objects-2.json) prevent data loss.

    HOW: Check if {stem}{suffix} exists. If so, increment a counter
    and insert it before the file extension until a free name is found.

    RULES:
    - First attempt: {stem}{suffix} (e.g. world-objects.json)
    - Conflict: split suffix at last dot, insert counter before extension
      (e.g. world-objects-2.json)
    - Counter starts at 2 and increments
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(
    output: FormatterOutput,
    stem: str,
    output_dir: Path,
) -> Path:
    """Save a single formatter output to disk and return its path.

    RULES:
    - String content written as UTF-8 text
    - Bytes content written in binary mode
    """
    path = _resolve_output_path(stem, output.suffix, output_dir)

    if isinstance(output.content, bytes):
        path.write_bytes(output.content)
    else:
        path.write_text(output.content, encoding="utf-8")

    return path


def _read_dump(input_path: Path, limit: Optional[int]) -> PropdumpDump:
    """Stream records from the file into a PropdumpDump.

    Raises:
        PropdumpError: The header or a record line failed to decode.
    """
    with open_propdump(input_path) as parser:
        version = parser.read_version()
        _status("Format version: {}".format(version))
        records = list(islice(parser.read_records(), limit))
    return PropdumpDump(
        version=version,
        source_filename=input_path.name,
        records=records,
    )


def run(args: argparse.Namespace) -> List[Path]:
    """Execute the conversion pipeline and return the saved file paths.

    RULES:
    - Validate file, output directory and format keys before reading
    - Print "Objects parsed: N" after reading
    - Exit 1 with the error message on any PropdumpError or OSError
    """
    input_path = Path(args.input_file).resolve()
    if not input_path.is_file():
        _fail("File not found: {}".format(input_path))

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not args.count_only and not output_dir.is_dir():
        _fail("Output directory does not exist: {}".format(output_dir))

    format_keys = config.parse_format_list(args.formats or config.DEFAULT_FORMATS)
    for key in format_keys:
        if key not in FORMATTERS:
            available = ", ".join(sorted(FORMATTERS.keys()))
            _fail("Unknown format '{}'. Available formats: {}".format(key, available))

    if args.limit is not None and args.limit < 0:
        _fail("--limit must be zero or positive")

    logger.debug("Selected formats: %s", ", ".join(format_keys))
    _status("Reading {}...".format(input_path.name))
    try:
        dump = _read_dump(input_path, args.limit)
    except PropdumpError as e:
        _fail(str(e))
    except OSError as e:
        _fail("Could not read {}: {}".format(input_path, e))

    _status("Objects parsed: {}".format(len(dump.records)))
    if args.count_only:
        return []

    saved_files: List[Path] = []
    stem = input_path.stem
    for key in format_keys:
        formatter = FORMATTERS[key]()
        _status("  Running {} formatter...".format(formatter.name))
        for output in formatter.format(dump):
            saved_path = _save_output(output, stem, output_dir)
            saved_files.append(saved_path)
            _status("  Saved: {}".format(saved_path.name))

    _status("")
    _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))
    return saved_files


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable — tests can inspect the parser without running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="propdump_converter",
        description="Decode an ActiveWorlds property dump (propdump) and write "
                    "its objects as JSON, CSV, or a plain-text summary.",
    )

    parser.add_argument(
        "input_file",
        help="Path to the propdump file.",
    )

    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: {}.".format(
                 ", ".join(sorted(FORMATTERS.keys())), config.DEFAULT_FORMATS,
             ),
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )

    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Stop after this many objects.",
    )

    parser.add_argument(
        "--count-only",
        action="store_true",
        help="Only report the number of objects; write no files.",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    run(args)


if __name__ == "__main__":
    main()
