"""Show records one field per line, labelled by header."""

from __future__ import annotations

import argparse
import sys
from typing import Iterable, Sequence

from qcsv.csvio import ReaderConfig, parse_delimiter
from qcsv.tabwriter import align_columns


def condense(value: str, limit: int | None) -> str:
    """Cut ``value`` to ``limit`` characters, marking the cut with '...'."""
    if limit is None or len(value) <= limit:
        return value
    return value[:limit] + "..."


def flatten(
    headers: Sequence[str],
    rows: Iterable[Sequence[str]],
    no_headers: bool = False,
    condense_limit: int | None = None,
    separator: str = "#",
) -> str:
    """Render records as aligned 'label<TAB>value' lines."""
    lines: list[str] = []
    for n, row in enumerate(rows):
        if n and separator:
            lines.append(separator)
        for i, (header, field) in enumerate(zip(headers, row)):
            label = str(i) if no_headers else header
            lines.append(f"{label}\t{condense(field, condense_limit)}")
    return "".join(line + "\n" for line in align_columns(lines))


def run(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="flatten", description="Print records one field per line."
    )
    parser.add_argument("input", nargs="?")
    parser.add_argument("-c", "--condense", type=int)
    parser.add_argument("-s", "--separator", default="#")
    parser.add_argument("-n", "--no-headers", action="store_true")
    parser.add_argument("-d", "--delimiter", type=parse_delimiter, default=",")
    args = parser.parse_args(argv)

    config = ReaderConfig(args.input, args.delimiter, args.no_headers)
    headers, rows = config.read()
    sys.stdout.write(
        flatten(headers, rows, args.no_headers, args.condense, args.separator)
    )
    sys.stdout.flush()