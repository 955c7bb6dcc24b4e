"""Pseudonymise a column by replacing each distinct value with a number."""

from __future__ import annotations

import argparse
from typing import Iterable, Iterator, Sequence

from qcsv.csvio import CommandError, ReaderConfig, WriterConfig, parse_delimiter
from qcsv.selection import parse_selection


def replace_column_value(
    record: Sequence[str], column_index: int, new_value: str
) -> list[str]:
    """Return a copy of ``record`` with the field at ``column_index`` replaced."""
    return [new_value if i == column_index else v for i, v in enumerate(record)]


def pseudonymise(
    rows: Iterable[Sequence[str]], column_index: int
) -> Iterator[list[str]]:
    """Yield rows whose column value is swapped for an incremental identifier."""
    ids: dict[str, int] = {}
    for row in rows:
        ident = ids.setdefault(row[column_index], len(ids))
        yield replace_column_value(row, column_index, str(ident))


def run(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="pseudo", description="Pseudonymise the values of a column."
    )
    parser.add_argument("column")
    parser.add_argument("input", nargs="?")
    parser.add_argument("-o", "--output")
    parser.add_argument("-n", "--no-headers", action="store_true")
    parser.add_argument("-d", "--delimiter", type=parse_delimiter, default=",")
    args = parser.parse_args(argv)

    headers, rows = ReaderConfig(args.input, args.delimiter, args.no_headers).read()
    selected = parse_selection(args.column).selection(headers, not args.no_headers)
    if not selected:
        raise CommandError("No column selected.")
    column_index = selected[0]

    with WriterConfig(args.output).open() as wtr:
        if not args.no_headers:
            wtr.writerow(headers)
        wtr.writerows(pseudonymise(rows, column_index))