"""Replace the header row of CSV data."""

from __future__ import annotations

import argparse
import csv
from typing import Sequence

from qcsv.csvio import CommandError, ReaderConfig, WriterConfig, parse_delimiter


def rename_headers(headers: Sequence[str], new_spec: str) -> list[str]:
    """Parse ``new_spec`` as a CSV row and check it fits ``headers``."""
    new_headers = next(csv.reader([new_spec]), [])
    if len(new_headers) != len(headers):
        raise CommandError(
            "The length of the CSV headers is different from the provided one."
        )
    return new_headers


def run(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="rename", description="Rename the columns of CSV data."
    )
    parser.add_argument("headers")
    parser.add_argument("input", nargs="?")
    parser.add_argument("-o", "--output")
    parser.add_argument("-n", "--no-headers", action="store_true")
    parser.add_argument("-d", "--delimiter", type=parse_delimiter, default=",")
    args = parser.parse_args(argv)

    headers, rows = ReaderConfig(args.input, args.delimiter, args.no_headers).read()
    new_headers = rename_headers(headers, args.headers)
    with WriterConfig(args.output).open() as wtr:
        wtr.writerow(new_headers)
        wtr.writerows(rows)