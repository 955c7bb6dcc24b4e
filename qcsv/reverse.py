"""Reverse the order of CSV records."""

from __future__ import annotations

import argparse
from typing import Sequence

from qcsv.csvio import ReaderConfig, WriterConfig, parse_delimiter


def run(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="reverse", description="Reverse rows of CSV data."
    )
    parser.add_argument("input", nargs="?")
    parser.add_argument("-o", "--output")
    parser.add_argument("-n", "--no-headers", action="store_true")
    parser.add_argument("-d", "--delimiter", type=parse_delimiter, default=",")
    args = parser.parse_args(argv)

    headers, rows = ReaderConfig(args.input, args.delimiter, args.no_headers).read()
    with WriterConfig(args.output).open() as wtr:
        if not args.no_headers and headers:
            wtr.writerow(headers)
        wtr.writerows(reversed(rows))