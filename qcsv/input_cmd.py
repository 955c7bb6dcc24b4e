"""Read CSV data with special quoting rules and write it normalised."""

from __future__ import annotations

import argparse
from typing import Sequence

from qcsv.csvio import ReaderConfig, WriterConfig, parse_delimiter


def run(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="input", description="Read CSV data with special quoting rules."
    )
    parser.add_argument("input", nargs="?")
    parser.add_argument("--quote", type=parse_delimiter, default='"')
    parser.add_argument("--escape", type=parse_delimiter)
    parser.add_argument("--no-quoting", action="store_true")
    parser.add_argument("-o", "--output")
    parser.add_argument("-d", "--delimiter", type=parse_delimiter, default=",")
    args = parser.parse_args(argv)

    rconfig = ReaderConfig(
        args.input, args.delimiter, no_headers=True, quote=args.quote
    )
    if args.escape is not None:
        rconfig.escape = args.escape
        rconfig.double_quote = False
    if args.no_quoting:
        rconfig.quoting = False

    with WriterConfig(args.output).open() as wtr:
        wtr.writerows(rconfig.records())