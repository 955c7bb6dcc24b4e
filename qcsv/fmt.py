"""Reformat CSV data with another delimiter, terminator or quoting."""

from __future__ import annotations

import argparse
from typing import Sequence

from qcsv.csvio import QuoteStyle, ReaderConfig, WriterConfig, parse_delimiter


def run(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="fmt", description="Format CSV data.")
    parser.add_argument("input", nargs="?")
    parser.add_argument("-t", "--out-delimiter", type=parse_delimiter, default=",")
    parser.add_argument("--crlf", action="store_true")
    parser.add_argument("--ascii", action="store_true")
    parser.add_argument("--quote", type=parse_delimiter, default='"')
    parser.add_argument("--quote-always", action="store_true")
    parser.add_argument("--quote-never", action="store_true")
    parser.add_argument("--escape", type=parse_delimiter)
    parser.add_argument("-o", "--output")
    parser.add_argument("-d", "--delimiter", type=parse_delimiter, default=",")
    args = parser.parse_args(argv)

    rconfig = ReaderConfig(args.input, args.delimiter, no_headers=True)
    wconfig = WriterConfig(
        args.output,
        delimiter=args.out_delimiter,
        terminator="\r\n" if args.crlf else "\n",
        quote=args.quote,
    )
    if args.ascii:
        wconfig.delimiter = "\x1f"
        wconfig.terminator = "\x1e"
    if args.quote_always:
        wconfig.quote_style = QuoteStyle.ALWAYS
    elif args.quote_never:
        wconfig.quote_style = QuoteStyle.NEVER
    if args.escape is not None:
        wconfig.escape = args.escape
        wconfig.double_quote = False

    with wconfig.open() as wtr:
        wtr.writerows(rconfig.records())