"""Split CSV data into files named after the values of one column."""

from __future__ import annotations

import argparse
import re
from contextlib import ExitStack
from pathlib import Path
from typing import Any, Sequence

from qcsv.csvio import CommandError, ReaderConfig, WriterConfig, parse_delimiter
from qcsv.selection import parse_selection

_NON_WORD = re.compile(r"\W")


class WriterGenerator:
    """Generates unique, shell-safe file names from CSV values."""

    def __init__(self, template: str = "{}.csv") -> None:
        if "{}" not in template:
            raise CommandError(f"Filename template '{template}' must contain '{{}}'.")
        self.template = template
        self.counter = 1
        self.used: set[str] = set()

    def unique_value(self, key: str) -> str:
        """Sanitise ``key``; a key seen before gets a numbered suffix."""
        base = _NON_WORD.sub("", key) or "empty"
        if base not in self.used:
            self.used.add(base)
            return base
        while True:
            candidate = f"{base}_{self.counter}"
            self.counter += 1
            if candidate not in self.used:
                self.used.add(candidate)
                return candidate

    def writer_path(self, outdir: str | Path, key: str) -> Path:
        """Return a fresh output path inside ``outdir`` for ``key``."""
        return Path(outdir) / self.template.replace("{}", self.unique_value(key), 1)


def _without(row: Sequence[str], column: int) -> list[str]:
    return [v for i, v in enumerate(row) if i != column]


def run(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="partition", description="Partition CSV data by the value of a column."
    )
    parser.add_argument("column")
    parser.add_argument("outdir")
    parser.add_argument("input", nargs="?")
    parser.add_argument("--filename", default="{}.csv")
    parser.add_argument("-p", "--prefix-length", type=int)
    parser.add_argument("--drop", action="store_true")
    parser.add_argument("-n", "--no-headers", action="store_true")
    parser.add_argument("-d", "--delimiter", type=parse_delimiter, default=",")
    args = parser.parse_args(argv)

    Path(args.outdir).mkdir(parents=True, exist_ok=True)
    config = ReaderConfig(args.input, args.delimiter, args.no_headers)
    headers, rows = config.read()
    selected = parse_selection(args.column).selection(headers, not args.no_headers)
    if len(selected) != 1:
        raise CommandError("can only partition on one column")
    key_col = selected[0]

    gen = WriterGenerator(args.filename)
    writers: dict[bytes, Any] = {}
    with ExitStack() as stack:
        for row in rows:
            column = row[key_col].encode("utf-8", "surrogateescape")
            key = column
            if args.prefix_length is not None and args.prefix_length < len(column):
                key = column[: args.prefix_length]
            wtr = writers.get(key)
            if wtr is None:
                path = gen.writer_path(args.outdir, key.decode("utf-8", "replace"))
                wtr = stack.enter_context(WriterConfig(str(path)).open())
                if not args.no_headers:
                    wtr.writerow(_without(headers, key_col) if args.drop else headers)
                writers[key] = wtr
            wtr.writerow(_without(row, key_col) if args.drop else row)