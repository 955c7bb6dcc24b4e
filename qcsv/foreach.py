"""Run a command once for every record of CSV data."""

from __future__ import annotations

import argparse
import csv
import io
import os
import re
import subprocess
import sys
from typing import Sequence

from qcsv.csvio import CommandError, ReaderConfig, WriterConfig, parse_delimiter
from qcsv.selection import parse_selection

_SPLITTER = re.compile(r"""(?:[\w-]+|"[^"]*"|'[^']*'|`[^`]*`)""")
_CLEANER = re.compile(r"""(?:^["'`]|["'`]$)""")


def split_command(command: str, value: str) -> list[str]:
    """Substitute ``value`` for '{}' and split the result into program and args.

    Quote characters around each argument are removed; the program is kept as is.
    """
    templated = command.replace("{}", value)
    pieces = _SPLITTER.findall(templated)
    if not pieces:
        raise CommandError(f"No command to run in '{templated}'.")
    return [pieces[0], *(_CLEANER.sub("", piece) for piece in pieces[1:])]


def _run_piped(cmd: list[str]) -> str:
    try:
        result = subprocess.run(cmd, stdout=subprocess.PIPE, check=False)
    except OSError as exc:
        raise CommandError(f"Could not run '{cmd[0]}': {exc}") from exc
    return result.stdout.decode("utf-8", "surrogateescape")


def _run_inherited(cmd: list[str]) -> None:
    sys.stdout.flush()
    try:
        subprocess.run(cmd, check=False)
    except OSError as exc:
        raise CommandError(f"Could not run '{cmd[0]}': {exc}") from exc


def run(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="foreach", description="Execute a command once per line of CSV data."
    )
    parser.add_argument("column")
    parser.add_argument("command")
    parser.add_argument("input", nargs="?")
    parser.add_argument("-u", "--unify", action="store_true")
    parser.add_argument("-c", "--new-column")
    parser.add_argument("-n", "--no-headers", action="store_true")
    parser.add_argument("-d", "--delimiter", type=parse_delimiter, default=",")
    parser.add_argument("-q", "--quiet", action="store_true")
    args = parser.parse_args(argv)

    if os.name == "nt":
        raise CommandError("foreach command does not work on Windows.")

    headers, rows = ReaderConfig(args.input, args.delimiter, args.no_headers).read()
    selected = parse_selection(args.column).selection(headers, not args.no_headers)
    if not selected:
        raise CommandError("No column selected.")
    column = selected[0]

    headers_written = False
    with WriterConfig().open() as wtr:
        for row in rows:
            value = row[column]
            cmd = split_command(args.command, value)
            if not args.unify:
                _run_inherited(cmd)
                continue
            output = _run_piped(cmd)
            reader = csv.reader(io.StringIO(output, newline=""), delimiter=args.delimiter)
            records = [r for r in reader if r]
            out_headers, out_rows = (records[0], records[1:]) if records else ([], [])
            if not headers_written:
                if args.new_column is not None:
                    out_headers = [*out_headers, args.new_column]
                if out_headers:
                    wtr.writerow(out_headers)
                headers_written = True
            for record in out_rows:
                if args.new_column is not None:
                    record = [*record, value]
                wtr.writerow(record)
            sys.stdout.flush()