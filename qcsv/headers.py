"""Show the header fields of one or more CSV inputs."""

from __future__ import annotations

import argparse
import sys
from typing import Iterable, Sequence

from qcsv.csvio import ReaderConfig, parse_delimiter
from qcsv.tabwriter import align_columns


def collect_headers(
    header_lists: Iterable[Sequence[str]], intersect: bool = False
) -> list[str]:
    """Concatenate header lists; with ``intersect`` each name appears once."""
    result: list[str] = []
    for headers in header_lists:
        for header in headers:
            if not intersect or header not in result:
                result.append(header)
    return result


def render_headers(headers: Sequence[str], numbered: bool) -> str:
    """Render headers one per line, optionally with 1-based positions."""
    if numbered:
        lines = align_columns([f"{i}\t{h}" for i, h in enumerate(headers, 1)])
    else:
        lines = list(headers)
    return "".join(line + "\n" for line in lines)


def run(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="headers", description="Print the fields of the first row."
    )
    parser.add_argument("input", nargs="*")
    parser.add_argument("-j", "--just-names", action="store_true")
    parser.add_argument("--intersect", action="store_true")
    parser.add_argument("-d", "--delimiter", type=parse_delimiter, default=",")
    args = parser.parse_args(argv)

    inputs = args.input or [None]
    header_lists = (
        ReaderConfig(path, args.delimiter, no_headers=True).read()[0]
        for path in inputs
    )
    headers = collect_headers(header_lists, args.intersect)
    numbered = len(inputs) == 1 and not args.just_names
    sys.stdout.write(render_headers(headers, numbered))
    sys.stdout.flush()