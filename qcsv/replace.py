"""Replace occurrences of a regular expression across CSV fields."""

from __future__ import annotations

import argparse
import os
import re
from typing import Callable, Collection, Sequence

from qcsv.csvio import CommandError, ReaderConfig, WriterConfig, parse_delimiter
from qcsv.selection import parse_selection

UNICODE_ENV_VAR = "QCSV_REGEX_UNICODE"

_REFERENCE = re.compile(r"\$(?:(\$)|\{([^}]*)\}|([A-Za-z0-9_]+))")


def compile_pattern(
    pattern: str, ignore_case: bool = False, unicode: bool = False
) -> re.Pattern[str]:
    """Compile ``pattern``; without ``unicode`` the character classes are ASCII."""
    flags = 0
    if ignore_case:
        flags |= re.IGNORECASE
    if not unicode:
        flags |= re.ASCII
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise CommandError(f"Invalid regex '{pattern}': {exc}") from exc


def _group_text(match: re.Match[str], name: str) -> str:
    key: int | str = int(name) if name.isdigit() else name
    try:
        value = match.group(key)
    except IndexError:
        return ""
    return value or ""


def _expander(template: str) -> Callable[[re.Match[str]], str]:
    """Build a replacement function for '$1', '${name}' and '$$' templates."""
    parts: list[tuple[bool, str]] = []
    pos = 0
    for ref in _REFERENCE.finditer(template):
        parts.append((False, template[pos:ref.start()]))
        if ref.group(1):
            parts.append((False, "$"))
        else:
            name = ref.group(2) if ref.group(2) is not None else ref.group(3)
            parts.append((True, name))
        pos = ref.end()
    parts.append((False, template[pos:]))

    def expand(match: re.Match[str]) -> str:
        return "".join(
            _group_text(match, text) if is_ref else text for is_ref, text in parts
        )

    return expand


def replace_fields(
    record: Sequence[str],
    indices: Collection[int],
    pattern: re.Pattern[str],
    replacement: str,
) -> list[str]:
    """Replace every match in the fields at ``indices``; others are kept."""
    expand = _expander(replacement)
    return [
        pattern.sub(expand, field) if i in indices else field
        for i, field in enumerate(record)
    ]


def run(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="replace", description="Replace occurrences of a pattern across CSV data."
    )
    parser.add_argument("pattern")
    parser.add_argument("replacement")
    parser.add_argument("input", nargs="?")
    parser.add_argument("-i", "--ignore-case", action="store_true")
    parser.add_argument("-s", "--select", default="")
    parser.add_argument("-u", "--unicode", action="store_true")
    parser.add_argument("-o", "--output")
    parser.add_argument("-n", "--no-headers", action="store_true")
    parser.add_argument("-d", "--delimiter", type=parse_delimiter, default=",")
    args = parser.parse_args(argv)

    unicode = UNICODE_ENV_VAR in os.environ or args.unicode
    pattern = compile_pattern(args.pattern, args.ignore_case, unicode)

    headers, rows = ReaderConfig(args.input, args.delimiter, args.no_headers).read()
    indices = set(
        parse_selection(args.select).selection(headers, not args.no_headers)
    )

    with WriterConfig(args.output).open() as wtr:
        if not args.no_headers and headers:
            wtr.writerow(headers)
        for row in rows:
            wtr.writerow(replace_fields(row, indices, pattern, args.replacement))