"""Join two sets of CSV data on selected key columns."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

from qcsv.csvio import CommandError, ReaderConfig, WriterConfig, parse_delimiter
from qcsv.selection import parse_selection

# Unicode White_Space characters, the set stripped from keys before comparing.
_WHITESPACE = (
    "\t\n\x0b\x0c\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)

Key = tuple[str, ...]

_OPERATIONS = ("left", "left_anti", "left_semi", "right", "full", "cross")


def transform(value: str, casei: bool = False) -> str:
    """Normalise a key field: strip whitespace and optionally lowercase it.

    Fields that are not valid UTF-8 are compared exactly as they are.
    """
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return value
    text = value.strip(_WHITESPACE)
    if not casei:
        return text
    return "".join(ch.lower()[0] for ch in text)


def get_row_key(selection: Sequence[int], row: Sequence[str], casei: bool = False) -> Key:
    """Return the normalised values of the selected columns of ``row``."""
    try:
        return tuple(transform(row[i], casei) for i in selection)
    except IndexError as exc:
        raise CommandError(
            f"Record with {len(row)} fields has no selected column."
        ) from exc


class ValueIndex:
    """Maps key tuples to the positions of the rows that carry them."""

    def __init__(
        self,
        rows: Iterable[Sequence[str]],
        selection: Sequence[int],
        casei: bool = False,
        nulls: bool = False,
    ) -> None:
        self.rows: list[list[str]] = [list(row) for row in rows]
        self.values: dict[Key, list[int]] = {}
        for i, row in enumerate(self.rows):
            key = get_row_key(selection, row, casei)
            if nulls or all(key):
                self.values.setdefault(key, []).append(i)

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    def __str__(self) -> str:
        # Keys are kept in order of first appearance.
        return "".join(
            f"({', '.join(key)}) => {rows}\n" for key, rows in self.values.items()
        )


@dataclass
class Joiner:
    """Two inputs with their headers, data rows and key column selections."""

    headers1: list[str]
    rows1: list[list[str]]
    sel1: list[int]
    headers2: list[str]
    rows2: list[list[str]]
    sel2: list[int]
    no_headers: bool = False
    casei: bool = False
    nulls: bool = False

    def __post_init__(self) -> None:
        if len(self.sel1) != len(self.sel2):
            raise CommandError(
                "Column selections must have the same number of columns, "
                f"but found column selections with {len(self.sel1)} and "
                f"{len(self.sel2)} columns."
            )

    def _index(self, rows: list[list[str]], selection: list[int]) -> ValueIndex:
        return ValueIndex(rows, selection, self.casei, self.nulls)

    def _key(self, selection: list[int], row: Sequence[str]) -> Key:
        return get_row_key(selection, row, self.casei)

    def inner_join(self) -> Iterator[list[str]]:
        """Yield every pairing of rows whose keys match."""
        validx = self._index(self.rows2, self.sel2)
        for row in self.rows1:
            for j in validx.values.get(self._key(self.sel1, row), ()):
                yield [*row, *validx.rows[j]]

    def outer_join(self, right: bool = False) -> Iterator[list[str]]:
        """Yield a left (or right) outer join, padding unmatched rows."""
        if right:
            rows1, sel1 = self.rows2, self.sel2
            rows2, sel2, headers2 = self.rows1, self.sel1, self.headers1
        else:
            rows1, sel1 = self.rows1, self.sel1
            rows2, sel2, headers2 = self.rows2, self.sel2, self.headers2
        pad = [""] * len(headers2)
        validx = self._index(rows2, sel2)
        for row in rows1:
            matches = validx.values.get(self._key(sel1, row))
            if not matches:
                yield [*pad, *row] if right else [*row, *pad]
                continue
            for j in matches:
                other = validx.rows[j]
                yield [*other, *row] if right else [*row, *other]

    def left_join(self, anti: bool = False) -> Iterator[list[str]]:
        """Yield first-input rows without (anti) or with (semi) a match."""
        validx = self._index(self.rows2, self.sel2)
        first_row = True
        for row in self.rows1:
            matched = self._key(self.sel1, row) in validx.values
            if not matched:
                if anti:
                    yield list(row)
            elif not anti:
                # The semi join treats its first match as the header row.
                if first_row:
                    first_row = False
                else:
                    yield list(row)

    def full_outer_join(self) -> Iterator[list[str]]:
        """Yield matched pairs, then rows of either side that had no match."""
        pad1 = [""] * len(self.headers1)
        pad2 = [""] * len(self.headers2)
        validx = self._index(self.rows2, self.sel2)
        written = [False] * validx.num_rows
        for row in self.rows1:
            matches = validx.values.get(self._key(self.sel1, row))
            if not matches:
                yield [*row, *pad2]
                continue
            for j in matches:
                written[j] = True
                yield [*row, *validx.rows[j]]
        for row2, done in zip(validx.rows, written):
            if not done:
                yield [*pad1, *row2]

    def cross_join(self) -> Iterator[list[str]]:
        """Yield the cartesian product of the two inputs."""
        for row1 in self.rows1:
            for row2 in self.rows2:
                yield [*row1, *row2]


def run(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="join", description="Join two sets of CSV data on the given columns."
    )
    parser.add_argument("columns1")
    parser.add_argument("input1")
    parser.add_argument("columns2")
    parser.add_argument("input2")
    parser.add_argument("--no-case", action="store_true")
    parser.add_argument("--left", action="store_true")
    parser.add_argument("--left-anti", action="store_true")
    parser.add_argument("--left-semi", action="store_true")
    parser.add_argument("--right", action="store_true")
    parser.add_argument("--full", action="store_true")
    parser.add_argument("--cross", action="store_true")
    parser.add_argument("--nulls", action="store_true")
    parser.add_argument("-o", "--output")
    parser.add_argument("-n", "--no-headers", action="store_true")
    parser.add_argument("-d", "--delimiter", type=parse_delimiter, default=",")
    args = parser.parse_args(argv)

    chosen = [name for name in _OPERATIONS if getattr(args, name)]
    if len(chosen) > 1:
        raise CommandError("Please pick exactly one join operation.")
    operation = chosen[0] if chosen else "inner"

    headers1, rows1 = ReaderConfig(args.input1, args.delimiter, args.no_headers).read()
    headers2, rows2 = ReaderConfig(args.input2, args.delimiter, args.no_headers).read()
    use_names = not args.no_headers
    sel1 = parse_selection(args.columns1).selection(headers1, use_names)
    sel2 = parse_selection(args.columns2).selection(headers2, use_names)
    joiner = Joiner(
        headers1, rows1, sel1, headers2, rows2, sel2,
        no_headers=args.no_headers, casei=args.no_case, nulls=args.nulls,
    )

    results = {
        "inner": joiner.inner_join,
        "left": lambda: joiner.outer_join(False),
        "right": lambda: joiner.outer_join(True),
        "left_anti": lambda: joiner.left_join(True),
        "left_semi": lambda: joiner.left_join(False),
        "full": joiner.full_outer_join,
        "cross": joiner.cross_join,
    }[operation]()

    with WriterConfig(args.output).open() as wtr:
        if not args.no_headers:
            if operation in ("left_anti", "left_semi"):
                header_row = headers1
            else:
                header_row = [*headers1, *headers2]
            if header_row:
                wtr.writerow(header_row)
        wtr.writerows(results)