"""Column selection syntax: names, 1-based indices, ranges and inversion."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Sequence

from qcsv.csvio import CommandError

_NTH = re.compile(r"^(.*)\[(\d+)\]$")


@dataclass(frozen=True)
class _Selector:
    index: int | None = None
    name: str | None = None
    nth: int = 0

    def resolve(self, headers: Sequence[str], use_names: bool) -> int:
        if self.index is not None:
            if self.index < 1:
                raise CommandError("Selector index must be greater than 0.")
            if self.index > len(headers):
                raise CommandError(
                    f"Selector index {self.index} is out of bounds. "
                    f"Index must be between 1 and {len(headers)}."
                )
            return self.index - 1
        if not use_names:
            raise CommandError(
                f"Cannot use names ('{self.name}') in selection with --no-headers set."
            )
        seen = 0
        for i, header in enumerate(headers):
            if header == self.name:
                if seen == self.nth:
                    return i
                seen += 1
        raise CommandError(
            f"Selector name '{self.name}' does not exist as a named header."
        )


@dataclass(frozen=True)
class _Item:
    start: _Selector | None
    end: _Selector | None
    is_range: bool

    def resolve(self, headers: Sequence[str], use_names: bool) -> list[int]:
        if not self.is_range:
            assert self.start is not None
            return [self.start.resolve(headers, use_names)]
        if not headers:
            return []
        lo = self.start.resolve(headers, use_names) if self.start else 0
        hi = self.end.resolve(headers, use_names) if self.end else len(headers) - 1
        if lo <= hi:
            return list(range(lo, hi + 1))
        return list(range(lo, hi - 1, -1))


def _split_outside_quotes(text: str, sep: str) -> list[str]:
    parts, current, in_quote = [], [], False
    for ch in text:
        if ch == '"':
            in_quote = not in_quote
        if ch == sep and not in_quote:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    if in_quote:
        raise CommandError(f"Unclosed quote in selection '{text}'.")
    parts.append("".join(current))
    return parts


def _parse_selector(text: str) -> _Selector:
    nth = 0
    match = _NTH.match(text)
    if match:
        text, nth = match.group(1), int(match.group(2))
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return _Selector(name=text[1:-1], nth=nth)
    if text.isdigit() and not match:
        return _Selector(index=int(text))
    if not text:
        raise CommandError("Empty selector.")
    return _Selector(name=text, nth=nth)


def _parse_item(text: str) -> _Item:
    pieces = _split_outside_quotes(text, "-")
    if len(pieces) == 1:
        return _Item(_parse_selector(text), None, False)
    if len(pieces) == 2:
        start, end = pieces
        return _Item(
            _parse_selector(start) if start else None,
            _parse_selector(end) if end else None,
            True,
        )
    raise CommandError(f"Invalid selection range '{text}'.")


@dataclass(frozen=True)
class SelectColumns:
    """A parsed column selection that can be resolved against headers."""

    items: tuple[_Item, ...] = field(default_factory=tuple)
    invert: bool = False

    def selection(self, headers: Sequence[str], use_names: bool) -> list[int]:
        """Resolve to 0-based column indices, in selection order."""
        if self.items:
            chosen = [i for item in self.items for i in item.resolve(headers, use_names)]
        else:
            chosen = list(range(len(headers)))
        if self.invert:
            excluded = set(chosen)
            return [i for i in range(len(headers)) if i not in excluded]
        return chosen


def parse_selection(spec: str) -> SelectColumns:
    """Parse a selection such as ``name,2,4-6,!3``."""
    invert = spec.startswith("!")
    if invert:
        spec = spec[1:]
    if not spec:
        return SelectColumns((), invert)
    items = tuple(_parse_item(part) for part in _split_outside_quotes(spec, ","))
    return SelectColumns(items, invert)