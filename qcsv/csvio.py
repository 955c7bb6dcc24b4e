"""Reading and writing CSV data with configurable dialects."""

from __future__ import annotations

import csv
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import IO, Iterable, Iterator, Sequence

_BOM = "\ufeff"


class CommandError(Exception):
    """Raised when a command cannot complete its work."""


class QuoteStyle(Enum):
    """When the writer puts quotes around a field."""

    NECESSARY = "necessary"
    ALWAYS = "always"
    NEVER = "never"


def parse_delimiter(value: str) -> str:
    """Parse a single-character delimiter, accepting a literal ``\\t``."""
    if value == r"\t":
        return "\t"
    if len(value) != 1:
        raise CommandError(
            f"Could not convert '{value}' to a single character delimiter."
        )
    return value


@dataclass
class ReaderConfig:
    """How to read CSV data from a file, or stdin when ``path`` is None or '-'."""

    path: str | None = None
    delimiter: str = ","
    no_headers: bool = False
    quote: str = '"'
    escape: str | None = None
    double_quote: bool = True
    quoting: bool = True

    @contextmanager
    def _open(self) -> Iterator[IO[str]]:
        if self.path is None or self.path == "-":
            yield sys.stdin
            return
        try:
            fh = open(
                self.path, encoding="utf-8", errors="surrogateescape", newline=""
            )
        except OSError as exc:
            raise CommandError(f"{self.path}: {exc.strerror}") from exc
        with fh:
            yield fh

    def _rows(self) -> Iterator[list[str]]:
        with self._open() as fh:
            reader = csv.reader(
                fh,
                delimiter=self.delimiter,
                quotechar=self.quote,
                escapechar=self.escape,
                doublequote=self.double_quote,
                quoting=csv.QUOTE_MINIMAL if self.quoting else csv.QUOTE_NONE,
            )
            first = True
            try:
                for row in reader:
                    if first and row and row[0].startswith(_BOM):
                        row[0] = row[0][len(_BOM):]
                        if row == [""]:
                            first = False
                            continue
                    first = False
                    if row:
                        yield row
            except csv.Error as exc:
                raise CommandError(f"CSV parse error: {exc}") from exc

    def read(self) -> tuple[list[str], list[list[str]]]:
        """Return the first row and the data rows.

        With ``no_headers`` the first row is also part of the data rows.
        """
        rows = list(self._rows())
        if not rows:
            return [], []
        return rows[0], rows if self.no_headers else rows[1:]

    def records(self) -> Iterator[list[str]]:
        """Yield the data rows, skipping the header row unless ``no_headers``."""
        rows = self._rows()
        if not self.no_headers:
            next(rows, None)
        yield from rows


class _RecordWriter:
    def __init__(self, stream: IO[str], config: "WriterConfig") -> None:
        self._stream = stream
        self._config = config
        specials = {config.delimiter, config.quote, "\n", "\r"}
        specials.update(config.terminator)
        self._specials = specials

    def _format(self, field: str) -> str:
        cfg = self._config
        style = cfg.quote_style
        if style is QuoteStyle.NEVER:
            return field
        if style is QuoteStyle.NECESSARY and not any(
            c in field for c in self._specials
        ):
            return field
        if cfg.double_quote:
            inner = field.replace(cfg.quote, cfg.quote * 2)
        else:
            inner = field.replace(cfg.quote, (cfg.escape or "\\") + cfg.quote)
        return f"{cfg.quote}{inner}{cfg.quote}"

    def writerow(self, fields: Sequence[str]) -> None:
        fields = list(fields)
        if fields == [""] and self._config.quote_style is not QuoteStyle.NEVER:
            line = self._config.quote * 2
        else:
            line = self._config.delimiter.join(self._format(f) for f in fields)
        self._stream.write(line + self._config.terminator)

    def writerows(self, rows: Iterable[Sequence[str]]) -> None:
        for row in rows:
            self.writerow(row)


@dataclass
class WriterConfig:
    """How to write CSV data to a file, or stdout when ``path`` is None."""

    path: str | None = None
    delimiter: str = ","
    terminator: str = "\n"
    quote: str = '"'
    quote_style: QuoteStyle = QuoteStyle.NECESSARY
    escape: str | None = None
    double_quote: bool = True

    def writer(self, stream: IO[str]) -> _RecordWriter:
        """Return a record writer over an open text stream."""
        return _RecordWriter(stream, self)

    @contextmanager
    def open(self) -> Iterator[_RecordWriter]:
        """Open the destination and yield a record writer for it."""
        if self.path is None or self.path == "-":
            yield self.writer(sys.stdout)
            sys.stdout.flush()
            return
        try:
            fh = open(
                self.path, "w", encoding="utf-8", errors="surrogateescape", newline=""
            )
        except OSError as exc:
            raise CommandError(f"{self.path}: {exc.strerror}") from exc
        with fh:
            yield self.writer(fh)