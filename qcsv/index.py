"""Record-offset indexes for random access into CSV files."""

from __future__ import annotations

import argparse
import csv
import os
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterator, Sequence

from qcsv.csvio import CommandError, parse_delimiter

_U64 = struct.Struct(">Q")
_BOM = "\ufeff"


def index_path(path: str | os.PathLike[str]) -> Path:
    """Return the index location for a CSV file: the path plus '.idx'."""
    return Path(f"{os.fspath(path)}.idx")


def _decoded_lines(fh: IO[bytes], state: dict[str, int]) -> Iterator[str]:
    for raw in fh:
        at_start = state["end"] == 0
        state["end"] += len(raw)
        line = raw.decode("utf-8", "surrogateescape")
        if at_start and line.startswith(_BOM):
            line = line[len(_BOM):]
        yield line


def _record_offsets(csv_path: str, delimiter: str) -> list[int]:
    offsets: list[int] = []
    state = {"end": 0}
    with open(csv_path, "rb") as fh:
        reader = csv.reader(_decoded_lines(fh, state), delimiter=delimiter)
        while True:
            start = state["end"]
            try:
                row = next(reader)
            except StopIteration:
                break
            except csv.Error as exc:
                raise CommandError(f"CSV parse error: {exc}") from exc
            if row:
                offsets.append(start)
    return offsets


def create_index(
    csv_path: str,
    output_path: str | None = None,
    delimiter: str = ",",
) -> Path:
    """Write the offset of every record followed by the record count."""
    target = Path(output_path) if output_path else index_path(csv_path)
    try:
        offsets = _record_offsets(csv_path, delimiter)
    except OSError as exc:
        raise CommandError(f"{csv_path}: {exc.strerror}") from exc
    with open(target, "wb") as out:
        for offset in offsets:
            out.write(_U64.pack(offset))
        out.write(_U64.pack(len(offsets)))
    return target


@dataclass
class RecordIndex:
    """Random access to the data records of an indexed CSV file."""

    csv_path: str
    offsets: list[int]
    delimiter: str = ","
    no_headers: bool = False

    def __len__(self) -> int:
        skip = 0 if self.no_headers else 1
        return max(0, len(self.offsets) - skip)

    def record_offset(self, i: int) -> int:
        """Byte offset of the i-th data record (0-based)."""
        if not 0 <= i < len(self):
            raise IndexError(f"record {i} out of range")
        return self.offsets[i + (0 if self.no_headers else 1)]

    def read_record(self, i: int) -> list[str]:
        """Parse and return the i-th data record."""
        offset = self.record_offset(i)
        with open(self.csv_path, "rb") as fh:
            fh.seek(offset)
            state = {"end": offset}
            reader = csv.reader(_decoded_lines(fh, state), delimiter=self.delimiter)
            for row in reader:
                if row:
                    if offset == 0 and row[0].startswith(_BOM):
                        row[0] = row[0][len(_BOM):]
                    return row
        raise CommandError(f"Could not read record {i} from {self.csv_path}.")


def open_index(
    csv_path: str, delimiter: str = ",", no_headers: bool = False
) -> RecordIndex | None:
    """Open the index beside ``csv_path``, or return None if there is none."""
    ipath = index_path(csv_path)
    if not ipath.exists():
        return None
    if os.path.getmtime(csv_path) > os.path.getmtime(ipath):
        raise CommandError(
            "The CSV file was modified after the index file. "
            "Please re-create the index."
        )
    data = ipath.read_bytes()
    if len(data) < _U64.size or len(data) % _U64.size:
        raise CommandError(f"Corrupt index file: {ipath}")
    values = [v for (v,) in _U64.iter_unpack(data)]
    offsets, count = values[:-1], values[-1]
    if count != len(offsets):
        raise CommandError(f"Corrupt index file: {ipath}")
    return RecordIndex(csv_path, offsets, delimiter, no_headers)


def run(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="index", description="Create an index of CSV data."
    )
    parser.add_argument("input")
    parser.add_argument("-o", "--output")
    parser.add_argument("-d", "--delimiter", type=parse_delimiter, default=",")
    args = parser.parse_args(argv)
    create_index(args.input, args.output, args.delimiter)