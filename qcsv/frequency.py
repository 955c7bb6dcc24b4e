"""Exact frequency tables for the columns of CSV data."""

from __future__ import annotations

import argparse
import csv
import os
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Iterator, Sequence

from qcsv.csvio import CommandError, ReaderConfig, WriterConfig, parse_delimiter
from qcsv.index import RecordIndex, open_index
from qcsv.selection import parse_selection

NULL_LABEL = "(NULL)"
_BOM = "\ufeff"


def trim(value: str) -> str:
    """Strip leading and trailing whitespace."""
    return value.strip()


def frequency_tables(
    rows: Iterable[Sequence[str]], columns: Sequence[int], no_nulls: bool = False
) -> list[Counter[str]]:
    """Count the trimmed values of each selected column.

    Empty values are counted as '' unless ``no_nulls`` is set.
    """
    tables: list[Counter[str]] = [Counter() for _ in columns]
    for row in rows:
        for table, col in zip(tables, columns):
            if col >= len(row):
                continue
            value = trim(row[col])
            if value or not no_nulls:
                table[value] += 1
    return tables


def counts(
    table: Counter[str], ascending: bool = False, limit: int = 0
) -> list[tuple[str, int]]:
    """Order a table by count and cut it to ``limit`` entries (0 for all).

    Empty values are reported as '(NULL)'.
    """
    ordered = sorted(table.items(), key=lambda kv: kv[1], reverse=not ascending)
    if limit > 0:
        ordered = ordered[:limit]
    return [(value if value else NULL_LABEL, count) for value, count in ordered]


def njobs(jobs: int) -> int:
    """Resolve the --jobs value against the number of CPUs."""
    num_cpus = os.cpu_count() or 1
    if jobs == 0:
        return max(1, num_cpus // 3)
    if jobs < 0 or jobs > num_cpus:
        return num_cpus
    return jobs


def _lines_from(path: str, offset: int) -> Iterator[str]:
    with open(path, "rb") as fh:
        fh.seek(offset)
        for raw in fh:
            line = raw.decode("utf-8", "surrogateescape")
            if offset == 0 and line.startswith(_BOM):
                line = line[len(_BOM):]
            offset = -1
            yield line


def _read_chunk(index: RecordIndex, start: int, size: int) -> list[list[str]]:
    rows: list[list[str]] = []
    reader = csv.reader(
        _lines_from(index.csv_path, index.record_offset(start)),
        delimiter=index.delimiter,
    )
    try:
        for row in reader:
            if not row:
                continue
            rows.append(row)
            if len(rows) >= size:
                break
    except csv.Error as exc:
        raise CommandError(f"CSV parse error: {exc}") from exc
    return rows


def _merge(parts: Iterable[list[Counter[str]]], width: int) -> list[Counter[str]]:
    merged: list[Counter[str]] = [Counter() for _ in range(width)]
    for part in parts:
        for total, table in zip(merged, part):
            total.update(table)
    return merged


def _first_row(config: ReaderConfig) -> list[str]:
    rows = ReaderConfig(config.path, config.delimiter, no_headers=True).records()
    try:
        return next(rows, [])
    finally:
        rows.close()


def _parallel(
    config: ReaderConfig,
    index: RecordIndex,
    select: str,
    no_nulls: bool,
    jobs: int,
) -> tuple[list[str], list[Counter[str]]]:
    first = _first_row(config)
    columns = parse_selection(select).selection(first, not config.no_headers)
    names = [first[i] for i in columns]
    total = len(index)
    if total == 0:
        return names, []
    chunk_size = -(-total // jobs)
    starts = range(0, total, chunk_size)

    def work(start: int) -> list[Counter[str]]:
        rows = _read_chunk(index, start, min(chunk_size, total - start))
        return frequency_tables(rows, columns, no_nulls)

    with ThreadPoolExecutor(max_workers=jobs) as pool:
        return names, _merge(pool.map(work, starts), len(columns))


def _sequential(
    config: ReaderConfig, select: str, no_nulls: bool
) -> tuple[list[str], list[Counter[str]]]:
    first, rows = config.read()
    columns = parse_selection(select).selection(first, not config.no_headers)
    names = [first[i] for i in columns]
    return names, frequency_tables(rows, columns, no_nulls)


def run(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="frequency", description="Compute a frequency table on CSV data."
    )
    parser.add_argument("input", nargs="?")
    parser.add_argument("-s", "--select", default="")
    parser.add_argument("-l", "--limit", type=int, default=10)
    parser.add_argument("-a", "--asc", action="store_true")
    parser.add_argument("--no-nulls", action="store_true")
    parser.add_argument("-j", "--jobs", type=int, default=0)
    parser.add_argument("-o", "--output")
    parser.add_argument("-n", "--no-headers", action="store_true")
    parser.add_argument("-d", "--delimiter", type=parse_delimiter, default=",")
    args = parser.parse_args(argv)

    config = ReaderConfig(args.input, args.delimiter, args.no_headers)
    index = None
    if args.input is not None and args.input != "-":
        index = open_index(args.input, args.delimiter, args.no_headers)
    jobs = njobs(args.jobs)
    if index is not None and jobs > 1:
        names, tables = _parallel(config, index, args.select, args.no_nulls, jobs)
    else:
        names, tables = _sequential(config, args.select, args.no_nulls)

    with WriterConfig(args.output).open() as wtr:
        wtr.writerow(["field", "value", "count"])
        for i, (name, table) in enumerate(zip(names, tables)):
            label = str(i + 1) if args.no_headers else name
            for value, count in counts(table, args.asc, args.limit):
                wtr.writerow([label, value, str(count)])