"""Uniform random sampling of CSV records."""

from __future__ import annotations

import argparse
import random
from typing import Iterable, Sequence, TypeVar

from qcsv.csvio import CommandError, ReaderConfig, WriterConfig, parse_delimiter
from qcsv.index import RecordIndex, open_index

T = TypeVar("T")


def sample_reservoir(
    records: Iterable[T], sample_size: int, seed: int | None = None
) -> list[T]:
    """Draw up to ``sample_size`` records uniformly in one pass."""
    rng = random.Random(seed)
    reservoir: list[T] = []
    for i, record in enumerate(records):
        if i < sample_size:
            reservoir.append(record)
            continue
        slot = rng.randrange(i + 1)
        if slot < sample_size:
            reservoir[slot] = record
    return reservoir


def sample_random_access(index: RecordIndex, sample_size: int) -> list[list[str]]:
    """Draw distinct records by reading them directly through an index."""
    positions = list(range(len(index)))
    random.shuffle(positions)
    return [index.read_record(i) for i in positions[:sample_size]]


def do_random_access(sample_size: int, total: int) -> bool:
    """Whether the sample is small enough (at most 10%) to read by index."""
    return sample_size <= total // 10


def _as_count(size: float) -> int:
    return max(0, int(size))


def _first_row(config: ReaderConfig) -> list[str]:
    rows = ReaderConfig(config.path, config.delimiter, no_headers=True).records()
    try:
        return next(rows, [])
    finally:
        rows.close()


def _reservoir_from(
    config: ReaderConfig, size: int, seed: int | None
) -> tuple[list[str], list[list[str]]]:
    rows = ReaderConfig(config.path, config.delimiter, no_headers=True).records()
    headers = [] if config.no_headers else next(rows, [])
    return headers, sample_reservoir(rows, size, seed)


def run(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="sample", description="Randomly sample CSV data."
    )
    parser.add_argument("sample_size", type=float)
    parser.add_argument("input", nargs="?")
    parser.add_argument("--seed", type=int)
    parser.add_argument("-o", "--output")
    parser.add_argument("-n", "--no-headers", action="store_true")
    parser.add_argument("-d", "--delimiter", type=parse_delimiter, default=",")
    args = parser.parse_args(argv)

    config = ReaderConfig(args.input, args.delimiter, args.no_headers)
    sample_size = args.sample_size
    index = None
    if args.input is not None and args.input != "-":
        index = open_index(args.input, args.delimiter, args.no_headers)

    if index is not None:
        total = len(index)
        if sample_size < 1.0:
            sample_size *= total
        size = _as_count(sample_size)
        if args.seed is None and do_random_access(size, total):
            headers = [] if args.no_headers else _first_row(config)
            sampled = sample_random_access(index, size)
        else:
            headers, sampled = _reservoir_from(config, size, args.seed)
    else:
        if sample_size < 1.0:
            raise CommandError("Percentage sampling requires an index.")
        headers, sampled = _reservoir_from(config, _as_count(sample_size), args.seed)

    with WriterConfig(args.output).open() as wtr:
        if not args.no_headers and headers:
            wtr.writerow(headers)
        wtr.writerows(sampled)