"""Convert newline-delimited JSON into CSV."""

from __future__ import annotations

import argparse
import json
import sys
from contextlib import contextmanager
from typing import IO, Any, Iterator, Sequence

from qcsv.csvio import CommandError, WriterConfig


def _collect_paths(value: Any, headers: list[list[str]], path: list[str]) -> None:
    if not isinstance(value, dict):
        headers.append(["value"])
        return
    for key, item in value.items():
        if isinstance(item, dict):
            _collect_paths(item, headers, [*path, key])
        else:
            headers.append([*path, key])


def infer_headers(value: Any) -> list[list[str]]:
    """Return the key path of every leaf in a JSON document."""
    headers: list[list[str]] = []
    _collect_paths(value, headers, [])
    return headers


def get_value_at_path(value: Any, path: Sequence[str]) -> Any:
    """Follow object keys along ``path``; None if the path does not exist."""
    current = value
    for key in path:
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def _compact(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _field(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ",".join(_compact(item) for item in value)
    return ""


def json_line_to_csv_record(value: Any, headers: Sequence[Sequence[str]]) -> list[str]:
    """Render a JSON document as one CSV record following ``headers``."""
    return [_field(get_value_at_path(value, path)) for path in headers]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid constant {name}")


@contextmanager
def _open_input(path: str | None) -> Iterator[IO[str]]:
    if path is None or path == "-":
        yield sys.stdin
        return
    try:
        fh = open(path, encoding="utf-8")
    except OSError as exc:
        raise CommandError(f"{path}: {exc.strerror}") from exc
    with fh:
        yield fh


def run(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="jsonl", description="Convert newline-delimited JSON to CSV."
    )
    parser.add_argument("input", nargs="?")
    parser.add_argument("-o", "--output")
    args = parser.parse_args(argv)

    headers: list[list[str]] | None = None
    with _open_input(args.input) as src, WriterConfig(args.output).open() as wtr:
        for line in src:
            try:
                value = json.loads(line, parse_constant=_reject_constant)
            except ValueError as exc:
                raise CommandError("Could not parse line as JSON!") from exc
            if headers is None:
                headers = infer_headers(value)
                wtr.writerow([".".join(path) for path in headers])
            wtr.writerow(json_line_to_csv_record(value, headers))