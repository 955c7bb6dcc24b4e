"""Command-line entry point that dispatches to the CSV subcommands."""

from __future__ import annotations

import sys
from typing import Callable, Sequence

from qcsv import (
    flatten,
    fmt,
    foreach,
    frequency,
    headers,
    index,
    input_cmd,
    join,
    jsonl,
    partition,
    pseudo,
    rename,
    replace,
    reverse,
    sample,
)
from qcsv.csvio import CommandError

Runner = Callable[[Sequence[str]], None]

COMMANDS: dict[str, tuple[Runner, str]] = {
    "flatten": (flatten.run, "Show one field per line"),
    "fmt": (fmt.run, "Format CSV output (change field delimiter)"),
    "foreach": (foreach.run, "Loop over a CSV file to execute bash commands"),
    "frequency": (frequency.run, "Show frequency tables"),
    "headers": (headers.run, "Show header names"),
    "index": (index.run, "Create CSV index for faster access"),
    "input": (input_cmd.run, "Read CSV data with special quoting rules"),
    "join": (join.run, "Join CSV files"),
    "jsonl": (jsonl.run, "Convert newline-delimited JSON files to CSV"),
    "partition": (partition.run, "Partition CSV data based on a column value"),
    "pseudo": (pseudo.run, "Pseudonymise the values of a column"),
    "rename": (rename.run, "Rename the columns of CSV data efficiently"),
    "replace": (replace.run, "Replace patterns in CSV data"),
    "reverse": (reverse.run, "Reverse rows of CSV data"),
    "sample": (sample.run, "Randomly sample CSV data"),
}


def _usage() -> str:
    width = max(len(name) for name in COMMANDS)
    lines = [
        "Usage:",
        "    qcsv <command> [<args>...]",
        "    qcsv --help",
        "",
        "Commands:",
    ]
    lines += [
        f"    {name.ljust(width)}  {summary}"
        for name, (_, summary) in sorted(COMMANDS.items())
    ]
    return "\n".join(lines) + "\n"


def main(argv: Sequence[str] | None = None) -> int:
    """Run the subcommand named by the first argument; return an exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        sys.stderr.write(_usage())
        return 1
    name, rest = args[0], args[1:]
    if name in ("-h", "--help"):
        sys.stdout.write(_usage())
        return 0
    entry = COMMANDS.get(name)
    if entry is None:
        sys.stderr.write(f"Unknown command '{name}'.\n\n{_usage()}")
        return 1
    runner, _ = entry
    try:
        runner(rest)
    except CommandError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    except SystemExit as exc:
        if exc.code is None:
            return 0
        return exc.code if isinstance(exc.code, int) else 1
    except BrokenPipeError:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())