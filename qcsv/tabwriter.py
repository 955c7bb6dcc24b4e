"""Elastic tabstop alignment of tab-separated lines."""

from __future__ import annotations

from typing import Sequence


def align_columns(
    lines: Sequence[str], min_width: int = 2, padding: int = 2
) -> list[str]:
    """Align tab-separated cells into columns.

    A column is aligned across each run of consecutive lines that have a
    tab-terminated cell in that column; the last cell of a line is not padded.
    """
    rows = [line.split("\t") for line in lines]
    widths = [[0] * (len(row) - 1) for row in rows]
    max_cols = max((len(row) - 1 for row in rows), default=0)

    for col in range(max_cols):
        block: list[int] = []
        for i, row in enumerate(rows + [[]]):
            if len(row) - 1 > col:
                block.append(i)
                continue
            if block:
                width = max(min_width, max(len(rows[j][col]) for j in block)) + padding
                for j in block:
                    widths[j][col] = width
                block = []

    return [
        "".join(cell.ljust(w) for cell, w in zip(row, ws)) + row[-1]
        for row, ws in zip(rows, widths)
    ]