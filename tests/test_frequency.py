import csv
from collections import Counter
from unittest.mock import patch

import pytest

from qcsv.csvio import CommandError
from qcsv.frequency import counts, frequency_tables, njobs, run, trim
from qcsv.index import create_index

DATA = "h1,h2\na,z\na,y\na,y\nb,z\n,z\n(NULL),x\n"


@pytest.fixture
def infile(tmp_path):
    path = tmp_path / "in.csv"
    path.write_text(DATA, encoding="utf-8")
    return path


def _run(tmp_path, *args):
    out = tmp_path / "out.csv"
    run([*args, "-o", str(out)])
    with open(out, encoding="utf-8", newline="") as fh:
        return [row for row in csv.reader(fh)]


def test_frequency_no_headers(tmp_path, infile):
    got = _run(tmp_path, str(infile), "--limit", "0", "--select", "1", "--no-headers")
    got = sorted(got[1:])
    assert got == [
        ["1", "(NULL)", "1"],
        ["1", "(NULL)", "1"],
        ["1", "a", "3"],
        ["1", "b", "1"],
        ["1", "h1", "1"],
    ]


def test_frequency_no_nulls(tmp_path, infile):
    got = sorted(_run(tmp_path, str(infile), "--no-nulls", "--limit", "0", "--select", "h1"))
    assert got == [
        ["field", "value", "count"],
        ["h1", "(NULL)", "1"],
        ["h1", "a", "3"],
        ["h1", "b", "1"],
    ]


def test_frequency_nulls(tmp_path, infile):
    got = sorted(_run(tmp_path, str(infile), "--limit", "0", "--select", "h1"))
    assert got == [
        ["field", "value", "count"],
        ["h1", "(NULL)", "1"],
        ["h1", "(NULL)", "1"],
        ["h1", "a", "3"],
        ["h1", "b", "1"],
    ]


def test_frequency_limit(tmp_path, infile):
    got = sorted(_run(tmp_path, str(infile), "--limit", "1"))
    assert got == [
        ["field", "value", "count"],
        ["h1", "a", "3"],
        ["h2", "z", "3"],
    ]


def test_frequency_asc(tmp_path, infile):
    got = sorted(_run(tmp_path, str(infile), "--limit", "1", "--select", "h2", "--asc"))
    assert got == [["field", "value", "count"], ["h2", "x", "1"]]


def test_frequency_select(tmp_path, infile):
    got = sorted(_run(tmp_path, str(infile), "--limit", "0", "--select", "h2"))
    assert got == [
        ["field", "value", "count"],
        ["h2", "x", "1"],
        ["h2", "y", "2"],
        ["h2", "z", "3"],
    ]


def test_frequency_bom_does_not_fail(tmp_path):
    path = tmp_path / "in.csv"
    path.write_text('\ufeff\n""\n', encoding="utf-8")
    got = _run(tmp_path, str(path), "-j", "4", "--limit", "0")
    assert got[0] == ["field", "value", "count"]


def test_frequency_indexed_matches_sequential(tmp_path, infile):
    plain = sorted(_run(tmp_path, str(infile), "--limit", "0", "-j", "1"))
    create_index(str(infile))
    with patch("os.cpu_count", return_value=4):
        indexed = sorted(_run(tmp_path, str(infile), "--limit", "0", "-j", "4"))
    assert indexed == plain


def test_frequency_indexed_values(tmp_path, infile):
    create_index(str(infile))
    with patch("os.cpu_count", return_value=4):
        got = sorted(_run(tmp_path, str(infile), "--limit", "0", "-j", "4", "-s", "h2"))
    assert got == [
        ["field", "value", "count"],
        ["h2", "x", "1"],
        ["h2", "y", "2"],
        ["h2", "z", "3"],
    ]


def test_frequency_empty_input(tmp_path):
    path = tmp_path / "in.csv"
    path.write_text("", encoding="utf-8")
    assert _run(tmp_path, str(path)) == [["field", "value", "count"]]


def test_unknown_column_raises(tmp_path, infile):
    with pytest.raises(CommandError):
        _run(tmp_path, str(infile), "--select", "nope")


def test_trim():
    assert trim("  a b \t") == "a b"


def test_frequency_tables_trims_and_counts_nulls():
    rows = [["a", " x "], ["a", ""], ["b", "x"]]
    tables = frequency_tables(rows, [0, 1])
    assert tables[0] == Counter({"a": 2, "b": 1})
    assert tables[1] == Counter({"x": 2, "": 1})


def test_frequency_tables_no_nulls():
    tables = frequency_tables([["", "1"], [" ", "1"]], [0], no_nulls=True)
    assert tables == [Counter()]


def test_counts_descending_and_null_label():
    table = Counter({"a": 3, "": 1, "b": 2})
    assert counts(table) == [("a", 3), ("b", 2), ("(NULL)", 1)]


def test_counts_ascending_with_limit():
    table = Counter({"a": 3, "c": 1, "b": 2})
    assert counts(table, ascending=True, limit=2) == [("c", 1), ("b", 2)]


@pytest.mark.parametrize(
    "jobs, expected",
    [(0, 2), (-1, 6), (10, 6), (3, 3), (1, 1)],
)
def test_njobs(jobs, expected):
    with patch("os.cpu_count", return_value=6):
        assert njobs(jobs) == expected