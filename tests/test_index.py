import os
import struct

import pytest

from qcsv import index as index_mod
from qcsv.csvio import CommandError, ReaderConfig
from qcsv.index import create_index, index_path, open_index


@pytest.fixture
def csvfile(tmp_path):
    path = tmp_path / "in.csv"
    path.write_text('h1,h2\na,b\n"multi\nline",c\n\ne,f\n', encoding="utf-8")
    return str(path)


def test_index_path_appends_suffix():
    assert str(index_path("data.csv")) == "data.csv.idx"


def test_records_match_reader(csvfile):
    index_mod.run([csvfile])
    idx = open_index(csvfile)
    expected = list(ReaderConfig(csvfile).records())
    assert len(idx) == len(expected)
    assert [idx.read_record(i) for i in range(len(idx))] == expected


def test_no_headers_includes_first(csvfile):
    create_index(csvfile)
    idx = open_index(csvfile, no_headers=True)
    assert idx.read_record(0) == ["h1", "h2"]
    assert idx.record_offset(0) == 0


def test_file_layout(csvfile):
    target = create_index(csvfile)
    data = target.read_bytes()
    count = struct.unpack(">Q", data[-8:])[0]
    assert len(data) == 8 * (count + 1)


def test_missing_index_is_none(csvfile):
    assert open_index(csvfile) is None


def test_stale_index_raises(csvfile):
    target = create_index(csvfile)
    old = os.path.getmtime(target) - 100
    os.utime(target, (old, old))
    with pytest.raises(CommandError):
        open_index(csvfile)


def test_out_of_range(csvfile):
    create_index(csvfile)
    idx = open_index(csvfile)
    with pytest.raises(IndexError):
        idx.read_record(len(idx))