from qcsv import reverse
from qcsv.csvio import ReaderConfig

ROWS = [["h"], ["1"], ["2"], ["3"]]


def _setup(tmp_path):
    src = tmp_path / "in.csv"
    src.write_text("".join(r[0] + "\n" for r in ROWS), encoding="utf-8")
    return src, tmp_path / "out.csv"


def _read(path):
    return ReaderConfig(str(path), no_headers=True).read()[1]


def test_reverse_keeps_header(tmp_path):
    src, out = _setup(tmp_path)
    reverse.run([str(src), "-o", str(out)])
    assert _read(out) == [ROWS[0]] + ROWS[:0:-1]


def test_reverse_no_headers(tmp_path):
    src, out = _setup(tmp_path)
    reverse.run([str(src), "-n", "-o", str(out)])
    assert _read(out) == ROWS[::-1]


def test_double_reverse_is_identity(tmp_path):
    src, out = _setup(tmp_path)
    reverse.run([str(src), "-o", str(out)])
    again = tmp_path / "again.csv"
    reverse.run([str(out), "-o", str(again)])
    assert _read(again) == ROWS