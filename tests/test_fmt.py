import pytest

from qcsv import fmt
from qcsv.csvio import ReaderConfig

ROWS = [["h1", "h2"], ["a", "b c"], ["d", "e"]]


@pytest.fixture
def infile(tmp_path):
    path = tmp_path / "in.csv"
    path.write_text("".join(",".join(r) + "\n" for r in ROWS), encoding="utf-8")
    return str(path)


def test_out_delimiter_round_trip(infile, tmp_path):
    out = tmp_path / "out.csv"
    fmt.run([infile, "-t", ";", "-o", str(out)])
    cfg = ReaderConfig(str(out), delimiter=";", no_headers=True)
    assert cfg.read()[1] == ROWS


def test_crlf(infile, tmp_path):
    out = tmp_path / "out.csv"
    fmt.run([infile, "--crlf", "-o", str(out)])
    data = out.read_bytes()
    assert data.count(b"\r\n") == len(ROWS)


def test_ascii_separators(infile, capsys):
    fmt.run([infile, "--ascii"])
    out = capsys.readouterr().out
    records = [r.split("\x1f") for r in out.split("\x1e") if r]
    assert records == ROWS


def test_quote_always(infile, capsys):
    fmt.run([infile, "--quote-always"])
    first = capsys.readouterr().out.splitlines()[0]
    assert first == '"h1","h2"'