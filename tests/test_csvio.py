import io

import pytest

from qcsv.csvio import (
    CommandError,
    QuoteStyle,
    ReaderConfig,
    WriterConfig,
    parse_delimiter,
)


def test_parse_delimiter_tab_escape():
    assert parse_delimiter(r"\t") == "\t"
    assert parse_delimiter(";") == ";"


def test_parse_delimiter_rejects_long():
    with pytest.raises(CommandError):
        parse_delimiter("ab")


def _write(rows, **kw):
    buf = io.StringIO()
    WriterConfig(**kw).writer(buf).writerows(rows)
    return buf.getvalue()


def test_round_trip_tricky_fields(tmp_path):
    rows = [["h1", "h2"], ['a "q"', "x,y"], ["line\nbreak", ""]]
    path = tmp_path / "d.csv"
    path.write_text(_write(rows), encoding="utf-8", newline="")
    headers, data = ReaderConfig(str(path)).read()
    assert headers == rows[0]
    assert data == rows[1:]


def test_no_headers_keeps_first_row(tmp_path):
    path = tmp_path / "d.csv"
    path.write_text("a,b\nc,d\n", encoding="utf-8")
    headers, data = ReaderConfig(str(path), no_headers=True).read()
    assert headers == ["a", "b"]
    assert data == [["a", "b"], ["c", "d"]]
    assert list(ReaderConfig(str(path)).records()) == [["c", "d"]]


def test_bom_is_stripped(tmp_path):
    path = tmp_path / "d.csv"
    path.write_text("\ufeffh1\nv\n", encoding="utf-8")
    headers, data = ReaderConfig(str(path)).read()
    assert headers == ["h1"]
    assert data == [["v"]]


def test_quote_always():
    assert _write([["a", "b"]], quote_style=QuoteStyle.ALWAYS) == '"a","b"\n'


def test_quote_never_writes_raw():
    assert _write([["a,b", "c"]], quote_style=QuoteStyle.NEVER) == "a,b,c\n"


def test_escape_instead_of_doubling(tmp_path):
    text = _write([['say "hi"']], escape="\\", double_quote=False)
    path = tmp_path / "d.csv"
    path.write_text(text, encoding="utf-8")
    cfg = ReaderConfig(str(path), no_headers=True, escape="\\", double_quote=False)
    assert cfg.read()[1] == [['say "hi"']]


def test_missing_file_raises():
    with pytest.raises(CommandError):
        ReaderConfig("/nonexistent/nowhere.csv").read()