import pytest

from qcsv import flatten as flatten_mod
from qcsv.flatten import condense, flatten


@pytest.fixture
def infile(tmp_path):
    path = tmp_path / "in.csv"
    path.write_text("h1,h2\nabcdef,ghijkl\nmnopqr,stuvwx\n", encoding="utf-8")
    return str(path)


def _run(capsys, argv):
    flatten_mod.run(argv)
    return capsys.readouterr().out.strip("\r\n")


def test_flatten_basic(infile, capsys):
    expected = "h1  abcdef\nh2  ghijkl\n#\nh1  mnopqr\nh2  stuvwx"
    assert _run(capsys, [infile]) == expected


def test_flatten_no_headers(infile, capsys):
    expected = (
        "0   h1\n1   h2\n#\n0   abcdef\n1   ghijkl\n#\n0   mnopqr\n1   stuvwx"
    )
    assert _run(capsys, [infile, "--no-headers"]) == expected


def test_flatten_separator(infile, capsys):
    expected = "h1  abcdef\nh2  ghijkl\n!mysep!\nh1  mnopqr\nh2  stuvwx"
    assert _run(capsys, [infile, "--separator", "!mysep!"]) == expected


def test_flatten_condense(infile, capsys):
    expected = "h1  ab...\nh2  gh...\n#\nh1  mn...\nh2  st..."
    assert _run(capsys, [infile, "--condense", "2"]) == expected


def test_condense_short_value_untouched():
    assert condense("ab", 2) == "ab"
    assert condense("abc", None) == "abc"