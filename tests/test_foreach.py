import pytest

from qcsv.csvio import CommandError
from qcsv.foreach import run, split_command


@pytest.fixture
def datafile(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("name\nJohn\nMary\n", encoding="utf-8")
    return path


def test_foreach(datafile, capfd):
    run(["name", "echo 'NAME = {}'", str(datafile)])
    out = capfd.readouterr().out
    assert out.splitlines() == ["NAME = John", "NAME = Mary"]


def test_foreach_unify(datafile, capfd):
    run(["name", "echo 'name,value\n{},1'", "--unify", str(datafile)])
    out = capfd.readouterr().out
    assert out.splitlines() == ["name,value", "John,1", "Mary,1"]


def test_foreach_new_column(datafile, capfd):
    run([
        "name",
        "echo 'name,value\n{},1'",
        "--unify",
        "--new-column",
        "current_value",
        str(datafile),
    ])
    out = capfd.readouterr().out
    assert out.splitlines() == [
        "name,value,current_value",
        "John,1,John",
        "Mary,1,Mary",
    ]


def test_split_command_substitutes_value():
    assert split_command("search --year 2020 {}", "query") == [
        "search",
        "--year",
        "2020",
        "query",
    ]


def test_split_command_strips_quotes_from_args():
    assert split_command("""cmd "a b" `c d` 'e'""", "") == ["cmd", "a b", "c d", "e"]


def test_split_command_keeps_program_as_is():
    assert split_command("'echo' {}", "x") == ["'echo'", "x"]


def test_split_command_empty_raises():
    with pytest.raises(CommandError):
        split_command("{}", "")


def test_unknown_column_raises(datafile):
    with pytest.raises(CommandError):
        run(["missing", "echo {}", str(datafile)])