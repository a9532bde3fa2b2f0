import pytest

from flowmaker.collectors.files import (
    ensure_suffix,
    is_valid_filename,
    read_csv_rows,
    read_text_lines,
    resolve_report_path,
    write_report,
)


@pytest.mark.parametrize("name", ["report", "my report.txt", "data_2024.csv", " padded "])
def test_valid_filenames(name):
    assert is_valid_filename(name)


@pytest.mark.parametrize(
    "name", ["", "   ", "\t", "a/b", "a\\b", "c:x", "what?", "*.txt", 'q"', "<x>", "a|b"]
)
def test_invalid_filenames(name):
    assert not is_valid_filename(name)


@pytest.mark.parametrize(
    "name, suffix, expected",
    [
        ("notes", ".txt", "notes.txt"),
        ("notes.txt", ".txt", "notes.txt"),
        ("data.csv", ".txt", "data.csv.txt"),
        ("data", ".csv", "data.csv"),
        ("archive.tar.csv", ".csv", "archive.tar.csv"),
    ],
)
def test_ensure_suffix(name, suffix, expected):
    assert ensure_suffix(name, suffix) == expected


def test_resolve_report_path_free_name(tmp_path):
    assert resolve_report_path(tmp_path / "report") == tmp_path / "report.txt"


def test_resolve_report_path_counts_up(tmp_path):
    (tmp_path / "report.txt").touch()
    (tmp_path / "0_report.txt").touch()
    assert resolve_report_path(tmp_path / "report.txt") == tmp_path / "1_report.txt"


def test_write_report_layout(tmp_path):
    path = tmp_path / "r.txt"
    write_report(path, "T", "D", ["one", "two"])
    assert path.read_text(encoding="utf-8") == (
        "Title of the output file: T\n"
        "Description of the output file: D\n"
        "\n\n"
        "one\n"
        "two\n"
    )


def test_readers(tmp_path):
    text = tmp_path / "a.txt"
    text.write_text("x\ny\n", encoding="utf-8")
    assert read_text_lines(text) == ["x", "y"]

    table = tmp_path / "a.csv"
    table.write_text("h1,h2\n1,2\n\n3\n", encoding="utf-8")
    assert read_csv_rows(table) == [["h1", "h2"], ["1", "2"], [], ["3"]]

    with pytest.raises(OSError):
        read_text_lines(tmp_path / "missing.txt")


def test_csv_rows_split_on_every_comma(tmp_path):
    table = tmp_path / "quoted.csv"
    table.write_text('"a,b",c\n', encoding="utf-8")
    assert read_csv_rows(table) == [['"a', 'b"', "c"]]
