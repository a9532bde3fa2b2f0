"""Helpers for the files a flow imports and the reports it writes.

This module centralises file handling shared by the import and output steps.
Every helper opens its file, uses it fully and closes it before returning.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

INVALID_FILENAME_CHARS = '\\/:*?"<>|'


def is_valid_filename(name: str) -> bool:
    """Return True when *name* is usable as a plain file name.

    Path separators, wildcards and the other reserved characters are
    rejected, as are empty names and names made only of spaces or tabs.
    """

    if any(ch in INVALID_FILENAME_CHARS for ch in name):
        return False
    if not name.strip(" \t"):
        return False
    return True


def ensure_suffix(name: str, suffix: str) -> str:
    """Append *suffix* unless the text after the last dot already equals it."""

    pos = name.rfind(".")
    if pos == -1 or name[pos:] != suffix:
        return name + suffix
    return name


def read_text_lines(path: Path) -> list[str]:
    """Return the lines of the text file at *path* without line endings."""

    with open(path, encoding="utf-8") as fh:
        return fh.read().splitlines()


def read_csv_rows(path: Path) -> list[list[str]]:
    """Return every row of the CSV file at *path*, header included.

    Cells are split on every comma; quote characters are kept as text.
    """

    with open(path, newline="", encoding="utf-8") as fh:
        reader = csv.reader(fh, quoting=csv.QUOTE_NONE)
        return [row for row in reader]


def resolve_report_path(path: Path) -> Path:
    """Return a path for a new report that does not overwrite anything.

    A ``.txt`` suffix is added when missing. While the name is taken, a
    counter prefix is tried on the same base name: ``0_name.txt``,
    ``1_name.txt`` and so on.
    """

    path = Path(path)
    path = path.with_name(ensure_suffix(path.name, ".txt"))
    if not path.exists():
        return path
    counter = 0
    while True:
        candidate = path.with_name(f"{counter}_{path.name}")
        if not candidate.exists():
            return candidate
        counter += 1


def write_report(path: Path, title: str, description: str, lines: Iterable[str]) -> None:
    """Write a report: two header lines, two blank lines, then *lines*."""

    with open(path, "w", encoding="utf-8") as fh:
        fh.write(f"Title of the output file: {title}\n")
        fh.write(f"Description of the output file: {description}\n")
        fh.write("\n\n")
        for line in lines:
            fh.write(f"{line}\n")
