from __future__ import annotations

import sqlite3
from contextlib import closing
from pathlib import Path

import pytest

SAMPLE_LINES = [
    "CSCI100,Introduction to Computer Science",
    "CSCI101,Introduction to Programming in C++,CSCI100",
    "CSCI200,Data Structures,CSCI101",
    "MATH201,Discrete Mathematics",
    "CSCI300,Introduction to Algorithms,CSCI200,MATH201",
]


@pytest.fixture
def write_csv(tmp_path: Path):
    def _write(lines, name: str = "courses.csv") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_csv(write_csv) -> Path:
    return write_csv(SAMPLE_LINES)


@pytest.fixture
def make_database(tmp_path: Path):
    def _make(rows, name: str = "ABCU.db") -> Path:
        path = tmp_path / name
        with closing(sqlite3.connect(path)) as connection:
            with connection:
                connection.execute("CREATE TABLE courses (code TEXT, title TEXT, prerequisites TEXT)")
                connection.executemany("INSERT INTO courses VALUES (?, ?, ?)", rows)
        return path

    return _make
