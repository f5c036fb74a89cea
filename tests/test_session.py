import sqlite3
from contextlib import closing

import pytest

from advising import (
    AdvisingSession,
    CourseIndex,
    CourseNotFoundError,
    CourseValidationError,
    CsvCourseSource,
    LoadError,
    NotLoadedError,
    SourceUnavailableError,
    SqliteCourseSource,
)


def test_course_lines_follow_sorted_codes(sample_csv):
    session = AdvisingSession(CsvCourseSource(sample_csv))

    assert session.load() == 5
    assert session.course_lines() == [
        "CSCI100: Introduction to Computer Science",
        "CSCI101: Introduction to Programming in C++",
        "CSCI200: Data Structures",
        "CSCI300: Introduction to Algorithms",
        "MATH201: Discrete Mathematics",
    ]


def test_describe_lists_prerequisites(sample_csv):
    session = AdvisingSession(CsvCourseSource(sample_csv))
    session.load()

    assert session.describe("csci300") == [
        "CSCI300: Introduction to Algorithms",
        "Prerequisites: CSCI200, MATH201",
    ]
    assert session.describe("MATH201")[1] == "Prerequisites: None"


def test_queries_before_load_fail(sample_csv):
    session = AdvisingSession(CsvCourseSource(sample_csv))

    with pytest.raises(NotLoadedError):
        session.course_lines()


def test_unavailable_source_keeps_previous_data(sample_csv, tmp_path):
    session = AdvisingSession(CsvCourseSource(sample_csv))
    session.load()

    with pytest.raises(SourceUnavailableError):
        session.load(CsvCourseSource(tmp_path / "missing.csv"))

    assert session.source.path == sample_csv
    assert session.describe("CSCI100")[0] == "CSCI100: Introduction to Computer Science"


def test_custom_source_becomes_current(sample_csv, make_database):
    database = make_database([("PHYS101", "Mechanics", "")])
    session = AdvisingSession(CsvCourseSource(sample_csv))
    session.load()

    assert session.load(SqliteCourseSource(database)) == 1
    assert isinstance(session.source, SqliteCourseSource)
    assert session.course_lines() == ["PHYS101: Mechanics"]
    with pytest.raises(CourseNotFoundError):
        session.describe("CSCI100")


def test_bad_row_surfaces_load_error_and_closes_file(write_csv, monkeypatch):
    path = write_csv(["CSCI100,Intro", "CSCI200"])
    opened = []
    real_open = type(path).open

    def tracking_open(self, *args, **kwargs):
        handle = real_open(self, *args, **kwargs)
        if self == path:
            opened.append(handle)
        return handle

    monkeypatch.setattr(type(path), "open", tracking_open)
    session = AdvisingSession(CsvCourseSource(path))

    with pytest.raises(LoadError, match="line 2"):
        session.load()

    assert opened and all(handle.closed for handle in opened)
    assert not session.index.loaded


def test_supplied_empty_index_is_the_one_loaded(sample_csv):
    index = CourseIndex()
    session = AdvisingSession(CsvCourseSource(sample_csv), index)

    session.load()

    assert session.index is index
    assert index.loaded
    assert len(index) == 5


def test_line_with_empty_code_fails_the_load(write_csv):
    session = AdvisingSession(CsvCourseSource(write_csv(["CSCI100,Intro", ",,"])))

    with pytest.raises(LoadError, match="Error on line 2") as excinfo:
        session.load()

    assert isinstance(excinfo.value.reason, CourseValidationError)


def test_undecodable_csv_leaves_index_empty(tmp_path):
    path = tmp_path / "broken.csv"
    good = "".join(f"CSCI{number},Course {number}\n" for number in range(2000))
    path.write_bytes(good.encode("utf-8") + b"CSCI9999,\xff\n")
    session = AdvisingSession(CsvCourseSource(path))

    with pytest.raises(SourceUnavailableError):
        session.load()

    assert not session.index.loaded
    assert len(session.index) == 0


def test_bad_database_row_closes_connection(make_database, monkeypatch):
    path = make_database([("CSCI100", "Intro", None), ("CSCI200", "", "CSCI100")])
    opened = []
    real_connect = sqlite3.connect

    def tracking_connect(*args, **kwargs):
        connection = real_connect(*args, **kwargs)
        opened.append(connection)
        return connection

    monkeypatch.setattr("advising.sources.sqlite3.connect", tracking_connect)
    session = AdvisingSession(SqliteCourseSource(path))

    with pytest.raises(LoadError, match="Error on row 2"):
        session.load()
    monkeypatch.undo()

    assert len(opened) == 1
    with pytest.raises(sqlite3.ProgrammingError):
        opened[0].execute("SELECT 1")

    with closing(sqlite3.connect(path)) as writer:
        writer.execute("BEGIN EXCLUSIVE")
        writer.execute("DELETE FROM courses")
        writer.commit()
    path.unlink()
    assert not path.exists()
