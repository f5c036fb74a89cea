"""Raw row producers for the course index.

Both sources open their backing store inside `open()`, so an unavailable file or
database is reported before any loaded data is discarded. Swap in another source
by yielding `RawRow` objects from an `open()` context manager; the index does
not care where rows come from.
"""

from __future__ import annotations

import csv
import logging
import sqlite3
from contextlib import closing, contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Tuple, Union

from .errors import RowParseError, SourceUnavailableError
from .record import CourseRecord

LOGGER = logging.getLogger(__name__)

COURSE_QUERY = "SELECT code, title, prerequisites FROM courses"
PREREQUISITE_DELIMITER = ","
SQLITE_SUFFIXES = (".db", ".sqlite", ".sqlite3")


@dataclass(slots=True)
class RawRow:
    """Unparsed fields of one record plus its 1-based position in the source."""

    position: int
    fields: Tuple[str, ...]
    label: str = "line"


def parse_row(row: RawRow) -> CourseRecord:
    """Turn a raw row into a `CourseRecord`.

    Field 1 is the code, field 2 the title, and any remaining non-empty fields
    are prerequisite codes.
    """
    fields = [field.strip() for field in row.fields]
    if len(fields) < 2:
        raise RowParseError("Malformed line: expected at least a code and a title.")

    code, title, *rest = fields
    prerequisites = [prereq for prereq in rest if prereq]
    return CourseRecord.create(code, title, prerequisites)


def _text(value: object) -> str:
    # NULL columns read as empty strings; numeric codes keep their digits.
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def split_prerequisites(text: str | None) -> Tuple[str, ...]:
    if not text:
        return ()
    return tuple(text.split(PREREQUISITE_DELIMITER))


class CsvCourseSource:
    """Reads `code,title,prereq,...` lines from a headerless CSV file."""

    def __init__(self, path: Union[Path, str], *, encoding: str = "utf-8-sig") -> None:
        self.path = Path(path)
        self.encoding = encoding

    @contextmanager
    def open(self) -> Iterator[Iterator[RawRow]]:
        try:
            handle = self.path.open("r", encoding=self.encoding, newline="")
        except OSError as exc:
            raise SourceUnavailableError(f"Could not open file: {self.path}") from exc

        with handle:
            LOGGER.debug("Reading course rows from %s", self.path)
            yield self._rows(handle)

    def _rows(self, handle) -> Iterator[RawRow]:
        reader = csv.reader(handle)
        try:
            for fields in reader:
                if not fields:
                    continue
                yield RawRow(position=reader.line_num, fields=tuple(fields))
        except (csv.Error, UnicodeDecodeError) as exc:
            raise SourceUnavailableError(
                f"Could not read {self.path} after line {reader.line_num}: {exc}"
            ) from exc

    def __str__(self) -> str:
        return str(self.path)


class SqliteCourseSource:
    """Reads course rows from the `courses` table of a SQLite database."""

    def __init__(self, path: Union[Path, str], *, query: str = COURSE_QUERY) -> None:
        self.path = Path(path)
        self.query = query

    @contextmanager
    def open(self) -> Iterator[Iterator[RawRow]]:
        # mode=ro stops sqlite3 from creating an empty database for a bad path.
        uri = f"{self.path.resolve().as_uri()}?mode=ro"
        try:
            connection = sqlite3.connect(uri, uri=True)
        except sqlite3.Error as exc:
            raise SourceUnavailableError(f"Could not open database: {self.path}") from exc

        with closing(connection):
            try:
                cursor = connection.execute(self.query)
            except sqlite3.Error as exc:
                raise SourceUnavailableError(f"Failed to query database {self.path}: {exc}") from exc

            LOGGER.debug("Reading course rows from %s", self.path)
            with closing(cursor):
                yield self._rows(cursor)

    def _rows(self, cursor: sqlite3.Cursor) -> Iterator[RawRow]:
        position = 0
        try:
            for position, (code, title, prerequisites) in enumerate(cursor, start=1):
                fields = (_text(code), _text(title), *split_prerequisites(_text(prerequisites)))
                yield RawRow(position=position, fields=fields, label="row")
        except sqlite3.Error as exc:
            raise SourceUnavailableError(
                f"Could not read {self.path} after row {position}: {exc}"
            ) from exc

    def __str__(self) -> str:
        return str(self.path)


CourseSource = Union[CsvCourseSource, SqliteCourseSource]


def source_for_path(path: Union[Path, str]) -> CourseSource:
    """Pick the SQLite source for database suffixes and the CSV source otherwise."""
    path = Path(path)
    if path.suffix.lower() in SQLITE_SUFFIXES:
        return SqliteCourseSource(path)
    return CsvCourseSource(path)
