"""Course advising toolkit: load course records and query them by code."""

from .errors import (
    AdvisingError,
    CourseNotFoundError,
    CourseValidationError,
    EmptyCatalogError,
    LoadError,
    NotLoadedError,
    RowParseError,
    SourceUnavailableError,
)
from .index import CourseIndex
from .record import CourseRecord
from .session import AdvisingSession
from .sources import CsvCourseSource, RawRow, SqliteCourseSource, parse_row, source_for_path
from .writer import CourseWriter

__all__ = [
    "AdvisingError",
    "AdvisingSession",
    "CourseIndex",
    "CourseNotFoundError",
    "CourseRecord",
    "CourseValidationError",
    "CourseWriter",
    "CsvCourseSource",
    "EmptyCatalogError",
    "LoadError",
    "NotLoadedError",
    "RawRow",
    "RowParseError",
    "SourceUnavailableError",
    "SqliteCourseSource",
    "parse_row",
    "source_for_path",
]
