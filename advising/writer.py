"""Output helpers for loaded course records.

`write_sqlite` produces the `courses` table that `SqliteCourseSource` reads, and
`write_csv` produces the headerless format that `CsvCourseSource` reads.
"""

from __future__ import annotations

import csv
import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Iterable, List

from .errors import EmptyCatalogError
from .index import normalize_code
from .record import CourseRecord
from .sources import PREREQUISITE_DELIMITER

LOGGER = logging.getLogger(__name__)

COURSES_SCHEMA = "CREATE TABLE courses (code TEXT NOT NULL, title TEXT NOT NULL, prerequisites TEXT)"


class CourseWriter:
    """Persist course records and produce a lightweight catalog report."""

    def __init__(self, *, encoding: str = "utf-8", newline: str = "") -> None:
        self.encoding = encoding
        self.newline = newline

    def write_csv(self, records: Iterable[CourseRecord], destination: Path | str) -> Path:
        records = self._require_records(records)
        path = Path(destination)
        path.parent.mkdir(parents=True, exist_ok=True)

        with path.open("w", encoding=self.encoding, newline=self.newline) as handle:
            writer = csv.writer(handle)
            for record in records:
                writer.writerow([record.code, record.title, *record.prerequisites])

        LOGGER.info("Wrote %d course rows to %s", len(records), path)
        return path

    def write_sqlite(self, records: Iterable[CourseRecord], destination: Path | str) -> Path:
        """Replace the `courses` table in `destination` with `records`."""
        records = self._require_records(records)
        path = Path(destination)
        path.parent.mkdir(parents=True, exist_ok=True)

        with closing(sqlite3.connect(path)) as connection:
            with connection:
                connection.execute("DROP TABLE IF EXISTS courses")
                connection.execute(COURSES_SCHEMA)
                connection.executemany(
                    "INSERT INTO courses (code, title, prerequisites) VALUES (?, ?, ?)",
                    [
                        (record.code, record.title, PREREQUISITE_DELIMITER.join(record.prerequisites))
                        for record in records
                    ],
                )

        LOGGER.info("Wrote %d course rows to %s", len(records), path)
        return path

    @staticmethod
    def build_catalog_report(records: Iterable[CourseRecord]) -> dict:
        """Count prerequisite coverage and list prerequisites naming unknown courses."""
        records = list(records)
        known = {normalize_code(record.code) for record in records}
        with_prereqs = sum(1 for record in records if record.prerequisites)

        unresolved = sorted(
            {
                normalize_code(prereq)
                for record in records
                for prereq in record.prerequisites
                if normalize_code(prereq) not in known
            }
        )

        return {
            "total_courses": len(records),
            "with_prerequisites": with_prereqs,
            "without_prerequisites": len(records) - with_prereqs,
            "unresolved_prerequisites": unresolved,
        }

    @staticmethod
    def _require_records(records: Iterable[CourseRecord]) -> List[CourseRecord]:
        records = list(records)
        if not records:
            raise EmptyCatalogError("No course records were provided for export")
        return records
