"""The advising session: one course index plus the source it loads from."""

from __future__ import annotations

import logging
from typing import List, Optional

from .index import CourseIndex
from .sources import CourseSource

LOGGER = logging.getLogger(__name__)


class AdvisingSession:
    """Owns the course index and answers the menu's queries against it."""

    def __init__(self, source: CourseSource, index: Optional[CourseIndex] = None) -> None:
        self.source = source
        self.index = index if index is not None else CourseIndex()

    def load(self, source: Optional[CourseSource] = None) -> int:
        """Bulk load from `source` (or the current source) and return the course count.

        A custom source becomes the current one once it loads successfully.
        """
        target = source or self.source
        LOGGER.info("Loading courses from %s", target)
        with target.open() as rows:
            count = self.index.bulk_load(rows)
        self.source = target
        return count

    def course_lines(self) -> List[str]:
        lines = []
        for code in self.index.sorted_codes():
            course = self.index.get(code)
            lines.append(f"{course.code}: {course.title}")
        return lines

    def describe(self, code: str) -> List[str]:
        course = self.index.get(code)
        return [
            f"{course.code}: {course.title}",
            f"Prerequisites: {course.prerequisite_text()}",
        ]
