"""Failure kinds raised while loading and querying the course index.

Everything derives from `AdvisingError` so the menu and CLI can report any of
them with a single `except` clause.
"""

from __future__ import annotations


class AdvisingError(Exception):
    """Base class for every advising failure."""


class CourseValidationError(AdvisingError, ValueError):
    """A course record is missing its code or title."""


class RowParseError(AdvisingError, ValueError):
    """A raw row is structurally malformed (e.g. fewer than two fields)."""


class SourceUnavailableError(AdvisingError):
    """The CSV file or database could not be opened or queried."""


class LoadError(AdvisingError):
    """A row failed to parse during a bulk load.

    `label` names what `position` counts: "line" for files, "row" for query results.
    """

    def __init__(self, position: int, reason: Exception, label: str = "line") -> None:
        self.position = position
        self.reason = reason
        self.label = label
        super().__init__(f"Error on {label} {position}: {reason}")


class NotLoadedError(AdvisingError, RuntimeError):
    def __init__(self) -> None:
        super().__init__("No data loaded.")


class CourseNotFoundError(AdvisingError, LookupError):
    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Course not found: {code}")


class EmptyCatalogError(AdvisingError, ValueError):
    """An export was asked to write no course records."""
