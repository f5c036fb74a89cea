"""Immutable course records.

`CourseRecord` is the only shape a course takes once it leaves a data source;
it validates itself, so a record missing its code or title never exists.
"""

from __future__ import annotations

from typing import Iterable, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator

from .errors import CourseValidationError


class CourseRecord(BaseModel):
    """One course: its code, display title and prerequisite codes."""

    model_config = ConfigDict(frozen=True)

    code: str
    title: str
    prerequisites: Tuple[str, ...] = ()

    @field_validator("code", "title")
    @classmethod
    def _require_text(cls, value: str, info: ValidationInfo) -> str:
        if not value:
            raise ValueError(f"{info.field_name} is missing")
        return value

    @classmethod
    def create(cls, code: str, title: str, prerequisites: Iterable[str] = ()) -> "CourseRecord":
        """Build a record, raising `CourseValidationError` for an empty code or title."""
        try:
            return cls(code=code, title=title, prerequisites=tuple(prerequisites))
        except ValidationError as exc:
            missing = ", ".join(str(error["loc"][0]) for error in exc.errors() if error["loc"])
            raise CourseValidationError(
                f"Invalid course data: {missing or 'record'} is missing or invalid."
            ) from exc

    def prerequisite_text(self, placeholder: str = "None") -> str:
        """Comma-separated prerequisites, or `placeholder` when there are none."""
        return ", ".join(self.prerequisites) if self.prerequisites else placeholder
