from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from coursesphere.modules._ids import coerce_id


class CourseRole(str, enum.Enum):
    creator = "creator"
    instructor = "instructor"
    none = "none"


class CourseStatus(str, enum.Enum):
    """Derived from the course dates at query time, never stored."""

    upcoming = "upcoming"
    in_progress = "in progress"
    finished = "finished"


COURSE_STATUS_LABELS = {
    CourseStatus.upcoming: "Upcoming",
    CourseStatus.in_progress: "In progress",
    CourseStatus.finished: "Finished",
}


class Course(BaseModel):
    """A course record from the ``/courses`` collection.

    ``creator_id`` is always a member of ``instructors``. ``version`` is
    optional; when present the backend uses it for conditional updates.
    """

    id: str
    name: str
    description: str = ""
    start_date: str
    end_date: str
    creator_id: str
    instructors: list[str] = Field(default_factory=list)
    lessons_count: int = 0
    version: Optional[int] = None

    model_config = ConfigDict(extra="allow")

    @field_validator("id", "creator_id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        return coerce_id(value)

    @field_validator("description", mode="before")
    @classmethod
    def _description_or_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("instructors", mode="before")
    @classmethod
    def _instructors_as_str(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [coerce_id(v) for v in value]
        return value

    def to_payload(self) -> dict[str, Any]:
        """Full record for a PUT (there is no partial update)."""
        return self.model_dump(mode="json", exclude_none=True)
