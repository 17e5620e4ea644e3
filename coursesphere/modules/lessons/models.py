from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from coursesphere.modules._ids import coerce_id


class LessonStatus(str, enum.Enum):
    draft = "draft"
    published = "published"
    archived = "archived"


LESSON_STATUS_LABELS = {
    LessonStatus.published: "Published",
    LessonStatus.draft: "Draft",
    LessonStatus.archived: "Archived",
}


class Lesson(BaseModel):
    """A lesson record from the ``/lessons`` collection."""

    id: str
    title: str
    status: LessonStatus
    publish_date: str
    video_url: str
    course_id: str
    creator_id: str

    model_config = ConfigDict(extra="allow")

    @field_validator("id", "course_id", "creator_id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        return coerce_id(value)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def lesson_status_label(status: Any) -> str:
    try:
        return LESSON_STATUS_LABELS[LessonStatus(status)]
    except ValueError:
        return "Undefined"
