"""Lesson filtering for the course details view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from coursesphere.modules.lessons.models import Lesson, LessonStatus

ALL_STATUSES = "all"


@dataclass(frozen=True)
class LessonFilter:
    search: str = ""
    status: Union[str, LessonStatus] = ALL_STATUSES

    def matches(self, lesson: Lesson) -> bool:
        if self.search and self.search.lower() not in lesson.title.lower():
            return False
        wanted = getattr(self.status, "value", self.status)
        if wanted != ALL_STATUSES and lesson.status.value != wanted:
            return False
        return True

    @property
    def is_active(self) -> bool:
        return bool(self.search) or self.status != ALL_STATUSES


def filter_lessons(lessons: Iterable[Lesson], lesson_filter: LessonFilter) -> list[Lesson]:
    return [lesson for lesson in lessons if lesson_filter.matches(lesson)]
