"""Course filtering and derived course status."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from coursesphere.core.dates import DateLike, to_datetime, utc_now
from coursesphere.modules.courses.models import COURSE_STATUS_LABELS, Course, CourseStatus


def course_status(start_date: DateLike, end_date: DateLike, now: Optional[DateLike] = None) -> CourseStatus:
    """Status of a course at ``now``; recomputed on every call."""
    current = to_datetime(now) if now is not None else utc_now()
    if current < to_datetime(start_date):
        return CourseStatus.upcoming
    if current > to_datetime(end_date):
        return CourseStatus.finished
    return CourseStatus.in_progress


def course_status_label(course: Course, now: Optional[DateLike] = None) -> str:
    return COURSE_STATUS_LABELS[course_status(course.start_date, course.end_date, now)]


@dataclass(frozen=True)
class CourseFilter:
    """Dashboard filters. Unset fields match everything; set fields are ANDed."""

    search: str = ""
    start_from: Optional[DateLike] = None
    end_until: Optional[DateLike] = None

    def matches(self, course: Course) -> bool:
        if self.search:
            needle = self.search.lower()
            if needle not in course.name.lower() and needle not in course.description.lower():
                return False
        if self.start_from and to_datetime(course.start_date) < to_datetime(self.start_from):
            return False
        if self.end_until and to_datetime(course.end_date) > to_datetime(self.end_until):
            return False
        return True

    @property
    def is_active(self) -> bool:
        return bool(self.search or self.start_from or self.end_until)


def filter_courses(courses: Iterable[Course], course_filter: CourseFilter) -> list[Course]:
    """Return matching courses in their original order; the input is not modified."""
    return [c for c in courses if course_filter.matches(c)]
