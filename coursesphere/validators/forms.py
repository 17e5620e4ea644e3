"""Client-side form validation.

Each validator raises ``ValidationError`` on the first failing rule, before
any request is made.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from coursesphere.core.constants import (
    EMAIL_PATTERN,
    MAX_COURSE_DESCRIPTION_CHARS,
    MIN_COURSE_NAME_CHARS,
    MIN_LESSON_TITLE_CHARS,
    MIN_PASSWORD_CHARS,
    VIDEO_URL_PATTERN,
)
from coursesphere.core.dates import to_datetime, utc_now
from coursesphere.core.exceptions import ValidationError
from coursesphere.modules.courses.query import CourseFilter
from coursesphere.modules.lessons.models import LessonStatus
from coursesphere.schemas.course import CourseCreate, CourseUpdate
from coursesphere.schemas.lesson import LessonForm
from coursesphere.schemas.user import Credentials

_EMAIL_RE = re.compile(EMAIL_PATTERN)
_VIDEO_URL_RE = re.compile(VIDEO_URL_PATTERN)


def validate_credentials(form: Credentials) -> Credentials:
    if not form.email or not form.password:
        raise ValidationError("credentials", "email and password are required")
    if not _EMAIL_RE.search(form.email):
        raise ValidationError("email", "must be a valid email address")
    if len(form.password) < MIN_PASSWORD_CHARS:
        raise ValidationError("password", f"must have at least {MIN_PASSWORD_CHARS} characters")
    return form


def validate_course(form: CourseCreate) -> CourseCreate:
    _validate_course_text(form.name, form.description)
    if not form.start_date or not form.end_date:
        raise ValidationError("start_date", "start and end dates are required")
    start = _parse(form.start_date, "start_date")
    end = _parse(form.end_date, "end_date")
    if start >= end:
        raise ValidationError("end_date", "must be after the start date")
    return form


def validate_course_update(form: CourseUpdate) -> CourseUpdate:
    """Checks only the fields being changed. Date ordering is not re-checked."""
    _validate_course_text(form.name, form.description)
    for field in ("start_date", "end_date"):
        value = getattr(form, field)
        if value is not None:
            _parse(value, field)
    return form


def _validate_course_text(name: Optional[str], description: Optional[str]) -> None:
    if name is not None and len(name) < MIN_COURSE_NAME_CHARS:
        raise ValidationError("name", f"must have at least {MIN_COURSE_NAME_CHARS} characters")
    if description is not None and len(description) > MAX_COURSE_DESCRIPTION_CHARS:
        raise ValidationError(
            "description", f"must have at most {MAX_COURSE_DESCRIPTION_CHARS} characters"
        )


def validate_lesson(form: LessonForm, now: Optional[datetime] = None) -> LessonForm:
    if len(form.title) < MIN_LESSON_TITLE_CHARS:
        raise ValidationError("title", f"must have at least {MIN_LESSON_TITLE_CHARS} characters")
    if not form.status:
        raise ValidationError("status", "is required")
    try:
        LessonStatus(form.status)
    except ValueError:
        raise ValidationError("status", f"unknown status {form.status!r}")
    if not form.publish_date:
        raise ValidationError("publish_date", "must be in the future")
    current = to_datetime(now) if now is not None else utc_now()
    if _parse(form.publish_date, "publish_date") <= current:
        raise ValidationError("publish_date", "must be in the future")
    if not _VIDEO_URL_RE.search(form.video_url):
        raise ValidationError("video_url", "invalid video URL")
    return form


def _parse(value: str, field: str) -> datetime:
    try:
        return to_datetime(value)
    except (TypeError, ValueError):
        raise ValidationError(field, f"invalid date {value!r}")


def validate_course_filter(course_filter: CourseFilter) -> CourseFilter:
    """Date bounds must parse; an unset bound matches everything."""
    for field in ("start_from", "end_until"):
        value = getattr(course_filter, field)
        if value:
            _parse(value, field)
    return course_filter
