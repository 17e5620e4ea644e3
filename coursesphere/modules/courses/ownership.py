"""Ownership and permission rules for courses and lessons.

Everything here is pure: a user id and records in, a decision out. The same
functions can back a server-side guard; today they only drive the client, and
the backend accepts any write, so a passing check is not a security boundary.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Optional

from coursesphere.core.exceptions import PermissionDenied
from coursesphere.modules.courses.models import Course, CourseRole
from coursesphere.modules.lessons.models import Lesson


def role(user_id: Optional[str], course: Course) -> CourseRole:
    if not user_id:
        return CourseRole.none
    if user_id == course.creator_id:
        return CourseRole.creator
    if user_id in course.instructors:
        return CourseRole.instructor
    return CourseRole.none


def is_creator(user_id: Optional[str], course: Course) -> bool:
    return role(user_id, course) is CourseRole.creator


def is_member(user_id: Optional[str], course: Course) -> bool:
    """Creator or instructor: the courses a user sees on the dashboard."""
    return role(user_id, course) is not CourseRole.none


def can_modify_course(user_id: Optional[str], course: Course) -> bool:
    return is_creator(user_id, course)


def can_manage_instructors(user_id: Optional[str], course: Course) -> bool:
    return is_creator(user_id, course)


def can_delete_course(user_id: Optional[str], course: Course) -> bool:
    return is_creator(user_id, course)


def can_create_lesson(user_id: Optional[str], course: Course) -> bool:
    return role(user_id, course) in (CourseRole.creator, CourseRole.instructor)


def can_edit_lesson(user_id: Optional[str], lesson: Lesson, course: Course) -> bool:
    # Union of lesson authorship and course creatorship, not a role check:
    # an instructor cannot edit another instructor's lesson.
    if not user_id:
        return False
    return user_id == lesson.creator_id or user_id == course.creator_id


def can_delete_lesson(user_id: Optional[str], lesson: Lesson, course: Course) -> bool:
    return can_edit_lesson(user_id, lesson, course)


def require(allowed: bool, action: str, user_id: Optional[str], resource_id: Optional[str] = None) -> None:
    if not allowed:
        raise PermissionDenied(action, user_id=user_id, resource_id=resource_id)


class RosterOutcome(str, enum.Enum):
    added = "added"
    removed = "removed"
    already_instructor = "already_instructor"
    creator_protected = "creator_protected"
    not_instructor = "not_instructor"


@dataclass(frozen=True)
class RosterResult:
    """Outcome of a roster change, with the resulting instructor list."""

    outcome: RosterOutcome
    user_id: str
    instructors: tuple[str, ...]

    @property
    def changed(self) -> bool:
        return self.outcome in (RosterOutcome.added, RosterOutcome.removed)


def plan_add_instructor(course: Course, user_id: str) -> RosterResult:
    """Append ``user_id`` to the roster, or report that it is already there."""
    current = tuple(course.instructors)
    if user_id in current:
        return RosterResult(RosterOutcome.already_instructor, user_id, current)
    return RosterResult(RosterOutcome.added, user_id, current + (user_id,))


def plan_remove_instructor(course: Course, user_id: str) -> RosterResult:
    """Drop ``user_id`` from the roster. The creator can never be removed."""
    current = tuple(course.instructors)
    if user_id == course.creator_id:
        return RosterResult(RosterOutcome.creator_protected, user_id, current)
    if user_id not in current:
        return RosterResult(RosterOutcome.not_instructor, user_id, current)
    return RosterResult(
        RosterOutcome.removed,
        user_id,
        tuple(i for i in current if i != user_id),
    )


def instructor_candidates(users: Iterable, course: Course, search: str = "") -> list:
    """Users matching ``search`` by name who are not yet instructors."""
    needle = search.lower()
    return [
        u for u in users
        if needle in u.name.lower() and u.id not in course.instructors
    ]
