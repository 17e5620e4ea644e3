from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Optional, Union

from coursesphere.core.constants import DEFAULT_NEW_USER_PASSWORD
from coursesphere.core.logging import get_logger
from coursesphere.core.security import hash_for_storage
from coursesphere.integrations.api import ResourceClient
from coursesphere.modules.auth.models import User
from coursesphere.modules.auth.service import IdentityProvider
from coursesphere.modules.courses import ownership
from coursesphere.modules.courses.models import Course
from coursesphere.modules.courses.ownership import RosterOutcome, RosterResult
from coursesphere.modules.courses.query import CourseFilter, filter_courses
from coursesphere.schemas.course import CourseCreate, CourseUpdate
from coursesphere.schemas.user import NewUser
from coursesphere.validators.forms import validate_course, validate_course_filter, validate_course_update

logger = get_logger(__name__)


class CourseService:
    """Course operations over the REST backend for the logged-in user."""

    def __init__(self, client: ResourceClient, identity: IdentityProvider):
        self.client = client
        self.identity = identity

    async def get_course(self, course_id: str) -> Course:
        return Course.model_validate(await self.client.get(f"/courses/{course_id}"))

    async def count_lessons(self, course_id: str) -> int:
        lessons = await self.client.get("/lessons", params={"course_id": course_id})
        return len(lessons)

    async def list_my_courses(self) -> list[Course]:
        """Courses the user created or teaches, with a fresh ``lessons_count``."""
        user = self.identity.require_user()
        rows = await self.client.get("/courses")
        courses = [Course.model_validate(row) for row in rows]
        mine = [c for c in courses if ownership.is_member(user.id, c)]

        counts = await asyncio.gather(*(self.count_lessons(c.id) for c in mine))
        return [
            c.model_copy(update={"lessons_count": count})
            for c, count in zip(mine, counts)
        ]

    async def search_my_courses(self, course_filter: CourseFilter) -> list[Course]:
        validate_course_filter(course_filter)
        return filter_courses(await self.list_my_courses(), course_filter)

    async def create_course(self, form: CourseCreate) -> Course:
        """Create a course owned by the current user, who starts as its only instructor."""
        user = self.identity.require_user()
        validate_course(form)

        payload = {
            **form.model_dump(),
            "creator_id": user.id,
            "instructors": [user.id],
            "version": 1,
        }
        created = Course.model_validate(await self.client.post("/courses", payload))

        logger.info("course created", course_id=created.id, creator_id=user.id)
        return created

    async def update_course(self, course_id: str, form: CourseUpdate) -> Course:
        """Replace the course metadata (creator only).

        Date ordering is only enforced when the course is created.
        """
        user = self.identity.require_user()
        validate_course_update(form)

        course = await self.get_course(course_id)
        ownership.require(
            ownership.can_modify_course(user.id, course), "modify course", user.id, course.id
        )

        updated = course.model_copy(update=form.model_dump(exclude_unset=True, exclude_none=True))
        saved = Course.model_validate(
            await self.client.put(f"/courses/{course.id}", updated.to_payload())
        )
        logger.info("course updated", course_id=course.id, user_id=user.id)
        return saved

    async def delete_course(self, course_id: str) -> int:
        """Delete the course record (creator only) and return its orphaned lesson count.

        Lessons are not deleted with their course.
        """
        user = self.identity.require_user()
        course = await self.get_course(course_id)
        ownership.require(
            ownership.can_delete_course(user.id, course), "delete course", user.id, course.id
        )

        orphaned = await self.count_lessons(course.id)
        await self.client.delete(f"/courses/{course.id}")

        logger.info("course deleted", course_id=course.id, user_id=user.id)
        if orphaned:
            logger.warning("lessons left without a course", course_id=course.id, lessons=orphaned)
        return orphaned


@dataclass(frozen=True)
class RosterUpdate:
    result: RosterResult
    course: Course

    @property
    def changed(self) -> bool:
        return self.result.changed


class InstructorService:
    """Instructor roster management for a course's creator.

    Roster edits are read-modify-write over the whole course record. The
    course is re-read right before the write and sent back with its
    ``version``; the backend answers 409 (``ConflictError``) if another client
    wrote in between. Records without a version fall back to last write wins.
    """

    def __init__(self, client: ResourceClient, identity: IdentityProvider, courses: Optional[CourseService] = None):
        self.client = client
        self.identity = identity
        self.courses = courses or CourseService(client, identity)

    async def list_users(self) -> list[User]:
        return [User.model_validate(row) for row in await self.client.get("/users")]

    async def candidates(self, course: Course, search: str = "") -> list[User]:
        return ownership.instructor_candidates(await self.list_users(), course, search)

    async def add_instructor(self, course: Course, candidate: Union[User, NewUser]) -> RosterUpdate:
        user = self.identity.require_user()
        ownership.require(
            ownership.can_manage_instructors(user.id, course), "manage instructors", user.id, course.id
        )

        if isinstance(candidate, User):
            early = ownership.plan_add_instructor(course, candidate.id)
            if not early.changed:
                return self._rejected(early, course)
            instructor_id = candidate.id
        else:
            instructor_id = await self._ensure_user(candidate)

        current = await self.courses.get_course(course.id)
        plan = ownership.plan_add_instructor(current, instructor_id)
        if not plan.changed:
            return self._rejected(plan, current)
        return await self._write(current, plan)

    async def remove_instructor(self, course: Course, instructor_id: str) -> RosterUpdate:
        user = self.identity.require_user()
        ownership.require(
            ownership.can_manage_instructors(user.id, course), "manage instructors", user.id, course.id
        )

        early = ownership.plan_remove_instructor(course, instructor_id)
        if early.outcome is RosterOutcome.creator_protected:
            return self._rejected(early, course)

        current = await self.courses.get_course(course.id)
        plan = ownership.plan_remove_instructor(current, instructor_id)
        if not plan.changed:
            return self._rejected(plan, current)
        return await self._write(current, plan)

    async def _write(self, current: Course, plan: RosterResult) -> RosterUpdate:
        updated = current.model_copy(update={"instructors": list(plan.instructors)})
        saved = Course.model_validate(
            await self.client.put(f"/courses/{current.id}", updated.to_payload())
        )
        logger.info(
            "instructor roster updated",
            course_id=current.id,
            outcome=plan.outcome.value,
            instructor_id=plan.user_id,
        )
        return RosterUpdate(plan, saved)

    def _rejected(self, plan: RosterResult, course: Course) -> RosterUpdate:
        logger.warning(
            "instructor roster unchanged",
            course_id=course.id,
            outcome=plan.outcome.value,
            instructor_id=plan.user_id,
        )
        return RosterUpdate(plan, course)

    async def _ensure_user(self, candidate: NewUser) -> str:
        existing = await self.client.get("/users", params={"email": candidate.email})
        if existing:
            return User.model_validate(existing[0]).id

        payload = {
            "id": str(int(time.time() * 1000)),
            "name": candidate.name,
            "email": candidate.email,
            "password": hash_for_storage(DEFAULT_NEW_USER_PASSWORD),
        }
        created = User.model_validate(await self.client.post("/users", payload))
        logger.info("user created for roster", user_id=created.id, email=created.email)
        return created.id
