"""State behind the dashboard and course details screens.

Pages own a ``ViewScope``; responses that land after ``close()`` are dropped.
Local state only changes after the backend confirms a write.
"""

from __future__ import annotations

from typing import Optional, Union

from coursesphere.core.config import settings
from coursesphere.core.dates import DateLike
from coursesphere.core.listing import FilteredListing
from coursesphere.core.liveness import ViewScope, ensure_scope
from coursesphere.core.pagination import Page
from coursesphere.modules.auth.models import User
from coursesphere.modules.courses import ownership
from coursesphere.modules.courses.models import Course, CourseStatus
from coursesphere.modules.courses.query import CourseFilter, course_status, filter_courses
from coursesphere.modules.courses.service import CourseService, InstructorService, RosterUpdate
from coursesphere.modules.lessons.models import Lesson
from coursesphere.modules.lessons.query import LessonFilter, filter_lessons
from coursesphere.modules.lessons.service import LessonService
from coursesphere.schemas.user import NewUser
from coursesphere.validators.forms import validate_course_filter


class DashboardPage:
    def __init__(self, courses: CourseService, scope: Optional[ViewScope] = None):
        self.service = courses
        self.scope = ensure_scope(scope, "dashboard")
        self.courses: list[Course] = []
        self.course_filter = CourseFilter()
        self.loaded = False

    async def load(self) -> bool:
        return await self.scope.apply(self.service.list_my_courses(), self._set_courses)

    def _set_courses(self, courses: list[Course]) -> None:
        self.courses = courses
        self.loaded = True

    def set_filter(self, course_filter: CourseFilter) -> None:
        self.course_filter = validate_course_filter(course_filter)

    def clear_date_filters(self) -> None:
        self.course_filter = CourseFilter(search=self.course_filter.search)

    def visible(self) -> list[Course]:
        return filter_courses(self.courses, self.course_filter)

    def status_of(self, course: Course, now: Optional[DateLike] = None) -> CourseStatus:
        return course_status(course.start_date, course.end_date, now)

    def close(self) -> None:
        self.scope.close()


class CourseDetailsPage:
    """A course, its lessons (filtered and paginated) and what the user may do."""

    def __init__(
        self,
        course_id: str,
        courses: CourseService,
        lessons: LessonService,
        instructors: Optional[InstructorService] = None,
        page_size: Optional[int] = None,
        scope: Optional[ViewScope] = None,
    ):
        self.course_id = course_id
        self.courses = courses
        self.lessons = lessons
        self.instructors = instructors or InstructorService(courses.client, courses.identity, courses)
        self.identity = courses.identity
        self.scope = ensure_scope(scope, f"course:{course_id}")
        self.course: Optional[Course] = None
        self.listing: FilteredListing[Lesson, LessonFilter] = FilteredListing(
            [], filter_lessons, LessonFilter(), page_size or settings.LESSONS_PER_PAGE
        )

    @property
    def user_id(self) -> Optional[str]:
        user = self.identity.current_user
        return user.id if user else None

    async def load(self) -> bool:
        return await self.scope.apply(self._fetch(), self._set_loaded)

    async def _fetch(self) -> tuple[Course, list[Lesson]]:
        course = await self.courses.get_course(self.course_id)
        lessons = await self.lessons.list_lessons(self.course_id)
        return course, lessons

    def _set_loaded(self, loaded: tuple[Course, list[Lesson]]) -> None:
        self.course, lessons = loaded
        self.listing.set_items(lessons)

    def _require_course(self) -> Course:
        if self.course is None:
            raise RuntimeError("course details are not loaded")
        return self.course

    # Permissions
    @property
    def is_creator(self) -> bool:
        return self.course is not None and ownership.is_creator(self.user_id, self.course)

    @property
    def is_instructor(self) -> bool:
        return self.course is not None and ownership.is_member(self.user_id, self.course)

    @property
    def can_create_lesson(self) -> bool:
        return self.course is not None and ownership.can_create_lesson(self.user_id, self.course)

    @property
    def can_manage_instructors(self) -> bool:
        return self.course is not None and ownership.can_manage_instructors(self.user_id, self.course)

    def can_edit_lesson(self, lesson: Lesson) -> bool:
        return self.course is not None and ownership.can_edit_lesson(self.user_id, lesson, self.course)

    def status(self, now: Optional[DateLike] = None) -> CourseStatus:
        course = self._require_course()
        return course_status(course.start_date, course.end_date, now)

    # Lessons list
    def set_filter(self, lesson_filter: LessonFilter) -> None:
        self.listing.set_filter(lesson_filter)

    def set_page(self, page: int) -> int:
        return self.listing.set_page(page)

    def page(self) -> Page[Lesson]:
        return self.listing.current()

    async def delete_lesson(self, lesson: Lesson) -> bool:
        await self.lessons.delete_lesson(self._require_course(), lesson)
        if not self.scope.alive:
            return False
        self.listing.set_items([item for item in self.listing.items if item.id != lesson.id])
        return True

    # Roster
    async def add_instructor(self, candidate: Union[User, NewUser]) -> RosterUpdate:
        update = await self.instructors.add_instructor(self._require_course(), candidate)
        self._apply_roster(update)
        return update

    async def remove_instructor(self, instructor_id: str) -> RosterUpdate:
        update = await self.instructors.remove_instructor(self._require_course(), instructor_id)
        self._apply_roster(update)
        return update

    def _apply_roster(self, update: RosterUpdate) -> None:
        if self.scope.alive and update.changed:
            self.course = update.course

    def close(self) -> None:
        self.scope.close()
