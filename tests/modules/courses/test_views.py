"""Tests for the dashboard and course details page state."""

import asyncio

import pytest

from coursesphere.core.exceptions import ValidationError
from coursesphere.core.liveness import ViewScope
from coursesphere.modules.courses.models import CourseStatus
from coursesphere.modules.courses.query import CourseFilter
from coursesphere.modules.courses.service import CourseService
from coursesphere.modules.courses.views import CourseDetailsPage, DashboardPage
from coursesphere.modules.lessons.query import LessonFilter
from coursesphere.modules.lessons.service import LessonService


def details_page(api, identity, course_id="1", page_size=2, scope=None):
    return CourseDetailsPage(
        course_id,
        CourseService(api, identity),
        LessonService(api, identity),
        page_size=page_size,
        scope=scope,
    )


class TestDashboard:
    def test_load_and_filter(self, api, bruno):
        """The dashboard loads courses and applies the filter."""
        page = DashboardPage(CourseService(api, bruno))

        assert asyncio.run(page.load())
        page.set_filter(CourseFilter(search="python"))

        assert [c.id for c in page.visible()] == ["1"]

    def test_clear_date_filters_keeps_search(self, api, bruno):
        """Clearing date filters keeps the search text."""
        page = DashboardPage(CourseService(api, bruno))
        page.set_filter(CourseFilter(search="sql", start_from="2025-02-01"))

        page.clear_date_filters()

        assert page.course_filter == CourseFilter(search="sql")

    def test_invalid_filter_keeps_previous(self, api, bruno):
        """A filter with a bad date bound is rejected and the old one stays."""
        page = DashboardPage(CourseService(api, bruno))
        page.set_filter(CourseFilter(search="sql"))

        with pytest.raises(ValidationError):
            page.set_filter(CourseFilter(end_until="2025-02-30"))

        assert page.course_filter == CourseFilter(search="sql")

    def test_status(self, api, ana):
        """Dashboard status is derived from the course dates."""
        page = DashboardPage(CourseService(api, ana))
        asyncio.run(page.load())

        assert page.status_of(page.courses[0], now="2025-03-01") is CourseStatus.in_progress

    def test_result_after_close_is_discarded(self, api, ana):
        """A closed dashboard ignores loaded courses."""
        page = DashboardPage(CourseService(api, ana))
        page.close()

        assert not asyncio.run(page.load())
        assert page.courses == []
        assert not page.loaded


class TestCourseDetails:
    def test_permissions_for_instructor(self, api, bruno):
        """Instructors see lesson creation but not management."""
        page = details_page(api, bruno)
        asyncio.run(page.load())

        assert not page.is_creator
        assert page.is_instructor
        assert page.can_create_lesson
        assert not page.can_manage_instructors
        lessons = {lesson.id: lesson for lesson in page.listing.items}
        assert page.can_edit_lesson(lessons["2"])
        assert not page.can_edit_lesson(lessons["1"])

    def test_paging_and_filter_reset(self, api, ana):
        """Lesson pages clamp and reset when the filter changes."""
        page = details_page(api, ana)
        asyncio.run(page.load())

        assert page.listing.total_pages == 2
        assert page.set_page(9) == 2
        assert [lesson.id for lesson in page.page().items] == ["3"]

        page.set_filter(LessonFilter(status="draft"))

        assert page.listing.page == 1
        assert [lesson.id for lesson in page.page().items] == ["2"]

    def test_delete_lesson_updates_list_after_confirmation(self, api, ana, repo):
        """A deleted lesson leaves the list once confirmed."""
        page = details_page(api, ana)
        asyncio.run(page.load())
        lesson = page.listing.items[0]

        assert asyncio.run(page.delete_lesson(lesson))
        assert lesson.id not in [item.id for item in page.listing.items]
        assert repo.get("lessons", lesson.id) is None

    def test_roster_change_applies_to_open_page(self, api, ana):
        """Roster changes update the open course."""
        page = details_page(api, ana)
        asyncio.run(page.load())

        update = asyncio.run(page.remove_instructor("2"))

        assert update.changed
        assert page.course.instructors == ["1"]

    def test_closed_page_ignores_load(self, api, ana):
        """A closed details page ignores the load result."""
        scope = ViewScope("details")
        page = details_page(api, ana, scope=scope)
        scope.close()

        assert not asyncio.run(page.load())
        assert page.course is None
        assert page.listing.items == []
