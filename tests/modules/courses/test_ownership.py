"""Tests for course roles, permissions and roster planning."""

import pytest

from coursesphere.core.exceptions import PermissionDenied
from coursesphere.modules.auth.models import User
from coursesphere.modules.courses import ownership
from coursesphere.modules.courses.models import Course, CourseRole
from coursesphere.modules.courses.ownership import RosterOutcome
from coursesphere.modules.lessons.models import Lesson
from tests.conftest import make_lesson


def course(creator_id="1", instructors=("1", "2")):
    return Course(
        id="10",
        name="Course",
        description="",
        start_date="2025-01-01",
        end_date="2025-06-01",
        creator_id=creator_id,
        instructors=list(instructors),
    )


class TestRole:
    @pytest.mark.parametrize("creator_id", ["1", "7", "abc"])
    def test_creator_role_for_creator_id(self, creator_id):
        """The creator id always has the creator role."""
        c = course(creator_id=creator_id, instructors=(creator_id,))

        assert ownership.role(c.creator_id, c) is CourseRole.creator
        assert c.creator_id in c.instructors

    def test_instructor_role(self):
        """Listed instructors have the instructor role."""
        assert ownership.role("2", course()) is CourseRole.instructor

    def test_no_role(self):
        """Other users have no role."""
        assert ownership.role("3", course()) is CourseRole.none

    def test_missing_user_has_no_role(self):
        """A missing user id has no role."""
        assert ownership.role(None, course()) is CourseRole.none
        assert ownership.role("", course()) is CourseRole.none

    def test_numeric_ids_compare_as_strings(self):
        """Numeric and string ids compare equal."""
        c = Course.model_validate(
            {
                "id": 5,
                "name": "Course",
                "start_date": "2025-01-01",
                "end_date": "2025-06-01",
                "creator_id": 1,
                "instructors": [1, 2],
            }
        )

        assert ownership.role("1", c) is CourseRole.creator
        assert ownership.role("2", c) is CourseRole.instructor


class TestCoursePermissions:
    def test_only_creator_manages_course(self):
        """Only the creator may modify, manage or delete a course."""
        c = course()

        assert ownership.can_modify_course("1", c)
        assert ownership.can_manage_instructors("1", c)
        assert ownership.can_delete_course("1", c)
        for user_id in ("2", "3"):
            assert not ownership.can_modify_course(user_id, c)
            assert not ownership.can_manage_instructors(user_id, c)
            assert not ownership.can_delete_course(user_id, c)

    def test_creator_and_instructors_create_lessons(self):
        """Creator and instructors may create lessons."""
        c = course()

        assert ownership.can_create_lesson("1", c)
        assert ownership.can_create_lesson("2", c)
        assert not ownership.can_create_lesson("3", c)

    def test_require_raises_permission_denied(self):
        """require raises PermissionDenied when not allowed."""
        with pytest.raises(PermissionDenied) as exc:
            ownership.require(False, "manage instructors", "3", "10")

        assert exc.value.action == "manage instructors"
        assert exc.value.user_id == "3"

    def test_require_passes_when_allowed(self):
        """require passes silently when allowed."""
        ownership.require(True, "anything", "1")


class TestLessonPermissions:
    def test_lesson_author_and_course_creator_can_edit(self):
        """Lesson author and course creator may edit, others may not."""
        c = course(creator_id="U2", instructors=("U2", "U1", "U3"))
        lesson = Lesson.model_validate(make_lesson(1, course_id="10", creator_id="U1"))

        assert ownership.can_edit_lesson("U1", lesson, c)
        assert ownership.can_edit_lesson("U2", lesson, c)
        assert not ownership.can_edit_lesson("U3", lesson, c)

    def test_delete_follows_edit_rule(self):
        """Deleting a lesson follows the edit rule."""
        c = course(creator_id="U2", instructors=("U2", "U1"))
        lesson = Lesson.model_validate(make_lesson(1, course_id="10", creator_id="U1"))

        assert ownership.can_delete_lesson("U1", lesson, c)
        assert ownership.can_delete_lesson("U2", lesson, c)
        assert not ownership.can_delete_lesson("U9", lesson, c)

    def test_anonymous_cannot_edit(self):
        """Anonymous users cannot edit lessons."""
        lesson = Lesson.model_validate(make_lesson(1, creator_id="1"))

        assert not ownership.can_edit_lesson(None, lesson, course())


class TestRosterPlanning:
    def test_remove_creator_is_protected(self):
        """The creator cannot be removed from the roster."""
        c = course()

        result = ownership.plan_remove_instructor(c, "1")

        assert result.outcome is RosterOutcome.creator_protected
        assert not result.changed
        assert result.instructors == ("1", "2")

    def test_remove_instructor(self):
        """Removing an instructor drops only that id."""
        result = ownership.plan_remove_instructor(course(instructors=("1", "2", "4")), "2")

        assert result.outcome is RosterOutcome.removed
        assert "2" not in result.instructors
        assert result.instructors == ("1", "4")

    def test_remove_unknown_instructor_is_noop(self):
        """Removing a non-instructor changes nothing."""
        result = ownership.plan_remove_instructor(course(), "9")

        assert result.outcome is RosterOutcome.not_instructor
        assert result.instructors == ("1", "2")

    def test_add_existing_instructor_is_noop(self):
        """Adding a current instructor changes nothing."""
        result = ownership.plan_add_instructor(course(), "2")

        assert result.outcome is RosterOutcome.already_instructor
        assert not result.changed
        assert result.instructors == ("1", "2")

    def test_add_appends_without_reordering(self):
        """Adding appends and keeps existing order."""
        result = ownership.plan_add_instructor(course(instructors=("1", "5", "2")), "3")

        assert result.outcome is RosterOutcome.added
        assert result.instructors == ("1", "5", "2", "3")

    def test_plans_do_not_mutate_course(self):
        """Roster plans leave the course untouched."""
        c = course()

        ownership.plan_add_instructor(c, "3")
        ownership.plan_remove_instructor(c, "2")

        assert c.instructors == ["1", "2"]


class TestInstructorCandidates:
    def test_excludes_current_instructors_and_matches_name(self):
        """Candidates match by name and skip current instructors."""
        users = [
            User(id="1", name="Ana Souza", email="ana@test.com"),
            User(id="3", name="Carla Mendes", email="carla@test.com"),
            User(id="4", name="Carlos Silva", email="carlos@test.com"),
        ]

        result = ownership.instructor_candidates(users, course(), "CARL")

        assert [u.id for u in result] == ["3", "4"]
