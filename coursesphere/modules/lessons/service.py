from __future__ import annotations

from dataclasses import dataclass

from coursesphere.core.logging import get_logger
from coursesphere.integrations.api import ResourceClient
from coursesphere.modules.auth.service import IdentityProvider
from coursesphere.modules.courses import ownership
from coursesphere.modules.courses.models import Course
from coursesphere.modules.lessons.models import Lesson, LessonStatus
from coursesphere.schemas.lesson import LessonForm
from coursesphere.validators.forms import validate_lesson

logger = get_logger(__name__)


@dataclass(frozen=True)
class LessonEditContext:
    lesson: Lesson
    course: Course
    allowed: bool


class LessonService:
    """Lesson operations; each write waits for the backend before returning."""

    def __init__(self, client: ResourceClient, identity: IdentityProvider):
        self.client = client
        self.identity = identity

    async def list_lessons(self, course_id: str) -> list[Lesson]:
        rows = await self.client.get("/lessons", params={"course_id": course_id})
        return [Lesson.model_validate(row) for row in rows]

    async def get_lesson(self, lesson_id: str) -> Lesson:
        return Lesson.model_validate(await self.client.get(f"/lessons/{lesson_id}"))

    async def create_lesson(self, course: Course, form: LessonForm) -> Lesson:
        user = self.identity.require_user()
        validate_lesson(form)
        ownership.require(
            ownership.can_create_lesson(user.id, course), "create lesson", user.id, course.id
        )

        payload = {
            **_form_fields(form),
            "status": LessonStatus(form.status).value,
            "course_id": course.id,
            "creator_id": user.id,
        }
        created = Lesson.model_validate(await self.client.post("/lessons", payload))
        logger.info("lesson created", lesson_id=created.id, course_id=course.id, user_id=user.id)
        return created

    async def load_for_edit(self, course_id: str, lesson_id: str) -> LessonEditContext:
        """Fetch the lesson and its course and decide whether the user may edit it."""
        user = self.identity.require_user()
        lesson = await self.get_lesson(lesson_id)
        course = Course.model_validate(await self.client.get(f"/courses/{course_id}"))
        return LessonEditContext(
            lesson=lesson,
            course=course,
            allowed=ownership.can_edit_lesson(user.id, lesson, course),
        )

    async def update_lesson(self, course: Course, lesson: Lesson, form: LessonForm) -> Lesson:
        """Replace the lesson with the form fields applied (full record PUT)."""
        user = self.identity.require_user()
        ownership.require(
            ownership.can_edit_lesson(user.id, lesson, course), "edit lesson", user.id, lesson.id
        )
        validate_lesson(form)

        updated = lesson.model_copy(update=_form_fields(form))
        saved = Lesson.model_validate(
            await self.client.put(f"/lessons/{lesson.id}", updated.to_payload())
        )
        logger.info("lesson updated", lesson_id=lesson.id, user_id=user.id)
        return saved

    async def delete_lesson(self, course: Course, lesson: Lesson) -> None:
        user = self.identity.require_user()
        ownership.require(
            ownership.can_delete_lesson(user.id, lesson, course), "delete lesson", user.id, lesson.id
        )
        await self.client.delete(f"/lessons/{lesson.id}")
        logger.info("lesson deleted", lesson_id=lesson.id, user_id=user.id)


def _form_fields(form: LessonForm) -> dict:
    return {
        "title": form.title,
        "status": LessonStatus(form.status),
        "publish_date": form.publish_date,
        "video_url": form.video_url,
    }
