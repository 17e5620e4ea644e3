from pydantic import BaseModel

from coursesphere.modules.lessons.models import LessonStatus


class LessonForm(BaseModel):
    """Fields a user fills in to create or edit a lesson."""

    title: str
    status: LessonStatus | str = LessonStatus.draft
    publish_date: str = ""
    video_url: str = ""
