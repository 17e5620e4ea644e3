from typing import Optional

from pydantic import BaseModel


class CourseCreate(BaseModel):
    name: str
    description: str = ""
    start_date: str = ""
    end_date: str = ""


class CourseUpdate(BaseModel):
    # creator_id and instructors are not editable from the course form
    name: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
