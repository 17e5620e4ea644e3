"""CourseSphere: course, instructor roster and lesson management."""

__version__ = "0.1.0"
