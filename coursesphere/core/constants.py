# Form limits
MIN_COURSE_NAME_CHARS = 3
MAX_COURSE_DESCRIPTION_CHARS = 500
MIN_LESSON_TITLE_CHARS = 3
MIN_PASSWORD_CHARS = 6

EMAIL_PATTERN = r"\S+@\S+\.\S+"
VIDEO_URL_PATTERN = r"^https?://.+\..+"

# Given to users created from the instructor roster screen
DEFAULT_NEW_USER_PASSWORD = "123456"

# Persisted session keys
SESSION_TOKEN_KEY = "coursesphere_token"
SESSION_USER_KEY = "coursesphere_user"

COLLECTIONS = ("users", "courses", "lessons")
