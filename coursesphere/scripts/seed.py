from __future__ import annotations

import argparse
import sys
from datetime import date, timedelta
from typing import Any

from coursesphere.backend.repository import JsonDocumentRepository
from coursesphere.core.config import settings
from coursesphere.core.logging import configure_logging, get_logger
from coursesphere.core.security import hash_for_storage

logger = get_logger(__name__)

SEED_PASSWORD = "123456"

SEED_USERS = [
    ("1", "Ana Souza", "ana@coursesphere.dev"),
    ("2", "Bruno Lima", "bruno@coursesphere.dev"),
    ("3", "Carla Mendes", "carla@coursesphere.dev"),
]


def build_document(today: date, scheme: str | None = None) -> dict[str, list[dict[str, Any]]]:
    users = [
        {"id": uid, "name": name, "email": email, "password": hash_for_storage(SEED_PASSWORD, scheme)}
        for uid, name, email in SEED_USERS
    ]

    courses = [
        {
            "id": "1",
            "name": "Python for Data Analysis",
            "description": "pandas, notebooks and plotting for everyday analysis",
            "start_date": (today - timedelta(days=30)).isoformat(),
            "end_date": (today + timedelta(days=60)).isoformat(),
            "creator_id": "1",
            "instructors": ["1", "2"],
            "lessons_count": 0,
            "version": 1,
        },
        {
            "id": "2",
            "name": "Web APIs with FastAPI",
            "description": "Routing, validation and testing HTTP services",
            "start_date": (today + timedelta(days=15)).isoformat(),
            "end_date": (today + timedelta(days=90)).isoformat(),
            "creator_id": "2",
            "instructors": ["2"],
            "lessons_count": 0,
            "version": 1,
        },
    ]

    statuses = ["published", "draft", "archived"]
    lessons = []
    for index in range(1, 8):
        lessons.append(
            {
                "id": str(index),
                "title": f"Lesson {index}: {'Intro' if index == 1 else 'Topic ' + str(index)}",
                "status": statuses[index % len(statuses)],
                "publish_date": (today + timedelta(days=index)).isoformat(),
                "video_url": f"https://videos.coursesphere.dev/{index}.mp4",
                "course_id": "1",
                "creator_id": "1" if index % 2 else "2",
            }
        )

    return {"users": users, "courses": courses, "lessons": lessons}


def seed(repo: JsonDocumentRepository, reset: bool = False, today: date | None = None) -> bool:
    """Write seed data unless the document already exists (``reset`` overwrites)."""
    if repo.path.exists() and not reset:
        logger.info("data file already present, skipping seed", path=str(repo.path))
        return False
    repo.write_document(build_document(today or date.today()))
    logger.info("seed data written", path=str(repo.path))
    return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the CourseSphere data file")
    parser.add_argument("--data-file", default=settings.DATA_FILE)
    parser.add_argument("--reset", action="store_true", help="overwrite an existing file")
    args = parser.parse_args(argv)

    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT, stream=sys.stderr)
    seed(JsonDocumentRepository(args.data_file), reset=args.reset)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
