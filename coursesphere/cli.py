"""Command line front end for CourseSphere."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys
from typing import Optional

from coursesphere.core.config import settings
from coursesphere.core.exceptions import CourseSphereError, NotAuthenticated, PermissionDenied, ValidationError
from coursesphere.core.logging import configure_logging
from coursesphere.integrations.api import ResourceClient
from coursesphere.modules.auth.repository import FileSessionStore, SessionStore
from coursesphere.modules.auth.service import IdentityProvider
from coursesphere.modules.courses.models import Course
from coursesphere.modules.courses.ownership import RosterOutcome
from coursesphere.modules.courses.query import CourseFilter, course_status_label
from coursesphere.modules.courses.service import CourseService, InstructorService
from coursesphere.modules.courses.views import CourseDetailsPage, DashboardPage
from coursesphere.modules.lessons.models import lesson_status_label
from coursesphere.modules.lessons.query import ALL_STATUSES, LessonFilter
from coursesphere.modules.lessons.service import LessonService
from coursesphere.schemas.course import CourseCreate
from coursesphere.schemas.user import NewUser

ROSTER_MESSAGES = {
    RosterOutcome.added: "{user} was added as an instructor",
    RosterOutcome.removed: "{user} was removed from the course",
    RosterOutcome.already_instructor: "{user} is already an instructor of this course",
    RosterOutcome.creator_protected: "the course creator cannot be removed",
    RosterOutcome.not_instructor: "{user} is not an instructor of this course",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="coursesphere", description="Manage courses, instructors and lessons")
    parser.add_argument("--api", default=None, help=f"backend URL (default {settings.API_BASE_URL})")
    parser.add_argument("--session-file", default=settings.SESSION_FILE)
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the development backend")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=3001)

    seed = sub.add_parser("seed", help="write seed data to the data file")
    seed.add_argument("--reset", action="store_true")

    login = sub.add_parser("login")
    login.add_argument("email")
    login.add_argument("--password")

    sub.add_parser("logout")
    sub.add_parser("whoami")

    courses = sub.add_parser("courses", help="list your courses")
    courses.add_argument("--search", default="")
    courses.add_argument("--start-from")
    courses.add_argument("--end-until")

    create = sub.add_parser("create-course")
    create.add_argument("--name", required=True)
    create.add_argument("--description", default="")
    create.add_argument("--start", required=True, dest="start_date")
    create.add_argument("--end", required=True, dest="end_date")

    lessons = sub.add_parser("lessons", help="list the lessons of a course")
    lessons.add_argument("course_id")
    lessons.add_argument("--search", default="")
    lessons.add_argument("--status", default=ALL_STATUSES, choices=[ALL_STATUSES, "draft", "published", "archived"])
    lessons.add_argument("--page", type=int, default=1)

    add = sub.add_parser("add-instructor")
    add.add_argument("course_id")
    who = add.add_mutually_exclusive_group(required=True)
    who.add_argument("--user-id")
    who.add_argument("--email", help="add by email, creating the user if needed")
    add.add_argument("--name", help="name for a user created by --email")

    remove = sub.add_parser("remove-instructor")
    remove.add_argument("course_id")
    remove.add_argument("user_id")

    delete_lesson = sub.add_parser("delete-lesson")
    delete_lesson.add_argument("course_id")
    delete_lesson.add_argument("lesson_id")
    return parser


def _print_course(course: Course) -> None:
    print(
        f"[{course.id}] {course.name} ({course_status_label(course)}) "
        f"{course.start_date} -> {course.end_date} | "
        f"{len(course.instructors)} instructor(s), {course.lessons_count} lesson(s)"
    )


async def run_command(args: argparse.Namespace, store: Optional[SessionStore] = None, client: Optional[ResourceClient] = None) -> int:
    store = store if store is not None else FileSessionStore(args.session_file)
    own_client = client is None
    client = client or ResourceClient(base_url=args.api)
    try:
        identity = IdentityProvider.open(client, store)
        return await _dispatch(args, client, identity)
    finally:
        if own_client:
            await client.close()


async def _dispatch(args: argparse.Namespace, client: ResourceClient, identity: IdentityProvider) -> int:
    courses = CourseService(client, identity)
    lessons = LessonService(client, identity)

    if args.command == "login":
        password = args.password if args.password is not None else getpass.getpass("Password: ")
        if not await identity.login(args.email, password):
            print("incorrect email or password", file=sys.stderr)
            return 1
        print(f"logged in as {identity.current_user.name}")
        return 0

    if args.command == "logout":
        identity.logout()
        print("logged out")
        return 0

    if args.command == "whoami":
        user = identity.require_user()
        print(f"{user.name} <{user.email}> (id {user.id})")
        return 0

    if args.command == "courses":
        page = DashboardPage(courses)
        page.set_filter(CourseFilter(args.search, args.start_from, args.end_until))
        await page.load()
        visible = page.visible()
        if not visible:
            print("no courses found")
        for course in visible:
            _print_course(course)
        return 0

    if args.command == "create-course":
        course = await courses.create_course(
            CourseCreate(
                name=args.name,
                description=args.description,
                start_date=args.start_date,
                end_date=args.end_date,
            )
        )
        _print_course(course)
        return 0

    if args.command == "lessons":
        details = CourseDetailsPage(args.course_id, courses, lessons)
        await details.load()
        details.set_filter(LessonFilter(args.search, args.status))
        details.set_page(args.page)
        page = details.page()
        print(f"{details.course.name}: {page.total_items} of {len(details.listing.items)} lesson(s)")
        for lesson in page.items:
            marker = "*" if details.can_edit_lesson(lesson) else " "
            print(f"{marker} [{lesson.id}] {lesson.title} - {lesson_status_label(lesson.status)} ({lesson.publish_date})")
        if page.total_pages > 1:
            print(f"page {page.page}/{page.total_pages}")
        return 0

    if args.command == "add-instructor":
        details = CourseDetailsPage(args.course_id, courses, lessons)
        await details.load()
        if args.user_id:
            users = {u.id: u for u in await InstructorService(client, identity, courses).list_users()}
            if args.user_id not in users:
                print(f"unknown user {args.user_id}", file=sys.stderr)
                return 1
            candidate = users[args.user_id]
        else:
            candidate = NewUser(name=args.name or args.email.split("@")[0], email=args.email)
        update = await details.add_instructor(candidate)
        print(ROSTER_MESSAGES[update.result.outcome].format(user=candidate.name))
        return 0 if update.changed else 1

    if args.command == "remove-instructor":
        details = CourseDetailsPage(args.course_id, courses, lessons)
        await details.load()
        update = await details.remove_instructor(args.user_id)
        print(ROSTER_MESSAGES[update.result.outcome].format(user=args.user_id))
        return 0 if update.changed else 1

    if args.command == "delete-lesson":
        context = await lessons.load_for_edit(args.course_id, args.lesson_id)
        await lessons.delete_lesson(context.course, context.lesson)
        print(f"lesson {args.lesson_id} deleted")
        return 0

    raise ValueError(f"unknown command {args.command!r}")


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT, stream=sys.stderr)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("coursesphere.backend.main:app", host=args.host, port=args.port)
        return 0

    if args.command == "seed":
        from coursesphere.backend.repository import JsonDocumentRepository
        from coursesphere.scripts.seed import seed

        seed(JsonDocumentRepository(settings.DATA_FILE), reset=args.reset)
        return 0

    try:
        return asyncio.run(run_command(args))
    except NotAuthenticated:
        print("not logged in: run `coursesphere login <email>` first", file=sys.stderr)
    except ValidationError as e:
        print(f"invalid {e.field}: {e.message}", file=sys.stderr)
    except PermissionDenied as e:
        print(f"not allowed to {e.action}", file=sys.stderr)
    except CourseSphereError as e:
        print(f"error: {e}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
