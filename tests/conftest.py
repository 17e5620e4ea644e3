"""
Pytest configuration and fixtures for testing.
"""
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from coursesphere.backend.deps import get_repository
from coursesphere.backend.main import app
from coursesphere.backend.repository import JsonDocumentRepository
from coursesphere.core.security import create_session_token
from coursesphere.integrations.api import ResourceClient
from coursesphere.modules.auth.models import Session, User
from coursesphere.modules.auth.repository import MemorySessionStore
from coursesphere.modules.auth.service import IdentityProvider

ANA = {"id": "1", "name": "Ana Souza", "email": "ana@test.com", "password": "secret1"}
BRUNO = {"id": "2", "name": "Bruno Lima", "email": "bruno@test.com", "password": "secret2"}
CARLA = {"id": "3", "name": "Carla Mendes", "email": "carla@test.com", "password": "secret3"}


def make_lesson(lesson_id, course_id="1", creator_id="1", status="draft", title=None):
    return {
        "id": str(lesson_id),
        "title": title or f"Lesson {lesson_id}",
        "status": status,
        "publish_date": "2999-01-01",
        "video_url": f"https://videos.test/{lesson_id}.mp4",
        "course_id": str(course_id),
        "creator_id": str(creator_id),
    }


@pytest.fixture
def document():
    """Users, two courses and their lessons.

    Course 1 is created by Ana with Bruno as instructor and carries a version.
    Course 2 is created by Bruno and has no version field.
    """
    return {
        "users": [dict(ANA), dict(BRUNO), dict(CARLA)],
        "courses": [
            {
                "id": "1",
                "name": "Python Basics",
                "description": "Introduction to Python",
                "start_date": "2025-01-01",
                "end_date": "2025-06-01",
                "creator_id": "1",
                "instructors": ["1", "2"],
                "lessons_count": 0,
                "version": 1,
            },
            {
                "id": "2",
                "name": "Advanced SQL",
                "description": "Window functions and query plans",
                "start_date": "2025-03-01",
                "end_date": "2025-09-01",
                "creator_id": "2",
                "instructors": ["2"],
                "lessons_count": 0,
            },
        ],
        "lessons": [
            make_lesson(1, course_id="1", creator_id="1", status="published", title="Variables"),
            make_lesson(2, course_id="1", creator_id="2", status="draft", title="Loops"),
            make_lesson(3, course_id="1", creator_id="1", status="archived", title="Functions"),
            make_lesson(4, course_id="2", creator_id="2", status="published", title="Joins"),
        ],
    }


@pytest.fixture
def data_file(tmp_path, document):
    path = tmp_path / "data.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


@pytest.fixture
def repo(data_file):
    return JsonDocumentRepository(data_file)


@pytest.fixture
def client(repo):
    """FastAPI test client bound to the temporary data file."""
    app.dependency_overrides[get_repository] = lambda: repo
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class RecordingClient(ResourceClient):
    """ResourceClient that remembers every request it sends."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = []

    async def _request(self, method, path, **kwargs):
        self.calls.append((method, path))
        return await super()._request(method, path, **kwargs)

    def writes(self):
        return [call for call in self.calls if call[0] != "GET"]


@pytest.fixture
def api(repo):
    """Resource client talking to the backend app in-process."""
    app.dependency_overrides[get_repository] = lambda: repo
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    http = httpx.AsyncClient(transport=transport, base_url="http://test")
    yield RecordingClient(base_url="http://test", client=http)
    app.dependency_overrides.clear()


@pytest.fixture
def identity_for(api):
    """Build an IdentityProvider already logged in as the given seed user."""
    def _make(user_data):
        identity = IdentityProvider(api, MemorySessionStore())
        user = User.model_validate(user_data).public()
        identity.session = Session(token=create_session_token(user.id), user=user)
        return identity
    return _make


@pytest.fixture
def ana(identity_for):
    return identity_for(ANA)


@pytest.fixture
def bruno(identity_for):
    return identity_for(BRUNO)


@pytest.fixture
def carla(identity_for):
    return identity_for(CARLA)
