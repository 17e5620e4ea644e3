from __future__ import annotations

from functools import lru_cache

from coursesphere.backend.repository import JsonDocumentRepository
from coursesphere.core.config import settings


@lru_cache
def _default_repository() -> JsonDocumentRepository:
    return JsonDocumentRepository(settings.DATA_FILE)


def get_repository() -> JsonDocumentRepository:
    return _default_repository()
