# coursesphere/backend/routes.py
"""json-server style routes over the users, courses and lessons collections.

The backend stores whatever it is sent: ownership rules live in the client.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from coursesphere.backend.deps import get_repository
from coursesphere.backend.repository import (
    DuplicateId,
    JsonDocumentRepository,
    UnknownCollection,
    VersionConflict,
)
from coursesphere.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["resources"])


def _not_found(collection: str, record_id: Any = None) -> HTTPException:
    detail = f"{collection} not found" if record_id is None else f"{collection}/{record_id} not found"
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


@router.get("/data")
def read_data(repo: JsonDocumentRepository = Depends(get_repository)):
    """Return the whole data document."""
    try:
        return repo.read_document()
    except (OSError, ValueError) as e:
        logger.error("data document unreadable", error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "could not read the data file"},
        )


@router.get("/{collection}")
def list_records(
    collection: str,
    request: Request,
    repo: JsonDocumentRepository = Depends(get_repository),
):
    """List a collection, filtered by equality on every query parameter."""
    filters = {k: v for k, v in request.query_params.items() if not k.startswith("_")}
    try:
        return repo.list(collection, filters)
    except UnknownCollection:
        raise _not_found(collection)


@router.get("/{collection}/{record_id}")
def get_record(
    collection: str,
    record_id: str,
    repo: JsonDocumentRepository = Depends(get_repository),
):
    try:
        record = repo.get(collection, record_id)
    except UnknownCollection:
        raise _not_found(collection)
    if record is None:
        raise _not_found(collection, record_id)
    return record


@router.post("/{collection}", status_code=status.HTTP_201_CREATED)
def create_record(
    collection: str,
    payload: dict[str, Any] = Body(...),
    repo: JsonDocumentRepository = Depends(get_repository),
):
    """Append a record. An id already in the collection is rejected with 409."""
    try:
        return repo.create(collection, payload)
    except UnknownCollection:
        raise _not_found(collection)
    except DuplicateId as e:
        logger.warning("duplicate id rejected", collection=collection, record_id=e.record_id)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.put("/{collection}/{record_id}")
def replace_record(
    collection: str,
    record_id: str,
    payload: dict[str, Any] = Body(...),
    repo: JsonDocumentRepository = Depends(get_repository),
):
    """Replace a record. A stale ``version`` is rejected with 409."""
    try:
        record = repo.replace(collection, record_id, payload)
    except UnknownCollection:
        raise _not_found(collection)
    except VersionConflict as e:
        logger.warning(
            "stale write rejected",
            collection=collection,
            record_id=record_id,
            sent=e.expected,
            stored=e.actual,
        )
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if record is None:
        raise _not_found(collection, record_id)
    return record


@router.delete("/{collection}/{record_id}")
def delete_record(
    collection: str,
    record_id: str,
    repo: JsonDocumentRepository = Depends(get_repository),
):
    try:
        deleted = repo.delete(collection, record_id)
    except UnknownCollection:
        raise _not_found(collection)
    if not deleted:
        raise _not_found(collection, record_id)
    return {}
