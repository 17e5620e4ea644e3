from coursesphere.core.env import load_env
load_env()
from coursesphere.core.config import settings
from coursesphere.core.logging import configure_logging, get_logger
configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

import datetime
import time

from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coursesphere.backend.deps import get_repository
from coursesphere.backend.repository import JsonDocumentRepository
from coursesphere.backend.routes import router as resources_router
from coursesphere.middleware.logging import logging_middleware

logger = get_logger(__name__)

app = FastAPI(title="CourseSphere API")

# The browser client and the CLI talk to this backend from any origin.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(logging_middleware)

_STARTED_AT = time.monotonic()


@app.get("/health")
async def health():
    """Liveness: process uptime and current time."""
    return {
        "status": "ok",
        "uptime_seconds": round(time.monotonic() - _STARTED_AT, 2),
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
    }


@app.get("/data/health")
def data_health(repo: JsonDocumentRepository = Depends(get_repository)):
    """Readiness: the data document parses and holds every collection."""
    try:
        document = repo.read_document()
    except (OSError, ValueError) as e:
        logger.error("data document unreadable", path=str(repo.path), error=str(e))
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"data": "unavailable", "path": str(repo.path)},
        )
    return {
        "data": "ok",
        "path": str(repo.path),
        "records": {name: len(document[name]) for name in repo.collections},
    }


# Registered last so "/{collection}" does not shadow the routes above.
app.include_router(resources_router)

logger.info("backend process started", data_file=settings.DATA_FILE)
