import logging
import time

from fastapi import Request

from hms.core.events import EventPublisher
from hms.db.session import get_db_session

logger = logging.getLogger(__name__)


async def request_logging_middleware(request: Request, call_next):
    """Logs method, path, status and duration of every request."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
    )
    return response

# Get a database session dependency
async def get_db(request: Request):
    """Yield an async SQLAlchemy session (dependency)."""
    async for session in get_db_session(request):
        yield session

def get_event_publisher(request: Request) -> EventPublisher:
    """The publisher created in the application lifespan."""
    return request.app.state.event_publisher
