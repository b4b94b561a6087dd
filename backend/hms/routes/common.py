from fastapi import Query

from hms.config.settings import settings
from hms.schemas.shared import PageRequest


def page_request_params(
    page: int = Query(0, ge=0),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    sort_by: str = Query("id", alias="sortBy"),
    sort_dir: str = Query("asc", alias="sortDir"),
) -> PageRequest:
    """page/size/sortBy/sortDir query parameters; any sortDir other than "desc" sorts ascending."""
    return PageRequest(
        page=page,
        size=size,
        sort_by=sort_by,
        descending=sort_dir.lower() == "desc",
    )
