"""Application listing routes."""

import math

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from jobboard.db import list_applications
from jobboard.web.deps import get_db

router = APIRouter(prefix="/applications", tags=["applications"])


@router.get("")
async def application_list(
    job_id: int | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    session: Session = Depends(get_db),
):
    """List applications newest first, optionally for a single job."""
    offset = (page - 1) * limit
    applications, total = list_applications(session, job_id=job_id, limit=limit, offset=offset)

    total_pages = math.ceil(total / limit)

    return {
        "applications": [a.model_dump(mode="json", by_alias=True) for a in applications],
        "pagination": {
            "currentPage": page,
            "totalPages": total_pages,
            "totalItems": total,
            "hasNextPage": page < total_pages,
            "hasPreviousPage": page > 1,
        },
    }
