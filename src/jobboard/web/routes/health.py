"""Liveness endpoint with search index status."""

from fastapi import APIRouter, Depends, Request

from jobboard.scheduler.scheduler import get_next_run_time
from jobboard.search import JobSearchService
from jobboard.web.deps import get_search

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request, search: JobSearchService = Depends(get_search)):
    next_check = None
    scheduler = getattr(request.app.state, "scheduler", None)
    if scheduler is not None:
        next_run = get_next_run_time(scheduler)
        next_check = next_run.isoformat() if next_run else None

    return {
        "status": "OK",
        "message": "Job Application API is running",
        "search": {
            "availability": search.client.availability.value,
            "mirror": search.mirror.stats.snapshot(),
            "nextHealthCheck": next_check,
        },
    }
