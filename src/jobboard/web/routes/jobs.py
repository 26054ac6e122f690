"""Job posting, listing, search and apply routes."""

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from jobboard.db import (
    create_application,
    create_job,
    get_job_by_id,
    get_job_with_applications,
    list_all_jobs,
)
from jobboard.db_async import run_sync
from jobboard.models import ApplicationCreate, JobCreate
from jobboard.search import DocumentMirror, JobSearchService
from jobboard.web.deps import get_db, get_mirror, get_search

router = APIRouter(prefix="/jobs", tags=["jobs"])


def _job_not_found() -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Job not found"})


@router.post("", status_code=201)
async def post_job(
    payload: JobCreate,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_db),
    mirror: DocumentMirror = Depends(get_mirror),
):
    """Create a job, then mirror it into the search index."""
    job = create_job(session, payload.title, payload.description, payload.location)
    session.commit()

    background_tasks.add_task(mirror.mirror_job, job)
    return job.model_dump(mode="json", by_alias=True)


@router.get("")
async def list_jobs(
    location: str | None = Query(None),
    keyword: str | None = Query(None),
    session: Session = Depends(get_db),
    search: JobSearchService = Depends(get_search),
):
    """List jobs. Filters go through the search index; unfiltered reads hit the database.

    A filtered listing is capped at 100 documents and is not paginated.
    """
    if location or keyword:
        # Index calls block; keep them off the event loop
        return await run_sync(search.search_jobs, location=location, keyword=keyword)

    jobs = list_all_jobs(session, newest_first=True)
    return [job.model_dump(mode="json", by_alias=True) for job in jobs]


@router.get("/search")
async def search_jobs(
    keyword: str | None = Query(None),
    location: str | None = Query(None),
    date_from: str | None = Query(None, alias="dateFrom"),
    date_to: str | None = Query(None, alias="dateTo"),
    page: str | None = Query(None),
    limit: str | None = Query(None),
    search: JobSearchService = Depends(get_search),
):
    """Faceted job search with relevance scoring and pagination."""
    result, pagination = await run_sync(
        search.search_with_facets,
        keyword=keyword,
        location=location,
        date_from=date_from,
        date_to=date_to,
        page=page,
        limit=limit,
    )
    data = result.model_dump(mode="json")

    return {
        "success": True,
        "data": {
            "jobs": data["jobs"],
            "facets": data["facets"],
            "pagination": pagination.model_dump(by_alias=True),
        },
    }


@router.get("/{job_id}")
async def job_detail(job_id: int, session: Session = Depends(get_db)):
    """Show a job together with its applications."""
    job = get_job_with_applications(session, job_id)
    if job is None:
        return _job_not_found()
    return job.model_dump(
        mode="json", by_alias=True, exclude={"applications": {"__all__": {"job"}}}
    )


@router.post("/{job_id}/apply", status_code=201)
async def apply_to_job(
    job_id: int,
    payload: ApplicationCreate,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_db),
    mirror: DocumentMirror = Depends(get_mirror),
):
    """Apply to an existing job. Unknown jobs are rejected before any write."""
    if get_job_by_id(session, job_id) is None:
        return _job_not_found()

    application = create_application(
        session,
        job_id=job_id,
        applicant_name=payload.applicant_name,
        email=payload.email,
        resume_url=payload.resume_url,
    )
    session.commit()

    background_tasks.add_task(mirror.mirror_application, application)
    return application.model_dump(mode="json", by_alias=True, exclude={"job"})
