"""FastAPI application factory for the job board API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from jobboard.config import load_config
from jobboard.db import get_session, init_db
from jobboard.db_async import run_sync
from jobboard.search import DocumentMirror, JobSearchService, SearchIndexClient

logger = logging.getLogger(__name__)


def build_search(config):
    """Wire the index client, mirror and search service for one process."""
    client = SearchIndexClient(config.search)
    mirror = DocumentMirror(client, config.search)
    service = JobSearchService(client, config.search, mirror=mirror)
    return service, mirror


def initialize_search(service: JobSearchService, engine):
    """Startup hook: probe the index, ensure mappings and reindex jobs."""
    session = get_session(engine)
    try:
        return service.initialize_indices(session)
    finally:
        session.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize DB, config and search indices, and optionally start the health check."""
    config = load_config()
    engine = init_db(config.db_path)
    service, mirror = build_search(config)

    app.state.config = config
    app.state.engine = engine
    app.state.search = service
    app.state.mirror = mirror

    # Must finish before traffic; failures are logged inside
    await run_sync(initialize_search, service, engine)

    scheduler = None
    if config.health_check.enabled:
        try:
            from jobboard.scheduler.scheduler import start_scheduler

            scheduler = start_scheduler(config, service, engine)
            app.state.scheduler = scheduler
        except Exception as e:
            logger.warning("Index health check failed to start: %s", e)

    yield

    if scheduler is not None:
        from jobboard.scheduler.scheduler import stop_scheduler

        stop_scheduler(scheduler)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ())[1:]) or 'body'}: {err.get('msg')}"
        for err in errors
    )
    details = [{"loc": list(err.get("loc", ())), "msg": err.get("msg")} for err in errors]
    return JSONResponse(status_code=400, content={"error": message, "details": details})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="Job Board", lifespan=lifespan)

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Include routers
    from jobboard.web.routes import router

    app.include_router(router)

    @app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
    async def not_found(path: str):
        return JSONResponse(status_code=404, content={"error": "Route not found"})

    return app
