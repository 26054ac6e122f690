"""Aggregates all web route sub-routers."""

from fastapi import APIRouter

from jobboard.web.routes.applications import router as applications_router
from jobboard.web.routes.health import router as health_router
from jobboard.web.routes.jobs import router as jobs_router

router = APIRouter()
router.include_router(jobs_router)
router.include_router(applications_router)
router.include_router(health_router)
