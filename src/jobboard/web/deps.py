"""FastAPI dependency injection for the job board API."""

from typing import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from jobboard.config import JobBoardConfig
from jobboard.db import get_session as db_get_session
from jobboard.search import DocumentMirror, JobSearchService


def get_config(request: Request) -> JobBoardConfig:
    """Get configuration from app state."""
    return request.app.state.config


def get_db(request: Request) -> Generator[Session, None, None]:
    """Get a database session, auto-closed after request."""
    session = db_get_session(request.app.state.engine)
    try:
        yield session
    finally:
        session.close()


def get_search(request: Request) -> JobSearchService:
    """Get the job search service from app state."""
    return request.app.state.search


def get_mirror(request: Request) -> DocumentMirror:
    """Get the document mirror from app state."""
    return request.app.state.mirror
