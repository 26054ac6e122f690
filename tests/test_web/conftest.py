"""Shared fixtures for web tests."""

import pytest
from fastapi.testclient import TestClient

from jobboard.config import JobBoardConfig
from jobboard.db import create_application, create_job, get_session, init_db
from jobboard.search import DocumentMirror, JobSearchService, SearchIndexClient
from jobboard.web.app import create_app


@pytest.fixture
def web_db(tmp_path):
    """Create a test database and return (engine, db_path)."""
    db_path = str(tmp_path / "test_web.db")
    engine = init_db(db_path)
    return engine, db_path


@pytest.fixture
def web_es(make_es):
    return make_es()


def _install_search(app, config, es):
    client = SearchIndexClient(config.search, es=es)
    client.probe()
    if client.available:
        es.indices.create(index=config.search.jobs_index, mappings={})
        es.indices.create(index=config.search.applications_index, mappings={})
    es.calls.clear()

    mirror = DocumentMirror(client, config.search)
    app.state.search = JobSearchService(client, config.search, mirror=mirror)
    app.state.mirror = mirror


@pytest.fixture
def web_app(web_db, web_es):
    """Create a test FastAPI app with test DB and in-memory search engine."""
    engine, db_path = web_db

    app = create_app()
    # Override app state with test DB
    app.state.config = JobBoardConfig(db_path=db_path)
    app.state.engine = engine
    _install_search(app, app.state.config, web_es)

    return app


@pytest.fixture
def client(web_app):
    """Create a test client."""
    return TestClient(web_app, raise_server_exceptions=False)


@pytest.fixture
def degraded_client(web_db, make_es):
    """A test client whose search engine never answered the startup ping."""
    engine, db_path = web_db

    app = create_app()
    app.state.config = JobBoardConfig(db_path=db_path)
    app.state.engine = engine
    _install_search(app, app.state.config, make_es(alive=False))

    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def seeded_db(web_db):
    """Two jobs and three applications. Returns (backend_id, analyst_id)."""
    engine, _ = web_db
    session = get_session(engine)

    backend = create_job(session, "Backend Engineer", "Build APIs", "Remote")
    analyst = create_job(session, "Data Analyst", "Dashboards in SQL", "NYC")
    create_application(session, backend.id, "Ada Lovelace", "ada@example.com", "https://example.com/ada.pdf")
    create_application(session, backend.id, "Alan Turing", "alan@example.com", "https://example.com/alan.pdf")
    create_application(session, analyst.id, "Grace Hopper", "grace@example.com", "http://example.com/grace")
    session.commit()
    session.close()

    return backend.id, analyst.id
