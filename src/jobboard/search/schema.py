"""Fixed index mappings and idempotent index creation."""

import logging

from jobboard.config import SearchConfig
from jobboard.search.client import SearchIndexClient

logger = logging.getLogger(__name__)

JOB_MAPPING = {
    "properties": {
        "id": {"type": "integer"},
        "title": {"type": "text", "analyzer": "standard"},
        "description": {"type": "text", "analyzer": "standard"},
        "location": {"type": "keyword"},
        "createdAt": {"type": "date"},
        "updatedAt": {"type": "date"},
    }
}

APPLICATION_MAPPING = {
    "properties": {
        "id": {"type": "integer"},
        "job_id": {"type": "integer"},
        "applicant_name": {"type": "text"},
        "email": {"type": "keyword"},
        "resume_url": {"type": "keyword"},
        "createdAt": {"type": "date"},
        "updatedAt": {"type": "date"},
    }
}


def ensure_index(client: SearchIndexClient, name: str, mapping: dict) -> bool:
    """Create the index if it does not exist yet. Returns True if the index is in place."""
    if not client.available:
        return False

    try:
        if client.index_exists(name):
            return True
        client.create_index(name, mapping)
        logger.info("Created search index '%s'", name)
        return True
    except Exception as e:
        logger.warning("Error creating %s index: %s", name, e)
        return False


def ensure_indices(client: SearchIndexClient, config: SearchConfig) -> dict[str, bool]:
    """Ensure both the jobs and applications indices exist."""
    return {
        config.jobs_index: ensure_index(client, config.jobs_index, JOB_MAPPING),
        config.applications_index: ensure_index(
            client, config.applications_index, APPLICATION_MAPPING
        ),
    }
