"""Search index synchronization and job queries."""

from jobboard.search.client import SearchIndexClient
from jobboard.search.mirror import DocumentMirror, MirrorStats
from jobboard.search.service import JobSearchService

__all__ = ["DocumentMirror", "JobSearchService", "MirrorStats", "SearchIndexClient"]
