"""Job search service: startup index initialization and the two search entry points."""

import logging
import math

from sqlalchemy.orm import Session

from jobboard.config import SearchConfig
from jobboard.models import (
    DateRange,
    FacetedSearchResult,
    FacetFilters,
    ReindexReport,
    SearchPagination,
)
from jobboard.search.client import SearchIndexClient
from jobboard.search.mirror import DocumentMirror
from jobboard.search.query import (
    build_faceted_query,
    build_simple_query,
    clamp_page_size,
    extract_documents,
    normalize_page,
    page_offset,
    reshape_faceted_response,
)
from jobboard.search.reindex import reindex_all_jobs
from jobboard.search.schema import ensure_indices

logger = logging.getLogger(__name__)


class JobSearchService:
    """Search-facing side of the job board.

    Every public method absorbs index failures: reads degrade to empty
    results and startup initialization only logs. The relational store stays
    the source of truth, so a broken index never fails a request.
    """

    def __init__(
        self,
        client: SearchIndexClient,
        config: SearchConfig,
        mirror: DocumentMirror | None = None,
    ) -> None:
        self.client = client
        self.config = config
        self.mirror = mirror or DocumentMirror(client, config)

    @property
    def available(self) -> bool:
        return self.client.available

    def initialize_indices(self, session: Session) -> ReindexReport | None:
        """Probe the engine, ensure both mappings exist and reindex all jobs."""
        try:
            self.client.probe()
            if not self.client.available:
                return None

            ensure_indices(self.client, self.config)

            report = None
            if self.config.reindex_on_startup:
                report = reindex_all_jobs(session, self.mirror)
            logger.info("Search indices initialized")
            return report
        except Exception as e:
            logger.error("Search index initialization failed: %s", e)
            return None

    def search_jobs(self, location: str | None = None, keyword: str | None = None) -> list[dict]:
        """Keyword/location search. Empty when the index is unavailable or errors."""
        if not self.client.available:
            return []

        try:
            response = self.client.search(
                self.config.jobs_index, build_simple_query(keyword=keyword, location=location)
            )
            return extract_documents(response)
        except Exception as e:
            logger.warning("Error searching jobs: %s", e)
            return []

    def search_jobs_with_facets(
        self, keyword: str | None, filters: FacetFilters
    ) -> FacetedSearchResult:
        """Scored, faceted search. Degrades to an empty result on any failure."""
        if not self.client.available:
            return FacetedSearchResult()

        try:
            response = self.client.search(
                self.config.jobs_index, build_faceted_query(keyword, filters)
            )
            return reshape_faceted_response(response)
        except Exception as e:
            logger.warning("Error searching jobs with facets: %s", e)
            return FacetedSearchResult()

    def search_with_facets(
        self,
        keyword: str | None = None,
        location: str | None = None,
        date_from: str | None = None,
        date_to: str | None = None,
        page=1,
        limit=None,
    ) -> tuple[FacetedSearchResult, SearchPagination]:
        """Turn raw query parameters into filters and paging, then search."""
        page_number = normalize_page(page)
        page_size = clamp_page_size(limit)

        date_range = None
        if date_from or date_to:
            date_range = DateRange(gte=date_from or None, lte=date_to or None)

        filters = FacetFilters(
            location=location,
            date_range=date_range,
            offset=page_offset(page_number, page_size),
            size=page_size,
        )
        result = self.search_jobs_with_facets(keyword, filters)

        pagination = SearchPagination(
            page=page_number,
            limit=page_size,
            total=result.total,
            total_pages=math.ceil(result.total / page_size),
        )
        return result, pagination
