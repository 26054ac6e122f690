"""Search index client wrapping the Elasticsearch connection."""

from __future__ import annotations

import logging

from elasticsearch import Elasticsearch

from jobboard.config import SearchConfig
from jobboard.models import IndexAvailability

logger = logging.getLogger(__name__)


class SearchIndexClient:
    """Thin wrapper around an Elasticsearch client gated by a probed availability.

    ``probe()`` is the only call that talks to the engine regardless of state.
    Until it succeeds every other operation is a no-op returning a neutral
    value, so callers only check ``available`` when they need to tell a skip
    from a success. Engine errors raised while available propagate; the mirror
    and query planner own the recovery policy.
    """

    def __init__(self, config: SearchConfig, es: Elasticsearch | None = None) -> None:
        self._config = config
        self._es = es  # Lazy init
        self._availability = IndexAvailability.UNKNOWN

    @property
    def availability(self) -> IndexAvailability:
        return self._availability

    @property
    def available(self) -> bool:
        return self._availability is IndexAvailability.AVAILABLE

    def _get_es(self) -> Elasticsearch:
        """Lazily build the Elasticsearch client from config."""
        if self._es is not None:
            return self._es

        kwargs = {"request_timeout": self._config.request_timeout}
        password = self._config.effective_password
        if self._config.username and password:
            kwargs["basic_auth"] = (self._config.username, password)

        self._es = Elasticsearch(self._config.url, **kwargs)
        return self._es

    def probe(self) -> bool:
        """Ping the engine and latch the availability for this instance."""
        if not self._config.enabled:
            self._availability = IndexAvailability.UNAVAILABLE
            logger.info("Search index disabled by configuration")
            return False

        try:
            alive = bool(self._get_es().ping())
        except Exception as e:
            logger.warning("Search index ping failed: %s", e)
            alive = False

        if alive:
            self._availability = IndexAvailability.AVAILABLE
            logger.info("Search index connection established at %s", self._config.url)
        else:
            self._availability = IndexAvailability.UNAVAILABLE
            logger.warning("Search index not available. Search functionality will be disabled.")
        return alive

    def index_exists(self, name: str) -> bool:
        if not self.available:
            return False
        return bool(self._get_es().indices.exists(index=name))

    def create_index(self, name: str, mapping: dict) -> bool:
        if not self.available:
            return False
        self._get_es().indices.create(index=name, mappings=mapping)
        return True

    def upsert_document(self, index: str, doc_id: int, body: dict) -> bool:
        """Index a document under its source id, replacing any previous version."""
        if not self.available:
            return False
        self._get_es().index(index=index, id=str(doc_id), document=body)
        return True

    def search(self, index: str, request_body: dict) -> dict:
        """Run a search and return the raw response body."""
        if not self.available:
            return {}
        params = dict(request_body)
        if "from" in params:
            params["from_"] = params.pop("from")
        response = self._get_es().search(index=index, **params)
        return response.body

    def refresh(self, index: str) -> bool:
        if not self.available:
            return False
        self._get_es().indices.refresh(index=index)
        return True
