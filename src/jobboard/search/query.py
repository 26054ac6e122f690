"""Search request building and response reshaping for job queries.

Clauses are small typed models that accumulate in a ``SearchRequestBuilder``
and are serialized to the engine's JSON shape once, in ``build()``. Keeping
the clauses typed lets tests assert on query structure without a live engine.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel

from jobboard.models import FacetBucket, FacetedSearchResult, FacetFilters

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
LOCATION_FACET_SIZE = 20

TITLE_BOOST = 2
KEYWORD_FIELDS = ["title", "description"]


# --- Query clauses ---

class MatchAllClause(BaseModel):
    def to_dict(self) -> dict:
        return {"match_all": {}}


class MultiMatchClause(BaseModel):
    query: str
    fields: list[str]
    type: str | None = None
    fuzziness: str | None = None

    def to_dict(self) -> dict:
        body = {"query": self.query, "fields": list(self.fields)}
        if self.type:
            body["type"] = self.type
        if self.fuzziness:
            body["fuzziness"] = self.fuzziness
        return {"multi_match": body}


class TermClause(BaseModel):
    field: str
    value: str

    def to_dict(self) -> dict:
        return {"term": {self.field: self.value}}


class RangeClause(BaseModel):
    field: str
    gte: str | None = None
    lte: str | None = None

    def to_dict(self) -> dict:
        bounds = {}
        if self.gte:
            bounds["gte"] = self.gte
        if self.lte:
            bounds["lte"] = self.lte
        return {"range": {self.field: bounds}}


# --- Aggregations ---

class TermsAggregation(BaseModel):
    name: str
    field: str
    size: int = 10

    def to_dict(self) -> dict:
        return {"terms": {"field": self.field, "size": self.size}}


class DateHistogramAggregation(BaseModel):
    name: str
    field: str
    calendar_interval: str = "month"
    format: str = "yyyy-MM"

    def to_dict(self) -> dict:
        return {
            "date_histogram": {
                "field": self.field,
                "calendar_interval": self.calendar_interval,
                "format": self.format,
            }
        }


class SortKey(BaseModel):
    field: str
    order: str = "desc"

    def to_dict(self) -> dict:
        return {self.field: {"order": self.order}}


class SearchRequestBuilder:
    """Accumulates scoring, filter and aggregation clauses for one request."""

    def __init__(self) -> None:
        self.must: list = []
        self.filter: list = []
        self.aggregations: list = []
        self.sort: list[SortKey] = []
        self.offset: int | None = None
        self.size: int | None = None

    def add_must(self, clause) -> SearchRequestBuilder:
        self.must.append(clause)
        return self

    def add_filter(self, clause) -> SearchRequestBuilder:
        self.filter.append(clause)
        return self

    def add_aggregation(self, aggregation) -> SearchRequestBuilder:
        self.aggregations.append(aggregation)
        return self

    def add_sort(self, field: str, order: str = "desc") -> SearchRequestBuilder:
        self.sort.append(SortKey(field=field, order=order))
        return self

    def paginate(self, offset: int, size: int) -> SearchRequestBuilder:
        self.offset = offset
        self.size = size
        return self

    def build(self) -> dict:
        """Serialize the accumulated clauses into a request body."""
        if not self.must and not self.filter:
            query = MatchAllClause().to_dict()
        else:
            bool_query = {}
            if self.must:
                bool_query["must"] = [c.to_dict() for c in self.must]
            if self.filter:
                bool_query["filter"] = [c.to_dict() for c in self.filter]
            query = {"bool": bool_query}

        body = {"query": query}
        if self.aggregations:
            body["aggs"] = {a.name: a.to_dict() for a in self.aggregations}
        if self.sort:
            body["sort"] = [s.to_dict() for s in self.sort]
        if self.size is not None:
            body["size"] = self.size
        if self.offset is not None:
            body["from"] = self.offset
        return body


# --- Pagination ---

def _to_int(value) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def clamp_page_size(limit) -> int:
    """Effective page size: default 20 when missing or invalid, never above 100."""
    size = _to_int(limit)
    if size is None or size < 1:
        return DEFAULT_PAGE_SIZE
    return min(size, MAX_PAGE_SIZE)


def normalize_page(page) -> int:
    """1-based page number; anything missing or below 1 becomes 1."""
    number = _to_int(page)
    if number is None or number < 1:
        return 1
    return number


def page_offset(page: int, page_size: int) -> int:
    return (page - 1) * page_size


# --- Request planning ---

def build_simple_query(keyword: str | None = None, location: str | None = None) -> dict:
    """Plain keyword/location filter over jobs, without facets."""
    builder = SearchRequestBuilder()
    if keyword:
        builder.add_must(MultiMatchClause(query=keyword, fields=KEYWORD_FIELDS))
    if location:
        builder.add_filter(TermClause(field="location", value=location))
    builder.size = MAX_PAGE_SIZE
    return builder.build()


def build_faceted_query(keyword: str | None, filters: FacetFilters) -> dict:
    """Scored, filtered, paginated job search with location and month facets."""
    builder = SearchRequestBuilder()

    if keyword and keyword.strip():
        builder.add_must(
            MultiMatchClause(
                query=keyword.strip(),
                fields=[f"title^{TITLE_BOOST}", "description"],
                type="best_fields",
                fuzziness="AUTO",
            )
        )
    else:
        builder.add_must(MatchAllClause())

    if filters.location and filters.location.strip():
        builder.add_filter(TermClause(field="location", value=filters.location))

    date_range = filters.date_range
    if date_range and (date_range.gte or date_range.lte):
        builder.add_filter(
            RangeClause(field="createdAt", gte=date_range.gte, lte=date_range.lte)
        )

    builder.add_aggregation(
        TermsAggregation(name="locations", field="location", size=LOCATION_FACET_SIZE)
    )
    builder.add_aggregation(
        DateHistogramAggregation(name="creation_dates", field="createdAt")
    )
    builder.add_sort("_score", "desc").add_sort("createdAt", "desc")
    builder.paginate(filters.offset, filters.size)
    return builder.build()


# --- Response reshaping ---

def _hits(response) -> list | None:
    if not isinstance(response, dict):
        return None
    hits = response.get("hits")
    if not isinstance(hits, dict) or not isinstance(hits.get("hits"), list):
        return None
    return hits["hits"]


def extract_documents(response) -> list[dict]:
    """Return the ``_source`` of each hit, in engine order."""
    hits = _hits(response) or []
    return [hit.get("_source", {}) for hit in hits]


def extract_total(response) -> int:
    """Total hit count, tolerating both ``{"value": n}`` and bare-integer totals."""
    try:
        total = response["hits"]["total"]
    except (KeyError, TypeError):
        return 0
    if isinstance(total, dict):
        total = total.get("value", 0)
    return total if isinstance(total, int) else 0


def _buckets(response, name: str, label_key: str) -> list[FacetBucket]:
    try:
        buckets = response["aggregations"][name]["buckets"]
    except (KeyError, TypeError):
        return []
    if not isinstance(buckets, list):
        return []

    result = []
    for bucket in buckets:
        label = bucket.get(label_key, bucket.get("key"))
        if label is None:
            continue
        result.append(FacetBucket(value=str(label), count=bucket.get("doc_count", 0)))
    return result


def reshape_faceted_response(response) -> FacetedSearchResult:
    """Turn a raw engine response into the ``{jobs, facets, total}`` contract."""
    hits = _hits(response)
    if hits is None:
        logger.warning("Invalid search response structure: %r", response)
        return FacetedSearchResult()

    jobs = [{**hit.get("_source", {}), "score": hit.get("_score")} for hit in hits]
    facets = {
        "locations": _buckets(response, "locations", "key"),
        "creationDates": _buckets(response, "creation_dates", "key_as_string"),
    }
    return FacetedSearchResult(jobs=jobs, facets=facets, total=extract_total(response))
