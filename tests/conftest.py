"""Shared test fixtures for the job board."""

from datetime import datetime

import pytest

from jobboard.config import SearchConfig
from jobboard.db import get_session, init_db
from jobboard.models import Application, Job
from jobboard.search import DocumentMirror, JobSearchService, SearchIndexClient


# --- In-memory search engine double ---

def _edit_distance(a: str, b: str) -> int:
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        cur = [i]
        for j, cb in enumerate(b, 1):
            cur.append(min(prev[j] + 1, cur[j - 1] + 1, prev[j - 1] + (ca != cb)))
        prev = cur
    return prev[-1]


def _auto_fuzziness(term: str) -> int:
    if len(term) <= 2:
        return 0
    if len(term) <= 5:
        return 1
    return 2


class FakeResponse:
    def __init__(self, body):
        self.body = body


class FakeIndices:
    def __init__(self, engine):
        self._engine = engine

    def exists(self, index):
        self._engine.calls.append(("indices.exists", index))
        return index in self._engine.mappings

    def create(self, index, mappings):
        self._engine.calls.append(("indices.create", index))
        self._engine.mappings[index] = mappings
        self._engine.docs.setdefault(index, {})

    def refresh(self, index):
        self._engine.calls.append(("indices.refresh", index))
        self._engine.refreshes[index] = self._engine.refreshes.get(index, 0) + 1


class InMemoryElasticsearch:
    """Answers the subset of the search API the job board emits.

    Scoring is a rough stand-in for BM25: each matched query term counts one
    point per field, multiplied by the field boost, best field wins. Fuzzy
    matching follows the AUTO edit-distance thresholds. Aggregations run over
    the filtered hit set, as the real engine does.
    """

    def __init__(self, alive: bool = True):
        self.alive = alive
        self.mappings: dict[str, dict] = {}
        self.docs: dict[str, dict[str, dict]] = {}
        self.refreshes: dict[str, int] = {}
        self.calls: list[tuple] = []
        self.indices = FakeIndices(self)

    def ping(self):
        self.calls.append(("ping",))
        return self.alive

    def index(self, index, id, document):
        self.calls.append(("index", index, id))
        self.docs.setdefault(index, {})[id] = dict(document)

    # --- query evaluation ---

    def _term_score(self, term, text, fuzzy):
        words = str(text).lower().split()
        if not fuzzy:
            return sum(1 for w in words if w == term)
        limit = _auto_fuzziness(term)
        return sum(1 for w in words if _edit_distance(w, term) <= limit)

    def _score_clause(self, clause, doc):
        """Return a score, or None if the clause does not match."""
        if "match_all" in clause:
            return 1.0
        if "multi_match" in clause:
            mm = clause["multi_match"]
            terms = mm["query"].lower().split()
            fuzzy = mm.get("fuzziness") == "AUTO"
            best = 0.0
            for field_spec in mm["fields"]:
                field, _, boost = field_spec.partition("^")
                weight = float(boost) if boost else 1.0
                score = sum(self._term_score(t, doc.get(field, ""), fuzzy) for t in terms)
                best = max(best, score * weight)
            return best if best > 0 else None
        if "term" in clause:
            field, value = next(iter(clause["term"].items()))
            return 0.0 if doc.get(field) == value else None
        if "range" in clause:
            field, bounds = next(iter(clause["range"].items()))
            value = str(doc.get(field, ""))
            if "gte" in bounds and value < bounds["gte"]:
                return None
            if "lte" in bounds and value[: len(bounds["lte"])] > bounds["lte"]:
                return None
            return 0.0
        if "bool" in clause:
            total = 0.0
            for sub in clause["bool"].get("must", []):
                score = self._score_clause(sub, doc)
                if score is None:
                    return None
                total += score
            for sub in clause["bool"].get("filter", []):
                if self._score_clause(sub, doc) is None:
                    return None
            return total
        raise ValueError(f"Unsupported clause: {clause}")

    def _aggregate(self, aggs, docs):
        result = {}
        for name, agg in aggs.items():
            if "terms" in agg:
                field = agg["terms"]["field"]
                counts = {}
                for d in docs:
                    counts[d[field]] = counts.get(d[field], 0) + 1
                ordered = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
                ordered = ordered[: agg["terms"].get("size", 10)]
                result[name] = {"buckets": [{"key": k, "doc_count": c} for k, c in ordered]}
            elif "date_histogram" in agg:
                field = agg["date_histogram"]["field"]
                counts = {}
                for d in docs:
                    month = str(d[field])[:7]
                    counts[month] = counts.get(month, 0) + 1
                result[name] = {
                    "buckets": [
                        {"key_as_string": k, "key": k, "doc_count": c}
                        for k, c in sorted(counts.items())
                    ]
                }
        return result

    def search(self, index, query, aggs=None, sort=None, size=10, from_=0):
        self.calls.append(("search", index))
        matched = []
        for doc_id, doc in self.docs.get(index, {}).items():
            score = self._score_clause(query, doc)
            if score is not None:
                matched.append((score, doc_id, doc))

        for key in reversed(sort or [{"_score": {"order": "desc"}}]):
            field, order = next(iter(key.items()))
            reverse = order["order"] == "desc"
            if field == "_score":
                matched.sort(key=lambda m: m[0], reverse=reverse)
            else:
                matched.sort(key=lambda m: str(m[2].get(field, "")), reverse=reverse)

        page = matched[from_: from_ + size]
        body = {
            "hits": {
                "total": {"value": len(matched), "relation": "eq"},
                "hits": [
                    {"_index": index, "_id": doc_id, "_score": score, "_source": dict(doc)}
                    for score, doc_id, doc in page
                ],
            }
        }
        if aggs:
            body["aggregations"] = self._aggregate(aggs, [m[2] for m in matched])
        return FakeResponse(body)


# --- Fixtures ---

@pytest.fixture
def search_config():
    return SearchConfig()


@pytest.fixture
def make_es():
    """Factory for fresh in-memory engines."""
    return InMemoryElasticsearch


@pytest.fixture
def es_double(make_es):
    return make_es()


@pytest.fixture
def index_client(search_config, es_double):
    """A probed client talking to the in-memory engine, with empty indices."""
    client = SearchIndexClient(search_config, es=es_double)
    client.probe()
    es_double.indices.create(index=search_config.jobs_index, mappings={})
    es_double.indices.create(index=search_config.applications_index, mappings={})
    es_double.calls.clear()
    return client


@pytest.fixture
def down_client(search_config):
    """A probed client whose engine never answered the ping."""
    client = SearchIndexClient(search_config, es=InMemoryElasticsearch(alive=False))
    client.probe()
    return client


@pytest.fixture
def mirror(index_client, search_config):
    return DocumentMirror(index_client, search_config)


@pytest.fixture
def search_service(index_client, search_config, mirror):
    return JobSearchService(index_client, search_config, mirror=mirror)


@pytest.fixture
def db_engine(tmp_path):
    return init_db(str(tmp_path / "test.db"))


@pytest.fixture
def db_session(db_engine):
    session = get_session(db_engine)
    yield session
    session.close()


@pytest.fixture
def backend_job():
    return Job(
        id=1,
        title="Backend Engineer",
        description="Build APIs",
        location="Remote",
        created_at=datetime(2026, 3, 10, 9, 0),
        updated_at=datetime(2026, 3, 10, 9, 0),
    )


@pytest.fixture
def nyc_job():
    return Job(
        id=2,
        title="Data Analyst",
        description="Dashboards and backend reporting in SQL",
        location="NYC",
        created_at=datetime(2026, 4, 2, 14, 30),
        updated_at=datetime(2026, 4, 2, 14, 30),
    )


@pytest.fixture
def sample_application():
    return Application(
        id=7,
        job_id=1,
        applicant_name="Ada Lovelace",
        email="ada@example.com",
        resume_url="https://example.com/ada.pdf",
        created_at=datetime(2026, 3, 11, 8, 0),
        updated_at=datetime(2026, 3, 11, 8, 0),
    )
