"""Best-effort replication of freshly written rows into the search index."""

import logging
import threading
from collections import Counter

from jobboard.config import SearchConfig
from jobboard.models import Application, Job, MirrorOutcome
from jobboard.search.client import SearchIndexClient

logger = logging.getLogger(__name__)


class MirrorStats:
    """Per-kind outcome counters for mirror writes."""

    def __init__(self) -> None:
        self._counts: Counter = Counter()
        self._lock = threading.Lock()

    def record(self, kind: str, outcome: MirrorOutcome) -> None:
        with self._lock:
            self._counts[(kind, outcome)] += 1

    def count(self, kind: str, outcome: MirrorOutcome) -> int:
        with self._lock:
            return self._counts[(kind, outcome)]

    def snapshot(self) -> dict[str, dict[str, int]]:
        """Return counts as {kind: {outcome: n}} with every outcome present."""
        with self._lock:
            kinds = sorted({kind for kind, _ in self._counts})
            return {
                kind: {o.value: self._counts[(kind, o)] for o in MirrorOutcome}
                for kind in kinds
            }


def job_document(job: Job) -> dict:
    """Build the search document for a job."""
    return job.model_dump(
        mode="json",
        by_alias=True,
        include={"id", "title", "description", "location", "created_at", "updated_at"},
    )


def application_document(application: Application) -> dict:
    """Build the search document for an application, without the embedded job summary."""
    return application.model_dump(
        mode="json",
        by_alias=True,
        include={
            "id",
            "job_id",
            "applicant_name",
            "email",
            "resume_url",
            "created_at",
            "updated_at",
        },
    )


class DocumentMirror:
    """Fire-and-forget upserts of single entities into their indices.

    The relational write has already committed when a mirror runs, so a
    failure here is only logged and counted. Nothing is retried or rolled back.
    """

    def __init__(
        self,
        client: SearchIndexClient,
        config: SearchConfig,
        stats: MirrorStats | None = None,
    ) -> None:
        self.client = client
        self.config = config
        self.stats = stats or MirrorStats()

    def mirror_job(self, job: Job) -> MirrorOutcome:
        return self._mirror("job", self.config.jobs_index, job.id, job_document, job)

    def mirror_application(self, application: Application) -> MirrorOutcome:
        return self._mirror(
            "application",
            self.config.applications_index,
            application.id,
            application_document,
            application,
        )

    def _mirror(self, kind, index, doc_id, build, entity) -> MirrorOutcome:
        if not self.client.available:
            outcome = MirrorOutcome.SKIPPED_UNAVAILABLE
        else:
            try:
                self.client.upsert_document(index, doc_id, build(entity))
                outcome = MirrorOutcome.SUCCESS
            except Exception as e:
                logger.warning("Error indexing %s %s: %s", kind, doc_id, e)
                outcome = MirrorOutcome.FAILED

        self.stats.record(kind, outcome)
        return outcome
