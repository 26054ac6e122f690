"""Bulk copy of relational job rows into the jobs index."""

import logging

from sqlalchemy.orm import Session

from jobboard.db import list_all_jobs
from jobboard.models import MirrorOutcome, ReindexReport
from jobboard.search.mirror import DocumentMirror

logger = logging.getLogger(__name__)


def reindex_all_jobs(session: Session, mirror: DocumentMirror) -> ReindexReport:
    """Upsert every job into the index one by one, then refresh it.

    Documents are keyed by row id, so running this twice leaves one document
    per job. Applications are not part of this pass.
    """
    client = mirror.client
    if not client.available:
        logger.info("Search index not available, skipping reindexing")
        return ReindexReport(skipped=True)

    report = ReindexReport()
    try:
        jobs = list_all_jobs(session, newest_first=False)
        report.total = len(jobs)
        logger.info("Reindexing %d jobs...", report.total)

        for job in jobs:
            if mirror.mirror_job(job) is MirrorOutcome.SUCCESS:
                report.indexed += 1
            else:
                report.failed += 1

        # Make the documents searchable without waiting for the refresh interval
        report.refreshed = client.refresh(mirror.config.jobs_index)
    except Exception as e:
        logger.error("Error reindexing jobs: %s", e)
        return report

    logger.info(
        "Reindexed %d/%d jobs (%d failed)", report.indexed, report.total, report.failed
    )
    return report
