"""Generation job repository for DynamoDB operations."""

import structlog

from sitegen.models.generation_job import GenerationJob
from sitegen.repositories.base import BaseRepository

logger = structlog.get_logger()


class GenerationJobRepository(BaseRepository[GenerationJob]):
    """Repository for generation job records.

    Jobs live under their business partition and are also indexed on GSI1
    by job id, so a status poll only needs the job id.
    """

    def __init__(self, table_name: str | None = None):
        """Initialize generation job repository."""
        super().__init__(GenerationJob, table_name)

    def get_by_id(self, job_id: str) -> GenerationJob | None:
        """Get a job by ID via GSI1."""
        items, _ = self.query(pk=f"GENJOB#{job_id}", index_name="GSI1", limit=1)
        return items[0] if items else None

    def list_by_business(self, business_id: str, limit: int = 20) -> list[GenerationJob]:
        """List jobs for a business, newest first (ULIDs sort by time)."""
        items, _ = self.query(
            pk=f"BIZ#{business_id}",
            sk_begins_with="GENJOB#",
            limit=limit,
            scan_forward=False,
        )
        return items

    def create_job(self, job: GenerationJob) -> GenerationJob:
        """Create a new job record."""
        return self.create(job, gsi_keys=job.get_gsi1_keys())

    def save_job(self, job: GenerationJob) -> GenerationJob:
        """Persist job progress.

        A job has a single writer (the worker running it), so no version
        check is applied.
        """
        job.increment_version()
        saved = self.put(job, gsi_keys=job.get_gsi1_keys())
        logger.debug(
            "Job progress saved",
            job_id=job.id,
            step=job.current_step,
            progress=job.progress,
        )
        return saved
