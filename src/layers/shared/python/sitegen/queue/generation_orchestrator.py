"""In-process job orchestrator for website generation.

Owns an asyncio queue drained by a small fixed pool of workers. Each job
runs through the GenerationPipeline under an explicit RetryPolicy, and
progress lives on the persisted job record, so status can be polled from
any process.

Usage:
    orchestrator = GenerationOrchestrator(GenerationPipeline())
    await orchestrator.start()
    job_id = await orchestrator.enqueue_or_run(business_id, user_id, profile, source_url)
    status = await orchestrator.get_status(job_id)
    await orchestrator.stop()
"""

import asyncio
from typing import Any

import structlog

from sitegen.execution.retry_policy import RetryConfig, RetryPolicy
from sitegen.models.business_understanding import BusinessUnderstanding
from sitegen.models.generation_job import (
    GenerationJob,
    GenerationJobResult,
    GenerationStep,
    JobStatus,
)
from sitegen.services.generation_pipeline import GenerationPipeline

logger = structlog.get_logger()


class GenerationOrchestrator:
    """Queue plus worker pool with start/stop lifecycle.

    Before ``start`` (or after ``stop``) ``enqueue_or_run`` runs the job
    inline instead of queueing it.
    """

    def __init__(
        self,
        pipeline: GenerationPipeline,
        retry_policy: RetryPolicy | None = None,
        concurrency: int | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            pipeline: Pipeline that executes one attempt.
            retry_policy: Attempts and backoff; built from the pipeline's
                settings when omitted.
            concurrency: Number of workers; defaults to the settings value.
        """
        settings = pipeline.settings
        self.pipeline = pipeline
        self.job_repo = pipeline.job_repo
        self.retry_policy = retry_policy or RetryPolicy(
            RetryConfig.from_settings(settings.max_attempts, settings.backoff_seconds)
        )
        self.concurrency = max(1, concurrency or settings.concurrency)
        self._queue: asyncio.Queue[GenerationJob] | None = None
        self._workers: list[asyncio.Task] = []
        self.logger = logger.bind(service="generation_orchestrator")

    @property
    def running(self) -> bool:
        """Whether workers are accepting queued jobs."""
        return bool(self._workers)

    async def start(self) -> None:
        """Start the worker pool. Calling start twice is a no-op."""
        if self.running:
            return

        self._queue = asyncio.Queue()
        self._workers = [
            asyncio.create_task(self._worker(index), name=f"generation-worker-{index}")
            for index in range(self.concurrency)
        ]
        self.logger.info("Generation workers started", concurrency=self.concurrency)

    async def stop(self, drain: bool = True) -> None:
        """Stop the worker pool.

        Args:
            drain: Wait for queued jobs to finish before cancelling workers.
        """
        if not self.running:
            return

        if drain and self._queue is not None:
            await self._queue.join()

        workers, self._workers = self._workers, []
        for task in workers:
            task.cancel()
        await asyncio.gather(*workers, return_exceptions=True)

        self._queue = None
        self.logger.info("Generation workers stopped")

    async def create_job(
        self,
        business_id: str,
        user_id: str,
        business_understanding: BusinessUnderstanding | dict[str, Any],
        source_url: str | None = None,
        job_id: str | None = None,
    ) -> GenerationJob:
        """Persist a new queued job."""
        if isinstance(business_understanding, BusinessUnderstanding):
            business_understanding = business_understanding.to_json_dict()

        job = GenerationJob(
            business_id=business_id,
            user_id=user_id,
            business_understanding=business_understanding,
            source_url=source_url,
        )
        if job_id:
            job.id = job_id

        await asyncio.to_thread(self.job_repo.create_job, job)
        self.logger.info("Generation job created", job_id=job.id, business_id=business_id)
        return job

    async def enqueue_or_run(
        self,
        business_id: str,
        user_id: str,
        business_understanding: BusinessUnderstanding | dict[str, Any],
        source_url: str | None = None,
    ) -> str:
        """Create a job and queue it, or run it inline when not started.

        Returns:
            The job id.
        """
        job = await self.create_job(business_id, user_id, business_understanding, source_url)

        if self.running and self._queue is not None:
            self._queue.put_nowait(job)
            self.logger.info("Generation job queued", job_id=job.id, queue_depth=self._queue.qsize())
        else:
            await self.run_now(job)

        return job.id

    async def run_now(self, job: GenerationJob) -> GenerationJobResult:
        """Run a job to a terminal state with retries.

        Permanent errors end the job after one attempt. The failure payload
        is written once, after the last attempt.
        """

        async def attempt() -> GenerationJobResult:
            if job.attempts > 0:
                # Show the retry as queued while it waits for its next attempt
                job.mark_step(GenerationStep.QUEUED)
                await asyncio.to_thread(self.job_repo.save_job, job)
            return await self.pipeline.attempt(job)

        outcome = await self.retry_policy.execute(
            attempt,
            context={"job_id": job.id, "business_id": job.business_id},
        )
        if outcome.success:
            return outcome.value

        return await self.pipeline.record_failure(job, outcome.error)

    async def get_status(self, job_id: str) -> JobStatus:
        """Polling view of a job; unknown ids report a failed "Job not found"."""
        job = await asyncio.to_thread(self.job_repo.get_by_id, job_id)
        if job is None:
            return JobStatus.not_found()
        return JobStatus.from_job(job)

    async def _worker(self, index: int) -> None:
        while True:
            job = await self._queue.get()
            try:
                await self.run_now(job)
            except Exception:
                self.logger.exception("Generation worker error", worker=index, job_id=job.id)
            finally:
                self._queue.task_done()
