"""Website generation worker.

Consumes generate_website messages from SQS and runs each job through the
generation pipeline with retries. Job progress is persisted on the job
record, so the API polls status by job id independently of this worker.
"""

import asyncio
import json
from typing import Any

import structlog

from sitegen.config import GenerationSettings
from sitegen.models.generation_job import (
    TERMINAL_STEPS,
    GenerationJob,
    GenerationJobResult,
    GenerationStep,
)
from sitegen.queue.generation_orchestrator import GenerationOrchestrator
from sitegen.services.generation_pipeline import GenerationPipeline

logger = structlog.get_logger()

MESSAGE_TYPE = "generate_website"

_orchestrator: GenerationOrchestrator | None = None


def get_orchestrator() -> GenerationOrchestrator:
    """Build the orchestrator once per Lambda container."""
    global _orchestrator
    if _orchestrator is None:
        settings = GenerationSettings.from_env()
        _orchestrator = GenerationOrchestrator(GenerationPipeline(settings=settings))
    return _orchestrator


def handler(event: dict[str, Any], context: Any) -> dict:
    """Process website generation messages from SQS.

    Supports partial batch failure reporting. A message only fails (and is
    redelivered) when the job could not be loaded or created; a job that
    ran to a failed state is terminal and is acknowledged.

    Args:
        event: SQS event with records.
        context: Lambda context.

    Returns:
        Batch item failures for partial retry.
    """
    records = event.get("Records", [])
    batch_item_failures = []

    logger.info("Processing website generation queue", record_count=len(records))

    for record in records:
        try:
            process_record(record)
        except Exception as e:
            logger.exception(
                "Failed to process generation record",
                message_id=record.get("messageId"),
                error=str(e),
            )
            batch_item_failures.append({
                "itemIdentifier": record.get("messageId"),
            })

    return {
        "batchItemFailures": batch_item_failures,
    }


def process_record(record: dict) -> GenerationJobResult | None:
    """Process a single SQS record.

    The body is a JSON object:
        {"type": "generate_website", "job_id"?, "business_id", "user_id",
         "business_understanding", "source_url"?}

    Malformed messages are logged and dropped.

    Args:
        record: SQS record.

    Returns:
        The job result, or None when the message was dropped.
    """
    message_id = record.get("messageId")

    try:
        body = json.loads(record.get("body") or "{}")
    except json.JSONDecodeError:
        logger.error("Invalid JSON in generation message", message_id=message_id)
        return None

    if body.get("type", MESSAGE_TYPE) != MESSAGE_TYPE:
        logger.warning("Unsupported message type", message_id=message_id, type=body.get("type"))
        return None

    business_id = body.get("business_id")
    user_id = body.get("user_id")
    understanding = body.get("business_understanding")

    if not business_id or not user_id or not isinstance(understanding, dict):
        logger.warning(
            "Missing required fields in generation message",
            message_id=message_id,
            business_id=business_id,
            user_id=user_id,
        )
        return None

    orchestrator = get_orchestrator()

    loop = asyncio.new_event_loop()
    try:
        job = loop.run_until_complete(
            _load_or_create_job(orchestrator, body, business_id, user_id, understanding)
        )
        if GenerationStep(job.current_step) in TERMINAL_STEPS:
            # Redelivered after the job already finished
            logger.info("Generation job already finished", job_id=job.id, step=job.current_step)
            return job.result
        result = loop.run_until_complete(orchestrator.run_now(job))
    finally:
        loop.close()

    logger.info(
        "Generation message processed",
        message_id=message_id,
        job_id=job.id,
        business_id=business_id,
        success=result.success,
    )
    return result


async def _load_or_create_job(
    orchestrator: GenerationOrchestrator,
    body: dict,
    business_id: str,
    user_id: str,
    understanding: dict,
) -> GenerationJob:
    """Reuse the job the API already persisted, or create it on first delivery."""
    job_id = body.get("job_id")

    if job_id:
        job = await asyncio.to_thread(orchestrator.job_repo.get_by_id, job_id)
        if job is not None:
            return job

    return await orchestrator.create_job(
        business_id=business_id,
        user_id=user_id,
        business_understanding=understanding,
        source_url=body.get("source_url"),
        job_id=job_id,
    )
