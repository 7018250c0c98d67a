"""Business repository for DynamoDB operations."""

from datetime import timedelta
from typing import Any

import structlog
from botocore.exceptions import ClientError

from sitegen.models.base import utc_now
from sitegen.models.business import Business, GenerationStatus
from sitegen.models.generation_job import GenerationStep
from sitegen.repositories.base import BaseRepository, is_conditional_check_failure
from sitegen.utils.exceptions import ConflictError

logger = structlog.get_logger()

# Read-merge-update retries when another writer bumps the version in between
MAX_MERGE_ATTEMPTS = 3


class BusinessRepository(BaseRepository[Business]):
    """Repository for the Business record a generation job publishes into.

    Every job writes the record in three places:

    - ``claim_generation`` marks it processing for this job (conditional write)
    - ``apply_success`` publishes template, config, images and merged analysis
    - ``apply_failure`` records the error and leaves the published config alone
    """

    def __init__(self, table_name: str | None = None):
        """Initialize business repository."""
        super().__init__(Business, table_name)

    def get_by_id(self, business_id: str) -> Business | None:
        """Get a business by ID."""
        return self.get(pk=f"BIZ#{business_id}", sk="PROFILE")

    def create_business(self, business: Business) -> Business:
        """Create a new business record."""
        return self.create(business)

    def claim_generation(
        self,
        business_id: str,
        job_id: str,
        lock_ttl_seconds: int = 600,
    ) -> None:
        """Mark the business as processing for one job.

        The claim succeeds when no generation is in flight, when this job
        already holds it (retried attempt), or when the current claim is
        older than ``lock_ttl_seconds``.

        Raises:
            NotFoundError: If the business does not exist.
            ConflictError: If another job holds a live claim.
        """
        self.get_or_raise(f"BIZ#{business_id}", "PROFILE", "Business", business_id)

        now = utc_now()
        stale_before = (now - timedelta(seconds=lock_ttl_seconds)).isoformat()

        try:
            self.table.update_item(
                Key=self._build_key(f"BIZ#{business_id}", "PROFILE"),
                UpdateExpression=(
                    "SET generationStatus = :processing, generationJobId = :job_id, "
                    "generationStartedAt = :now, generationStep = :step, updatedAt = :now "
                    "ADD version :one"
                ),
                ConditionExpression=(
                    "attribute_exists(PK) AND ("
                    "attribute_not_exists(generationStatus) OR generationStatus <> :processing "
                    "OR generationJobId = :job_id OR generationStartedAt < :stale_before)"
                ),
                ExpressionAttributeValues={
                    ":processing": GenerationStatus.PROCESSING.value,
                    ":job_id": job_id,
                    ":now": now.isoformat(),
                    ":step": GenerationStep.QUEUED.value,
                    ":stale_before": stale_before,
                    ":one": 1,
                },
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                logger.warning(
                    "Generation already in progress",
                    business_id=business_id,
                    job_id=job_id,
                )
                raise ConflictError(
                    f"Generation already in progress for business {business_id}",
                    conflict_type="generation_in_progress",
                )
            logger.error("DynamoDB claim failed", error=str(e), business_id=business_id)
            raise

        logger.info("Generation claimed", business_id=business_id, job_id=job_id)

    def apply_success(
        self,
        business_id: str,
        job_id: str,
        template_id: str,
        website_config: dict[str, Any],
        image_assets: dict[str, Any],
        analysis_updates: dict[str, Any],
    ) -> Business:
        """Publish a generated site and merge the analysis audit trail.

        Raises:
            ConflictError: If another job has taken over the business.
        """

        def apply(business: Business) -> None:
            business.template_id = template_id
            business.website_config = website_config
            business.image_assets = image_assets
            business.generation_status = GenerationStatus.COMPLETED
            business.generation_step = None
            business.merge_analysis(analysis_updates)

        return self._merge_update(business_id, job_id, apply)

    def apply_failure(self, business_id: str, job_id: str, error: str) -> Business:
        """Record a failed generation, keeping the last published config.

        The failure is also recorded when this job never obtained its
        claim, as long as no other job is processing the business.

        Raises:
            ConflictError: If another job is processing the business.
        """

        def apply(business: Business) -> None:
            business.generation_status = GenerationStatus.FAILED
            business.generation_step = error

        return self._merge_update(business_id, job_id, apply, require_claim=False)

    def _merge_update(self, business_id: str, job_id: str, apply, require_claim: bool = True) -> Business:
        last_error: ConflictError | None = None

        for _ in range(MAX_MERGE_ATTEMPTS):
            business = self.get_or_raise(f"BIZ#{business_id}", "PROFILE", "Business", business_id)

            owner = business.generation_job_id
            if owner not in (None, job_id) and (
                require_claim or business.generation_status == GenerationStatus.PROCESSING
            ):
                raise ConflictError(
                    f"Business {business_id} is claimed by job {owner}",
                    conflict_type="generation_claim_lost",
                )

            apply(business)
            business.generation_job_id = job_id

            try:
                return self.update(business)
            except ConflictError as e:
                last_error = e
                logger.info(
                    "Business modified concurrently, re-reading",
                    business_id=business_id,
                    job_id=job_id,
                )

        raise last_error
