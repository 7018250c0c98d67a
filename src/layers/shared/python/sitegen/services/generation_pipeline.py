"""Single-job website generation pipeline.

Stages run strictly in order, each advancing the job's step and progress:

    scraping -> analyzing -> selecting_template -> generating_config
    -> enriching_images -> completed

Scraping failures never abort a job. Any other stage error fails the
attempt; the Business record only receives the terminal write (success
payload or failure payload), so a failed job leaves the previously
published site in place.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from sitegen.config import GenerationSettings
from sitegen.integrations.image_checker import HttpImageValidator
from sitegen.integrations.unsplash import UnsplashImageSearch
from sitegen.models.base import utc_now
from sitegen.models.business_understanding import BusinessUnderstanding
from sitegen.models.generation_job import GenerationJob, GenerationJobResult, GenerationStep
from sitegen.models.scraped_data import ScrapedData
from sitegen.repositories.business import BusinessRepository
from sitegen.repositories.generation_job import GenerationJobRepository
from sitegen.services.business_heuristics import coerce_business_understanding
from sitegen.services.business_validation import profile_fingerprint, validate_business_understanding
from sitegen.services.image_enrichment import ImageEnrichmentService
from sitegen.services.secure_fetcher import SecureFetcher, scrape_website
from sitegen.services.template_selector import select_template
from sitegen.services.website_config_generator import generate_website_config
from sitegen.utils.exceptions import (
    ConflictError,
    GenerationTimeoutError,
    NotFoundError,
    ValidationError,
)

logger = structlog.get_logger()


@dataclass
class StagedSite:
    """A generated site waiting for its terminal Business write."""

    template_id: str
    website_config: dict[str, Any]
    image_assets: dict[str, Any]
    analysis: dict[str, Any]
    image_source: str


class GenerationPipeline:
    """Runs one generation job against injected collaborators.

    ``run`` is the complete single-attempt contract. ``attempt`` and
    ``record_failure`` are exposed separately so a retrying caller can
    persist the failure only after its final attempt.
    """

    def __init__(
        self,
        business_repo: BusinessRepository | None = None,
        job_repo: GenerationJobRepository | None = None,
        fetcher: SecureFetcher | None = None,
        image_service: ImageEnrichmentService | None = None,
        settings: GenerationSettings | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the pipeline.

        Args:
            business_repo: Business persistence.
            job_repo: Job progress persistence.
            fetcher: Secure page fetcher.
            image_service: Image enrichment engine.
            settings: Timeouts, table name and provider keys.
            clock: Time source for generated configs.
        """
        self.settings = settings or GenerationSettings.from_env()
        self.business_repo = business_repo or BusinessRepository(self.settings.table_name)
        self.job_repo = job_repo or GenerationJobRepository(self.settings.table_name)
        self.fetcher = fetcher or SecureFetcher(
            timeout=self.settings.fetch_timeout_seconds,
            max_bytes=self.settings.fetch_max_bytes,
            user_agent=self.settings.user_agent,
            resolve_hosts=self.settings.fetch_resolve_hosts,
        )
        self.image_service = image_service or ImageEnrichmentService(
            search_provider=UnsplashImageSearch(
                self.settings.unsplash_access_key,
                timeout=self.settings.image_search_timeout_seconds,
            ),
            validator=HttpImageValidator(timeout=self.settings.image_check_timeout_seconds),
        )
        self.clock = clock
        self.logger = logger.bind(service="generation_pipeline")

    async def run(self, job: GenerationJob) -> GenerationJobResult:
        """Execute one attempt and persist its outcome. Never raises."""
        try:
            return await self.attempt(job)
        except Exception as e:
            return await self.record_failure(job, e)

    async def attempt(self, job: GenerationJob) -> GenerationJobResult:
        """Execute one attempt under the job deadline.

        The deadline covers the stages only. The claim and the success
        write run outside it, so a job that times out never publishes.

        Raises:
            GenerationTimeoutError: If the deadline expires.
            SitegenError: Or any other stage error; nothing is written to
                the Business record in that case.
        """
        job.attempts += 1
        job.error = None
        job.started_at = job.started_at or utc_now()

        await asyncio.to_thread(
            self.business_repo.claim_generation,
            job.business_id,
            job.id,
            self.settings.lock_ttl_seconds,
        )

        timeout = self.settings.job_timeout_seconds
        try:
            staged = await asyncio.wait_for(self._execute(job), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise GenerationTimeoutError(timeout) from e
        return await self._publish(job, staged)

    async def record_failure(self, job: GenerationJob, error: Exception) -> GenerationJobResult:
        """Mark the job failed and write the failure payload to the Business.

        A lost claim or a missing business leaves the Business untouched.
        """
        message = str(error) or type(error).__name__
        result = GenerationJobResult(success=False, business_id=job.business_id, error=message)

        self.logger.error(
            "Website generation failed",
            job_id=job.id,
            business_id=job.business_id,
            step=job.current_step,
            attempts=job.attempts,
            error=message,
        )

        if not isinstance(error, (ConflictError, NotFoundError)):
            try:
                await asyncio.to_thread(self.business_repo.apply_failure, job.business_id, job.id, message)
            except (ConflictError, NotFoundError) as e:
                self.logger.warning(
                    "Failure not recorded on business",
                    job_id=job.id,
                    business_id=job.business_id,
                    error=str(e),
                )

        job.mark_step(GenerationStep.FAILED)
        job.error = message
        job.result = result
        job.finished_at = utc_now()
        await asyncio.to_thread(self.job_repo.save_job, job)

        return result

    async def _advance(self, job: GenerationJob, step: GenerationStep) -> None:
        job.mark_step(step)
        await asyncio.to_thread(self.job_repo.save_job, job)
        self.logger.info("Generation step", job_id=job.id, business_id=job.business_id, step=step.value)

    async def _execute(self, job: GenerationJob) -> StagedSite:
        await self._advance(job, GenerationStep.SCRAPING)
        scraped = ScrapedData()
        if job.source_url:
            scraped = await scrape_website(self.fetcher, job.source_url)

        await self._advance(job, GenerationStep.ANALYZING)
        understanding, coerced_from = self._resolve_understanding(job.business_understanding, scraped)
        analysis: dict[str, Any] = {
            "scrapedData": scraped.to_json_dict(),
            "profileFingerprint": profile_fingerprint(understanding),
        }
        if coerced_from:
            analysis["profileCoercion"] = coerced_from

        await self._advance(job, GenerationStep.SELECTING_TEMPLATE)
        selection = select_template(
            understanding.category,
            understanding.brand_tone,
            list(understanding.services),
            scraped.has_images,
        )
        analysis["templateSelection"] = selection.to_audit_dict()

        await self._advance(job, GenerationStep.GENERATING_CONFIG)
        # Images are filled in by the enrichment stage
        config = generate_website_config(
            understanding.model_copy(update={"image_assets": None}),
            selection.template.id,
            scraped,
            now=self.clock(),
        )

        await self._advance(job, GenerationStep.ENRICHING_IMAGES)
        enrichment = await self.image_service.enrich_images(
            scraped.images,
            understanding.category,
            list(understanding.seo_keywords),
            understanding.name,
        )
        config.hero.hero_image = enrichment.assets.hero
        if enrichment.assets.gallery:
            config.about.image = enrichment.assets.gallery[0]
        analysis["imageEnrichment"] = {
            "source": enrichment.source,
            "count": enrichment.count,
        }

        return StagedSite(
            template_id=selection.template.id,
            website_config=config.to_json_dict(),
            image_assets=enrichment.assets.to_json_dict(),
            analysis=analysis,
            image_source=enrichment.source,
        )

    async def _publish(self, job: GenerationJob, staged: StagedSite) -> GenerationJobResult:
        await asyncio.to_thread(
            self.business_repo.apply_success,
            job.business_id,
            job.id,
            staged.template_id,
            staged.website_config,
            staged.image_assets,
            staged.analysis,
        )

        result = GenerationJobResult(
            success=True,
            business_id=job.business_id,
            template_id=staged.template_id,
        )
        job.mark_step(GenerationStep.COMPLETED)
        job.result = result
        job.finished_at = utc_now()
        await asyncio.to_thread(self.job_repo.save_job, job)

        self.logger.info(
            "Website generation completed",
            job_id=job.id,
            business_id=job.business_id,
            template_id=staged.template_id,
            image_source=staged.image_source,
            attempts=job.attempts,
        )

        return result

    def _resolve_understanding(
        self,
        candidate: dict[str, Any],
        scraped: ScrapedData,
    ) -> tuple[BusinessUnderstanding, list[str] | None]:
        """Validate the incoming profile, coercing legacy or incomplete shapes.

        Returns:
            The validated profile and, when coercion was needed, the
            original validation errors.

        Raises:
            ValidationError: If the profile is still invalid after coercion.
        """
        validation = validate_business_understanding(candidate)
        if validation.valid:
            return validation.data, None

        self.logger.info("Coercing business profile", errors=validation.errors)
        try:
            coerced = coerce_business_understanding(candidate, scraped)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e
        return coerced, validation.errors
