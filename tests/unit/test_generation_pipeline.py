"""Tests for the website generation pipeline."""

import asyncio
import time
from unittest.mock import patch

import httpx
import pytest
from botocore.exceptions import ClientError

from sitegen.config import GenerationSettings
from sitegen.models.business import GenerationStatus
from sitegen.models.generation_job import GenerationJob, GenerationStep, JobState
from sitegen.services.generation_pipeline import GenerationPipeline
from sitegen.services.image_enrichment import ImageEnrichmentService, get_fallback_images
from sitegen.services.secure_fetcher import SecureFetcher
from sitegen.utils.exceptions import GenerationTimeoutError

PAGE = """
<html>
  <head>
    <title>Bella Cucina</title>
    <meta name="description" content="Handmade pasta in Portland">
  </head>
  <body>
    <img src="/img/pasta.jpg">
    <img src="/img/dining-room.jpg">
  </body>
</html>
"""


def timeout_handler(request: httpx.Request) -> httpx.Response:
    raise httpx.ReadTimeout("timed out", request=request)


def page_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, html=PAGE)


@pytest.fixture
def make_pipeline(business_repo, job_repo, fixed_now):
    """Pipeline wired to moto repositories, a mock transport and no image providers."""

    def factory(handler=timeout_handler, **settings) -> GenerationPipeline:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return GenerationPipeline(
            business_repo=business_repo,
            job_repo=job_repo,
            fetcher=SecureFetcher(client=client, resolve_hosts=False),
            image_service=ImageEnrichmentService(),
            settings=GenerationSettings(table_name="sitegen-test", job_timeout_seconds=5, **settings),
            clock=lambda: fixed_now,
        )

    return factory


def make_job(job_repo, business_id: str, profile: dict, source_url: str | None = None) -> GenerationJob:
    job = GenerationJob(
        business_id=business_id,
        user_id="user-456",
        business_understanding=profile,
        source_url=source_url,
    )
    return job_repo.create_job(job)


class TestGenerationPipeline:
    """Tests for GenerationPipeline.run."""

    @pytest.mark.asyncio
    async def test_successful_run(self, make_pipeline, business_repo, job_repo, sample_business, sample_profile):
        """Test a full run publishes the site even when scraping times out."""
        job = make_job(job_repo, sample_business.id, sample_profile, "https://bellacucina.com")

        result = await make_pipeline().run(job)

        assert result.success is True
        assert result.template_id == "image-heavy"
        assert result.website_config_id is None

        business = business_repo.get_by_id(sample_business.id)
        fallback = get_fallback_images("restaurant")
        assert business.generation_status == GenerationStatus.COMPLETED
        assert business.template_id == "image-heavy"
        assert business.website_config["hero"]["heroImage"] == fallback[0]
        assert business.website_config["about"]["image"] == fallback[1]
        assert business.image_assets == {"hero": fallback[0], "gallery": fallback[1:]}

        analysis = business.analysis
        assert analysis["scrapedData"]["error"] == "timeout"
        assert len(analysis["profileFingerprint"]) == 64
        assert analysis["templateSelection"]["templateId"] == "image-heavy"
        assert analysis["imageEnrichment"] == {"source": "fallback", "count": 4}
        assert "profileCoercion" not in analysis

        stored = job_repo.get_by_id(job.id)
        assert stored.state == JobState.COMPLETED
        assert stored.current_step == GenerationStep.COMPLETED
        assert stored.progress == 100
        assert stored.attempts == 1
        assert stored.result.template_id == "image-heavy"

    @pytest.mark.asyncio
    async def test_scraped_page_feeds_selection(self, make_pipeline, business_repo, job_repo, sample_business, sample_profile):
        """Test scraped contact details and images reach the config."""
        job = make_job(job_repo, sample_business.id, sample_profile, "https://bellacucina.com")

        result = await make_pipeline(page_handler).run(job)

        assert result.success is True
        analysis = business_repo.get_by_id(sample_business.id).analysis
        assert analysis["scrapedData"]["title"] == "Bella Cucina"
        assert analysis["scrapedData"]["images"] == [
            "https://bellacucina.com/img/pasta.jpg",
            "https://bellacucina.com/img/dining-room.jpg",
        ]
        assert "has images" in analysis["templateSelection"]["reason"]

    @pytest.mark.asyncio
    async def test_without_source_url(self, make_pipeline, business_repo, job_repo, sample_business, sample_profile):
        """Test jobs without a URL skip fetching."""
        job = make_job(job_repo, sample_business.id, sample_profile)

        result = await make_pipeline().run(job)

        assert result.success is True
        assert business_repo.get_by_id(sample_business.id).analysis["scrapedData"] == {
            "images": [],
            "headings": [],
        }

    @pytest.mark.asyncio
    async def test_legacy_profile_is_coerced(self, make_pipeline, business_repo, job_repo, sample_business):
        """Test a legacy profile shape still generates a site."""
        legacy = {"businessName": "Bella Cucina", "industry": "restaurant", "brandTone": "formal"}
        job = make_job(job_repo, sample_business.id, legacy)

        result = await make_pipeline().run(job)

        assert result.success is True
        analysis = business_repo.get_by_id(sample_business.id).analysis
        assert analysis["profileCoercion"]
        assert business_repo.get_by_id(sample_business.id).website_config["meta"]["title"].startswith(
            "Bella Cucina"
        )

    @pytest.mark.asyncio
    async def test_missing_business(self, make_pipeline, business_repo, job_repo, dynamodb_table, sample_profile):
        """Test an unknown business fails the job without creating a record."""
        job = make_job(job_repo, "ghost", sample_profile)

        result = await make_pipeline().run(job)

        assert result.success is False
        assert "not found" in result.error
        assert business_repo.get_by_id("ghost") is None

        stored = job_repo.get_by_id(job.id)
        assert stored.state == JobState.FAILED
        assert stored.error == result.error

    @pytest.mark.asyncio
    async def test_failure_keeps_published_site(self, make_pipeline, business_repo, job_repo, sample_business, sample_profile):
        """Test a failed run records the error and keeps the old config."""
        business = business_repo.get_by_id(sample_business.id)
        business.template_id = "luxury"
        business.website_config = {"templateId": "luxury"}
        business_repo.update(business)
        job = make_job(job_repo, sample_business.id, sample_profile)
        pipeline = make_pipeline()

        with patch(
            "sitegen.services.generation_pipeline.generate_website_config",
            side_effect=RuntimeError("renderer exploded"),
        ):
            result = await pipeline.run(job)

        assert result.success is False
        assert result.error == "renderer exploded"

        stored = business_repo.get_by_id(sample_business.id)
        assert stored.generation_status == GenerationStatus.FAILED
        assert stored.generation_step == "renderer exploded"
        assert stored.website_config == {"templateId": "luxury"}

        job_record = job_repo.get_by_id(job.id)
        assert job_record.current_step == GenerationStep.FAILED
        assert job_record.progress == 0

    @pytest.mark.asyncio
    async def test_attempt_times_out(self, make_pipeline, job_repo, sample_business, sample_profile):
        """Test the job deadline becomes GenerationTimeoutError."""
        job = make_job(job_repo, sample_business.id, sample_profile)
        pipeline = make_pipeline()
        pipeline.settings.job_timeout_seconds = 0.05

        async def slow_execute(job):
            await asyncio.sleep(1)

        with patch.object(pipeline, "_execute", new=slow_execute):
            with pytest.raises(GenerationTimeoutError):
                await pipeline.attempt(job)

    @pytest.mark.asyncio
    async def test_slow_publish_is_not_cut_by_deadline(self, make_pipeline, business_repo, job_repo, sample_business, sample_profile):
        """Test the success write finishes once and is never followed by a failure write."""
        job = make_job(job_repo, sample_business.id, sample_profile)
        pipeline = make_pipeline()
        pipeline.settings.job_timeout_seconds = 1.0
        apply_success = business_repo.apply_success

        def slow_apply_success(*args):
            time.sleep(1.5)
            return apply_success(*args)

        with patch.object(business_repo, "apply_success", side_effect=slow_apply_success):
            result = await pipeline.run(job)

        assert result.success is True
        stored = business_repo.get_by_id(sample_business.id)
        assert stored.generation_status == GenerationStatus.COMPLETED
        assert stored.template_id == "image-heavy"
        # create, claim, success
        assert stored.version == 3
        assert job_repo.get_by_id(job.id).state == JobState.COMPLETED

    @pytest.mark.asyncio
    async def test_timeout_leaves_published_site(self, make_pipeline, business_repo, job_repo, sample_business, sample_profile):
        """Test a job that runs out of time records only the failure."""
        job = make_job(job_repo, sample_business.id, sample_profile)
        pipeline = make_pipeline()
        pipeline.settings.job_timeout_seconds = 0.3

        async def slow_enrich(*args):
            await asyncio.sleep(1)

        with patch.object(pipeline.image_service, "enrich_images", new=slow_enrich):
            result = await pipeline.run(job)

        assert result.success is False
        assert "timed out" in result.error
        stored = business_repo.get_by_id(sample_business.id)
        assert stored.generation_status == GenerationStatus.FAILED
        assert stored.website_config is None

    @pytest.mark.asyncio
    async def test_claim_error_is_recorded_on_business(self, make_pipeline, business_repo, job_repo, sample_business, sample_profile):
        """Test a failed claim write still marks the business failed."""
        business_repo.claim_generation(sample_business.id, "job-earlier")
        business_repo.apply_success(sample_business.id, "job-earlier", "luxury", {"templateId": "luxury"}, {}, {})
        job = make_job(job_repo, sample_business.id, sample_profile)
        throttled = ClientError(
            {"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "Rate exceeded"}},
            "UpdateItem",
        )

        with patch.object(business_repo, "claim_generation", side_effect=throttled):
            result = await make_pipeline().run(job)

        assert result.success is False
        stored = business_repo.get_by_id(sample_business.id)
        assert stored.generation_status == GenerationStatus.FAILED
        assert stored.generation_job_id == job.id
        assert stored.website_config == {"templateId": "luxury"}

    @pytest.mark.asyncio
    async def test_booking_preference_without_features(self, make_pipeline, business_repo, job_repo, sample_business, sample_profile):
        """Test the booking preference alone publishes a booking section."""
        profile = {
            **sample_profile,
            "desiredFeatures": [],
            "contactPreferences": {"email": False, "phone": False, "booking": True},
        }
        job = make_job(job_repo, sample_business.id, profile)

        result = await make_pipeline().run(job)

        assert result.success is True
        config = business_repo.get_by_id(sample_business.id).website_config
        assert config["booking"]["provider"] == "internal"
        assert config["hero"]["ctaText"] == "Book Now"
        assert config["hero"]["ctaLink"] == "#booking"
        assert "contact" not in config
        assert "testimonials" not in config
