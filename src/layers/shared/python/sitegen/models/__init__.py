"""Pydantic models for website generation."""

from sitegen.models.base import BaseModel, CamelModel, generate_ulid, utc_now
from sitegen.models.business import Business, GenerationStatus
from sitegen.models.business_understanding import (
    BrandTone,
    BusinessUnderstanding,
    ContactPreferences,
    ProfileImageAssets,
)
from sitegen.models.generation_job import (
    STEP_PROGRESS,
    GenerationJob,
    GenerationJobResult,
    GenerationStep,
    JobState,
    JobStatus,
)
from sitegen.models.image_assets import ImageAssets, ImageEnrichmentResult, ImageSource
from sitegen.models.scraped_data import FetchErrorKind, ScrapedData
from sitegen.models.website_config import WebsiteConfig
from sitegen.models.website_template import (
    TemplateRecommendations,
    TemplateSelectionCriteria,
    TemplateSelectionResult,
    WebsiteTemplate,
)

__all__ = [
    "BaseModel",
    "CamelModel",
    "generate_ulid",
    "utc_now",
    "Business",
    "GenerationStatus",
    "BrandTone",
    "BusinessUnderstanding",
    "ContactPreferences",
    "ProfileImageAssets",
    "STEP_PROGRESS",
    "GenerationJob",
    "GenerationJobResult",
    "GenerationStep",
    "JobState",
    "JobStatus",
    "ImageAssets",
    "ImageEnrichmentResult",
    "ImageSource",
    "FetchErrorKind",
    "ScrapedData",
    "WebsiteConfig",
    "TemplateRecommendations",
    "TemplateSelectionCriteria",
    "TemplateSelectionResult",
    "WebsiteTemplate",
]
