"""Pipeline stages.

Only the network-free stages are re-exported here; import
``image_enrichment`` and ``generation_pipeline`` from their modules.
"""

from sitegen.services.business_heuristics import (
    build_business_understanding,
    coerce_business_understanding,
    deterministic_choice,
)
from sitegen.services.business_validation import (
    ValidationResult,
    deterministic_stringify,
    profile_fingerprint,
    validate_business_understanding,
)
from sitegen.services.content_extractor import extract_content, extract_images_from_html
from sitegen.services.secure_fetcher import SecureFetcher, scrape_website
from sitegen.services.template_catalog import get_all_templates, get_template_by_id
from sitegen.services.template_selector import get_template_recommendations, select_template
from sitegen.services.website_config_generator import generate_website_config

__all__ = [
    "build_business_understanding",
    "coerce_business_understanding",
    "deterministic_choice",
    "ValidationResult",
    "deterministic_stringify",
    "profile_fingerprint",
    "validate_business_understanding",
    "extract_content",
    "extract_images_from_html",
    "SecureFetcher",
    "scrape_website",
    "get_all_templates",
    "get_template_by_id",
    "get_template_recommendations",
    "select_template",
    "generate_website_config",
]
