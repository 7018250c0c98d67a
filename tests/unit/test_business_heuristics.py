"""Tests for heuristic business profiling and legacy coercion."""

import pytest

from sitegen.models.business_understanding import BrandTone
from sitegen.models.scraped_data import ScrapedData
from sitegen.services.business_heuristics import (
    DEFAULT_LOCATION,
    build_business_understanding,
    coerce_business_understanding,
    detect_brand_tone,
    detect_industry,
    deterministic_choice,
    extract_location,
    extract_value_proposition,
    generate_seo_keywords,
)
from sitegen.services.business_validation import validate_business_understanding

LANDSCAPER = ScrapedData(
    title="Green Leaf Landscaping",
    description=(
        "Family owned garden design and lawn care serving Austin, TX since 2005. "
        "Our friendly crew keeps outdoor spaces beautiful all year."
    ),
    email="hello@greenleaf.example",
    images=["https://greenleaf.example/yard.jpg", "https://greenleaf.example/patio.jpg"],
)


class TestDeterministicChoice:
    """Tests for deterministic_choice."""

    def test_same_seed_same_choice(self):
        """Test choices are stable for a seed."""
        options = ["a", "b", "c", "d"]

        assert deterministic_choice(options, "Bella Cucina") == deterministic_choice(options, "Bella Cucina")

    def test_spreads_across_options(self):
        """Test different seeds reach more than one option."""
        picks = {deterministic_choice(range(5), f"business-{i}") for i in range(50)}

        assert len(picks) > 1

    def test_empty_options(self):
        """Test empty option lists are rejected."""
        with pytest.raises(ValueError):
            deterministic_choice([], "seed")


class TestHeuristics:
    """Tests for the individual heuristics."""

    def test_detect_industry(self):
        """Test first matching industry wins."""
        assert detect_industry("We plant trees", "") == "Landscaping"
        assert detect_industry("Strategy for growth", "Acme") == "Consulting"
        assert detect_industry("", "") == "Services"

    def test_extract_location(self):
        """Test location phrases."""
        assert extract_location("Bakery based in Portland, open daily") == "Portland"
        assert extract_location("Visit us: Springfield, IL") == "Springfield, IL"
        assert extract_location("We bake bread") == ""

    def test_detect_brand_tone(self):
        """Test tone keywords."""
        assert detect_brand_tone("An exclusive premium experience") == BrandTone.LUXURY
        assert detect_brand_tone("Relaxed and fun") == BrandTone.CASUAL
        assert detect_brand_tone("") == BrandTone.PROFESSIONAL

    def test_extract_value_proposition(self):
        """Test the first long sentence is used."""
        assert extract_value_proposition("Hi. We build durable furniture by hand. Call us.") == (
            "We build durable furniture by hand"
        )
        assert extract_value_proposition("") == "Professional services delivered with attention to detail"

    def test_seo_keywords_are_padded(self):
        """Test keyword lists always have at least five unique entries."""
        keywords = generate_seo_keywords("Acme", "Services")

        assert len(keywords) >= 5
        assert len(keywords) == len(set(keywords))
        assert keywords[0] == "Acme"


class TestBuildBusinessUnderstanding:
    """Tests for build_business_understanding."""

    def test_from_scraped_data(self):
        """Test a profile inferred from a scraped page."""
        profile = build_business_understanding(LANDSCAPER)

        assert profile.name == "Green Leaf Landscaping"
        assert profile.category == "Landscaping"
        assert profile.location == "Austin"
        assert profile.brand_tone == "friendly"
        assert "Landscaping" in profile.services
        assert "Established business with proven track record" in profile.trust_signals
        assert profile.contact_preferences.email is True
        assert profile.contact_preferences.phone is False
        assert profile.image_assets.hero == "https://greenleaf.example/yard.jpg"

    def test_always_valid(self):
        """Test the inferred profile passes validation."""
        profile = build_business_understanding(LANDSCAPER)

        assert validate_business_understanding(profile.to_json_dict()).valid is True

    def test_empty_input(self):
        """Test an empty page still yields a valid profile."""
        profile = build_business_understanding(None)

        assert profile.name == "Business"
        assert profile.location == DEFAULT_LOCATION
        assert validate_business_understanding(profile.to_json_dict()).valid is True

    def test_conversational_input(self):
        """Test free text is used when the page has no description."""
        profile = build_business_understanding(
            ScrapedData(title="Shutter Co"),
            conversational_input="Wedding and portrait photography located in Denver.",
        )

        assert profile.category == "Photography"
        assert profile.location == "Denver"


class TestCoerceBusinessUnderstanding:
    """Tests for coerce_business_understanding."""

    def test_legacy_shape(self):
        """Test businessName/industry/formal profiles are migrated."""
        profile = coerce_business_understanding({
            "businessName": "Acme Legal",
            "industry": "legal",
            "brandTone": "formal",
        })

        assert profile.name == "Acme Legal"
        assert profile.category == "legal"
        assert profile.brand_tone == "professional"
        assert validate_business_understanding(profile.to_json_dict()).valid is True

    def test_keeps_valid_fields(self, sample_profile):
        """Test usable fields survive and broken ones are repaired."""
        sample_profile["brandColors"] = ["#fff", "not-a-color"]
        sample_profile["seoKeywords"] = ["pasta", "pasta"]
        sample_profile["name"] = "x" * 250

        profile = coerce_business_understanding(sample_profile)

        assert profile.name == "x" * 200
        assert profile.brand_colors == ["#fff"]
        assert profile.seo_keywords[0] == "pasta"
        assert len(profile.seo_keywords) >= 5
        assert profile.services == ["Dine-in", "Catering", "Private Events"]
        assert profile.contact_preferences.booking is False
        assert profile.desired_features == ["Testimonials", "contact form"]

    def test_uses_scraped_data_for_gaps(self):
        """Test missing fields are filled from the scraped page."""
        profile = coerce_business_understanding({"name": "Green Leaf"}, LANDSCAPER)

        assert profile.name == "Green Leaf"
        assert profile.category == "Landscaping"
        assert profile.location == "Austin"
        assert profile.contact_preferences.email is True

    @pytest.mark.parametrize("candidate", [None, "text", [], {}])
    def test_garbage_input(self, candidate):
        """Test anything at all coerces to a valid profile."""
        profile = coerce_business_understanding(candidate)

        assert validate_business_understanding(profile.to_json_dict()).valid is True
