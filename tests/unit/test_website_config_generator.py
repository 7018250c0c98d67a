"""Tests for website config generation."""

import pytest

from sitegen.models.business_understanding import BusinessUnderstanding
from sitegen.models.scraped_data import ScrapedData
from sitegen.services.website_config_generator import (
    CATEGORY_HERO_IMAGES,
    DEFAULT_HERO_IMAGE,
    generate_cta_text,
    generate_headline,
    generate_local_seo_keywords,
    generate_meta_description,
    generate_placeholder_testimonials,
    generate_website_config,
)
from sitegen.utils.exceptions import TemplateNotFoundError


def make_profile(sample_profile: dict, **overrides) -> BusinessUnderstanding:
    return BusinessUnderstanding.model_validate({**sample_profile, **overrides})


class TestGenerateWebsiteConfig:
    """Tests for generate_website_config."""

    def test_deterministic(self, sample_understanding, fixed_now):
        """Test the same inputs and clock give the same config."""
        first = generate_website_config(sample_understanding, "image-heavy", now=fixed_now)
        second = generate_website_config(sample_understanding, "image-heavy", now=fixed_now)

        assert first == second
        assert first.generated_at == fixed_now.isoformat()
        assert first.footer.copyright_text == "© 2026 Bella Cucina. All rights reserved."

    def test_unknown_template(self, sample_understanding):
        """Test unknown template ids are rejected."""
        with pytest.raises(TemplateNotFoundError):
            generate_website_config(sample_understanding, "brutalist")

    def test_core_sections(self, sample_understanding, fixed_now):
        """Test the always-present sections."""
        config = generate_website_config(sample_understanding, "image-heavy", now=fixed_now)

        assert config.template_id == "image-heavy"
        assert config.meta.title == "Bella Cucina | restaurant Services in Portland, OR"
        assert config.meta.keywords == sample_understanding.seo_keywords
        assert config.branding.colors == ["#B91C1C", "#FDE68A"]
        assert config.branding.tone == "friendly"
        assert config.branding.font_family == "Inter"
        assert config.hero.headline == "Handmade pasta and seasonal Italian plates"
        assert config.hero.overlay_opacity == 0.4
        assert [item.name for item in config.services.items] == ["Dine-in", "Catering", "Private Events"]
        assert config.services.items[0].description == (
            "We love providing dine-in that makes a real difference in your life!"
        )
        assert config.about.title == "About Bella Cucina"
        assert config.about.content.endswith("We can't wait to work with you!")
        assert config.trust_signals.items == sample_understanding.trust_signals
        assert config.local_seo.location == "Portland, OR"

    def test_optional_sections_follow_features(self, sample_understanding, fixed_now):
        """Test testimonials and contact come from desired features."""
        scraped = ScrapedData(email="hello@bellacucina.com", phone="+1 503 555 0142")

        config = generate_website_config(sample_understanding, "image-heavy", scraped, now=fixed_now)

        assert len(config.testimonials.items) == 3
        assert config.contact.email == "hello@bellacucina.com"
        assert config.contact.phone == "+1 503 555 0142"
        assert config.contact.show_map is True
        assert config.booking is None
        assert config.gallery is None
        assert config.pricing_table is None

    def test_booking_preference_without_features(self, sample_profile, fixed_now):
        """Test the booking preference alone adds a booking section."""
        profile = make_profile(
            sample_profile,
            desiredFeatures=[],
            contactPreferences={"email": False, "phone": False, "booking": True},
        )

        config = generate_website_config(profile, "service-heavy", now=fixed_now)

        assert config.booking is not None
        assert config.booking.provider == "internal"
        assert config.contact is None
        assert config.testimonials is None
        assert config.hero.cta_text == "Book Now"
        assert config.hero.cta_link == "#booking"

    def test_gallery_and_pricing(self, sample_profile, fixed_now):
        """Test gallery and pricing sections."""
        profile = make_profile(
            sample_profile,
            desiredFeatures=["photo gallery", "pricing table"],
            imageAssets={"hero": "https://cdn.example.com/hero.jpg", "gallery": ["https://cdn.example.com/1.jpg"]},
        )

        config = generate_website_config(profile, "luxury", now=fixed_now)

        assert [image.url for image in config.gallery.images] == ["https://cdn.example.com/1.jpg"]
        assert config.gallery.images[0].title == "Project 1"
        assert [item.name for item in config.pricing_table.items] == ["Dine-in", "Catering", "Private Events"]
        assert config.hero.hero_image == "https://cdn.example.com/hero.jpg"
        assert config.services.items[1].image == "https://cdn.example.com/1.jpg"
        assert config.branding.font_family == "Playfair Display"
        assert config.hero.overlay_opacity == 0

    def test_hero_image_precedence(self, sample_understanding, fixed_now):
        """Test scraped images beat the category stock image."""
        scraped = ScrapedData(images=["https://bellacucina.com/a.jpg", "https://bellacucina.com/b.jpg"])

        with_scraped = generate_website_config(sample_understanding, "image-heavy", scraped, now=fixed_now)
        without = generate_website_config(sample_understanding, "image-heavy", now=fixed_now)

        assert with_scraped.hero.hero_image == "https://bellacucina.com/a.jpg"
        assert with_scraped.about.image == "https://bellacucina.com/b.jpg"
        assert without.hero.hero_image == CATEGORY_HERO_IMAGES["restaurant"]
        assert without.meta.og_image == CATEGORY_HERO_IMAGES["restaurant"]

    def test_unknown_category_hero(self, sample_profile, fixed_now):
        """Test the generic stock hero image."""
        profile = make_profile(sample_profile, category="underwater welding")

        config = generate_website_config(profile, "service-heavy", now=fixed_now)

        assert config.hero.hero_image == DEFAULT_HERO_IMAGE
        assert config.branding.font_family == "Georgia"

    def test_json_uses_camel_case(self, sample_understanding, fixed_now):
        """Test the serialized contract keys."""
        data = generate_website_config(sample_understanding, "image-heavy", now=fixed_now).to_json_dict()

        assert "localSEO" in data
        assert "heroImage" in data["hero"]
        assert "copyrightText" in data["footer"]
        assert "booking" not in data


class TestCopyHelpers:
    """Tests for the copy generators."""

    def test_headline(self):
        """Test headline fallbacks."""
        assert generate_headline("Acme", ["Plumbing"], "Fast fixes for leaky pipes") == "Fast fixes for leaky pipes"
        assert generate_headline("Acme", ["Plumbing"], "Short") == "Professional Plumbing Services You Can Trust"
        assert generate_headline("Acme", [], "") == "Welcome to Acme"

    def test_cta_text(self, sample_understanding):
        """Test CTA priority booking > phone > email."""
        prefs = sample_understanding.contact_preferences

        assert generate_cta_text(prefs) == "Call Us Today"
        assert generate_cta_text(prefs.model_copy(update={"phone": False})) == "Get in Touch"
        assert generate_cta_text(prefs.model_copy(update={"email": False, "phone": False})) == "Learn More"

    def test_meta_description_is_truncated(self):
        """Test meta descriptions are capped at 160 characters."""
        description = generate_meta_description(
            "A Very Long Business Name Incorporated",
            ["Residential plumbing", "Commercial plumbing", "Emergency repairs"],
            "the Greater Metropolitan Area",
            "homeowners and property managers",
        )

        assert len(description) == 160
        assert description.endswith("...")

    def test_meta_description_short(self):
        """Test short descriptions are left intact."""
        assert generate_meta_description("Acme", ["Plumbing"], "Austin", "") == (
            "Acme offers Plumbing in Austin. Contact us today!"
        )

    def test_testimonials_rotate_by_name(self):
        """Test testimonials are stable per name."""
        first = generate_placeholder_testimonials("Bella Cucina", ["Catering"])
        again = generate_placeholder_testimonials("Bella Cucina", ["Catering"])

        assert first == again
        assert len(first) == 3
        assert len({item.name for item in first}) == 3
        assert all(item.rating == 5 for item in first)

    def test_local_seo_keywords(self):
        """Test location-aware keywords."""
        keywords = generate_local_seo_keywords("Austin", ["Plumbing"], "Home Services")

        assert keywords == [
            "Home Services in Austin",
            "Austin Home Services",
            "Plumbing Austin",
            "Plumbing near me",
            "best Plumbing",
            "professional Plumbing",
        ]
