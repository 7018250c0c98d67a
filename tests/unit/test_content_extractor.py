"""Tests for HTML content extraction."""

import pytest

from sitegen.services.content_extractor import extract_content, extract_images_from_html

PAGE = """
<html>
  <head>
    <title>  Bella Cucina  </title>
    <meta name="description" content="Handmade pasta in Portland.">
    <script>var contact = "hidden@tracker.io";</script>
    <style>.hero { color: red; }</style>
  </head>
  <body>
    <h1>Welcome</h1>
    <h2>Our Menu</h2>
    <p>Call +1 (503) 555-0142 or email hello@bellacucina.com</p>
    <img src="/img/dining.jpg" width="800">
    <img src="/img/logo.png">
    <img src="https://cdn.example.com/tiny.jpg" width="50">
    <img src="data:image/png;base64,AAAA">
    <div style="background-image: url('https://cdn.example.com/bg.jpg')"></div>
    <img data-src="//cdn.example.com/lazy.jpg">
    <noscript><img src="https://cdn.example.com/noscript.jpg"></noscript>
  </body>
</html>
"""


class TestExtractContent:
    """Tests for extract_content."""

    def test_extracts_fields(self):
        """Test the main fields are pulled from the page."""
        data = extract_content(PAGE, "https://bellacucina.com/")

        assert data.title == "Bella Cucina"
        assert data.description == "Handmade pasta in Portland."
        assert data.email == "hello@bellacucina.com"
        assert data.phone == "+1 (503) 555-0142"
        assert data.headings == ["Welcome", "Our Menu"]

    def test_scripts_are_ignored(self):
        """Test script contents never leak into extracted text."""
        data = extract_content(PAGE, "https://bellacucina.com/")

        assert data.email != "hidden@tracker.io"

    def test_images_in_document_order(self):
        """Test image filtering and URL resolution."""
        data = extract_content(PAGE, "https://bellacucina.com/")

        assert data.images == [
            "https://bellacucina.com/img/dining.jpg",
            "https://cdn.example.com/bg.jpg",
            "https://cdn.example.com/lazy.jpg",
            "https://cdn.example.com/noscript.jpg",
        ]

    @pytest.mark.parametrize(
        "src",
        [
            "/img/site-icon.png",
            "/img/Logo-dark.svg",
            "/favicon.ico",
            "/track/1x1.gif",
            "/img/pixel.gif",
        ],
    )
    def test_icons_and_trackers_skipped(self, src):
        """Test icon, logo and tracking-pixel URLs are excluded."""
        html = f'<img src="{src}"><img src="/img/dining.jpg">'

        assert extract_images_from_html(html, "https://bellacucina.com/") == [
            "https://bellacucina.com/img/dining.jpg",
        ]

    def test_short_images_skipped(self):
        """Test images declared under 100px tall are excluded."""
        html = (
            '<img src="/img/banner.jpg" height="60">'
            '<img src="/img/strip.jpg" height="99px">'
            '<img src="/img/hero.jpg" height="100">'
        )

        assert extract_images_from_html(html, "https://bellacucina.com/") == [
            "https://bellacucina.com/img/hero.jpg",
        ]

    def test_title_falls_back_to_h1(self):
        """Test pages without a title use the first h1."""
        data = extract_content("<html><body><h1>Green Leaf</h1><p>Garden care.</p></body></html>")

        assert data.title == "Green Leaf"
        assert data.description == "Garden care."

    def test_og_description(self):
        """Test og:description is used when there is no meta description."""
        html = '<html><head><meta property="og:description" content="From the og tag"></head></html>'

        data = extract_content(html)

        assert data.description == "From the og tag"

    def test_paragraph_description_is_truncated(self):
        """Test long first paragraphs are cut to 300 characters."""
        data = extract_content(f"<p>{'a' * 400}</p>")

        assert len(data.description) == 300

    def test_relative_images_need_base_url(self):
        """Test relative URLs are dropped without a base."""
        data = extract_content('<img src="/img/a.jpg"><img src="https://x.example.com/b.jpg">')

        assert data.images == ["https://x.example.com/b.jpg"]

    def test_image_cap(self):
        """Test at most ten images are returned."""
        html = "".join(f'<img src="https://cdn.example.com/{i}.jpg">' for i in range(15))

        assert len(extract_images_from_html(html)) == 10

    def test_duplicate_images_collapse(self):
        """Test the same URL is only listed once."""
        html = '<img src="https://cdn.example.com/a.jpg"><img src="https://cdn.example.com/a.jpg">'

        assert extract_images_from_html(html) == ["https://cdn.example.com/a.jpg"]

    def test_empty_html(self):
        """Test empty input produces an empty record."""
        data = extract_content("")

        assert data.title is None
        assert data.description is None
        assert data.images == []
        assert data.headings == []

    def test_long_headings_skipped(self):
        """Test headings of 200+ characters are ignored and five are kept."""
        html = f"<h1>{'x' * 250}</h1>" + "".join(f"<h2>Heading {i}</h2>" for i in range(8))

        data = extract_content(html)

        assert data.headings == [f"Heading {i}" for i in range(5)]
