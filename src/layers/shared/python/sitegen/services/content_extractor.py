"""Extract a flat ScrapedData record from fetched HTML.

Pure functions, no I/O. Scripts, styles and noscript blocks are removed
before any text analysis.
"""

import re
import urllib.parse

from bs4 import BeautifulSoup, Tag

from sitegen.models.scraped_data import MAX_SCRAPED_HEADINGS, MAX_SCRAPED_IMAGES, ScrapedData

MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 500
PARAGRAPH_DESCRIPTION_LENGTH = 300
MAX_HEADING_LENGTH = 200
MIN_IMAGE_DIMENSION = 100

EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
PHONE_PATTERN = re.compile(r"\+?\d[\d\s().-]{7,}\d")
CSS_URL_PATTERN = re.compile(r"""url\(['"]?([^'")\s]+)['"]?\)""")
DIMENSION_PATTERN = re.compile(r"^\s*(\d+)")

# Substrings that mark icons, logos and tracking pixels
SKIP_IMAGE_MARKERS = ("icon", "logo", "favicon", "1x1", "pixel")

IMAGE_SOURCE_ATTRIBUTES = ("src", "data-src", "data-lazy-src")


def extract_content(html: str, base_url: str | None = None) -> ScrapedData:
    """Parse HTML into a ScrapedData record.

    Args:
        html: Raw page markup.
        base_url: URL the page was fetched from, for resolving relative
            image URLs.

    Returns:
        ScrapedData with whatever fields could be found.
    """
    soup = BeautifulSoup(html or "", "html.parser")

    # Image candidates are collected before noscript blocks are dropped,
    # lazy-loading sites often keep the real <img> inside <noscript>.
    images = _collect_images(soup, base_url)

    for tag_name in ("script", "style", "noscript"):
        for el in soup.find_all(tag_name):
            el.decompose()

    title = _extract_title(soup)
    description = _extract_description(soup)

    text = soup.get_text(" ")
    email_match = EMAIL_PATTERN.search(text)
    phone_match = PHONE_PATTERN.search(text)

    return ScrapedData(
        title=title[:MAX_TITLE_LENGTH] if title else None,
        description=description[:MAX_DESCRIPTION_LENGTH] if description else None,
        email=email_match.group(0) if email_match else None,
        phone=phone_match.group(0).strip() if phone_match else None,
        images=images,
        headings=_extract_headings(soup),
    )


def extract_images_from_html(html: str, base_url: str | None = None) -> list[str]:
    """Collect up to 10 content image URLs from HTML, in document order."""
    soup = BeautifulSoup(html or "", "html.parser")
    return _collect_images(soup, base_url)


def _extract_title(soup: BeautifulSoup) -> str:
    title_tag = soup.find("title")
    title = title_tag.get_text(strip=True) if title_tag else ""
    if title:
        return title

    h1 = soup.find("h1")
    return h1.get_text(" ", strip=True) if h1 else ""


def _get_meta(soup: BeautifulSoup, name: str) -> str:
    """Get content from a meta tag by name or property."""
    tag = soup.find("meta", attrs={"name": name}) or soup.find("meta", attrs={"property": name})
    if tag and tag.get("content"):
        return str(tag["content"]).strip()
    return ""


def _extract_description(soup: BeautifulSoup) -> str:
    description = _get_meta(soup, "description") or _get_meta(soup, "og:description")
    if description:
        return description

    paragraph = soup.find("p")
    if paragraph:
        return paragraph.get_text(" ", strip=True)[:PARAGRAPH_DESCRIPTION_LENGTH]
    return ""


def _extract_headings(soup: BeautifulSoup) -> list[str]:
    headings: list[str] = []
    for el in soup.find_all(["h1", "h2", "h3"]):
        text = el.get_text(" ", strip=True)
        if text and len(text) < MAX_HEADING_LENGTH:
            headings.append(text)
        if len(headings) >= MAX_SCRAPED_HEADINGS:
            break
    return headings


def _parse_dimension(value: object) -> int:
    """Parse a width/height attribute like "64" or "64px"; 0 if absent."""
    if value is None:
        return 0
    match = DIMENSION_PATTERN.match(str(value))
    return int(match.group(1)) if match else 0


def _resolve_image_url(src: str, base_url: str | None) -> str | None:
    src = src.strip()
    if not src or src.startswith("data:"):
        return None

    if src.startswith("//"):
        src = f"https:{src}"
    elif not src.startswith(("http://", "https://")):
        if not base_url:
            return None
        src = urllib.parse.urljoin(base_url, src)

    if not src.startswith(("http://", "https://")):
        return None
    return src


def _is_skipped_image(url: str) -> bool:
    lowered = url.lower()
    return any(marker in lowered for marker in SKIP_IMAGE_MARKERS)


def _image_candidates(el: Tag) -> list[str]:
    """Raw URL candidates carried by one element."""
    candidates: list[str] = []

    if el.name == "img":
        width = _parse_dimension(el.get("width"))
        height = _parse_dimension(el.get("height"))
        if 0 < width < MIN_IMAGE_DIMENSION or 0 < height < MIN_IMAGE_DIMENSION:
            return []
        for attr in IMAGE_SOURCE_ATTRIBUTES:
            value = el.get(attr)
            if value:
                candidates.append(str(value))
                break

    style = el.get("style")
    if style and "background" in str(style):
        match = CSS_URL_PATTERN.search(str(style))
        if match:
            candidates.append(match.group(1))

    return candidates


def _collect_images(soup: BeautifulSoup, base_url: str | None) -> list[str]:
    images: list[str] = []
    seen: set[str] = set()

    for el in soup.find_all(True):
        for raw in _image_candidates(el):
            url = _resolve_image_url(raw, base_url)
            if not url or _is_skipped_image(url) or url in seen:
                continue
            seen.add(url)
            images.append(url)
            if len(images) >= MAX_SCRAPED_IMAGES:
                return images

    return images
