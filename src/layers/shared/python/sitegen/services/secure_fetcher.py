"""Secure page fetcher for website scraping.

Fetches user-supplied URLs under SSRF protections: only http(s), no
loopback/private/link-local targets (checked before any request and again on
every redirect hop), a hard timeout and a response size cap enforced both from
Content-Length and while streaming the body.
"""

import asyncio
import ipaddress
import socket
import urllib.parse
from dataclasses import dataclass

import httpx
import structlog

from sitegen.config import DEFAULT_USER_AGENT
from sitegen.models.scraped_data import FetchErrorKind, ScrapedData
from sitegen.services.content_extractor import extract_content
from sitegen.utils.exceptions import FetchError

logger = structlog.get_logger()

FETCH_TIMEOUT = 10.0
MAX_RESPONSE_BYTES = 5 * 1024 * 1024
MAX_REDIRECTS = 5
HTML_CONTENT_TYPES = frozenset({"text/html", "application/xhtml+xml"})

BLOCKED_HOSTNAMES = frozenset({"localhost", "127.0.0.1", "0.0.0.0", "::1", "::"})
BLOCKED_PREFIXES = ("127.", "10.", "192.168.", "169.254.") + tuple(
    f"172.{octet}." for octet in range(16, 32)
)


@dataclass
class FetchedPage:
    """A successfully fetched HTML page."""

    url: str
    html: str
    status: int


def _is_blocked_ip(address: ipaddress.IPv4Address | ipaddress.IPv6Address) -> bool:
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped:
        address = address.ipv4_mapped
    return (
        address.is_loopback
        or address.is_private
        or address.is_link_local
        or address.is_reserved
        or address.is_unspecified
        or address.is_multicast
    )


def is_blocked_host(hostname: str) -> bool:
    """Check whether a hostname targets loopback or private infrastructure.

    Matches literal names and dotted prefixes without any DNS lookup, so
    it is safe to call before any network I/O.

    Args:
        hostname: Hostname from a parsed URL.

    Returns:
        True if requests to this host must be refused.
    """
    host = hostname.strip().lower().strip("[]").rstrip(".")
    if not host:
        return True

    if host in BLOCKED_HOSTNAMES or host.endswith(".localhost"):
        return True

    if host.startswith(BLOCKED_PREFIXES):
        return True

    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        # Integer-encoded IPv4 (e.g. 2130706433) resolves like a dotted quad
        if host.isdigit():
            try:
                address = ipaddress.ip_address(int(host))
            except ValueError:
                return False
        else:
            return False

    return _is_blocked_ip(address)


def validate_url(url: str) -> urllib.parse.SplitResult:
    """Parse and validate a URL for fetching.

    Raises:
        FetchError: INVALID_URL if malformed, BLOCKED_HOST if the host is
            loopback or private.
    """
    try:
        parsed = urllib.parse.urlsplit((url or "").strip())
        hostname = parsed.hostname
        # Accessing .port validates it
        parsed.port
    except ValueError as e:
        raise FetchError(FetchErrorKind.INVALID_URL, f"Invalid URL: {e}", url=url) from e

    if parsed.scheme not in ("http", "https") or not hostname:
        raise FetchError(FetchErrorKind.INVALID_URL, "Invalid URL: expected http(s) URL with a host", url=url)

    if is_blocked_host(hostname):
        raise FetchError(
            FetchErrorKind.BLOCKED_HOST,
            "Invalid URL: private IP addresses not allowed",
            url=url,
        )

    return parsed


class SecureFetcher:
    """Fetch HTML pages with SSRF, timeout and size protections.

    An ``httpx.AsyncClient`` can be injected (tests, shared connection
    pools); otherwise a short-lived client is created per fetch.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = FETCH_TIMEOUT,
        max_bytes: int = MAX_RESPONSE_BYTES,
        user_agent: str = DEFAULT_USER_AGENT,
        resolve_hosts: bool = True,
        max_redirects: int = MAX_REDIRECTS,
    ):
        """Initialize the fetcher.

        Args:
            client: Optional shared HTTP client.
            timeout: Overall timeout for one fetch, in seconds.
            max_bytes: Maximum accepted response size.
            user_agent: User-Agent header sent with every request.
            resolve_hosts: Also reject hostnames whose DNS records point
                into blocked ranges.
            max_redirects: Maximum redirect hops to follow.
        """
        self._client = client
        self.timeout = timeout
        self.max_bytes = max_bytes
        self.user_agent = user_agent
        self.resolve_hosts = resolve_hosts
        self.max_redirects = max_redirects
        self.logger = logger.bind(service="secure_fetcher")

    async def fetch(self, url: str) -> str:
        """Fetch a URL and return its HTML.

        Raises:
            FetchError: With a kind describing why the page was refused.
        """
        page = await self.fetch_page(url)
        return page.html

    async def fetch_page(self, url: str) -> FetchedPage:
        """Fetch a URL, returning the final URL after redirects with the HTML."""
        # Fail fast before any client is created
        validate_url(url)

        try:
            if self._client is not None:
                return await asyncio.wait_for(self._fetch(self._client, url), timeout=self.timeout)

            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await asyncio.wait_for(self._fetch(client, url), timeout=self.timeout)

        except asyncio.TimeoutError as e:
            raise FetchError(FetchErrorKind.TIMEOUT, "Request timed out", url=url) from e
        except httpx.TimeoutException as e:
            raise FetchError(FetchErrorKind.TIMEOUT, "Request timed out", url=url) from e
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise FetchError(FetchErrorKind.INVALID_URL, f"Invalid URL: {e}", url=url) from e
        except httpx.HTTPError as e:
            raise FetchError(FetchErrorKind.NETWORK_ERROR, f"Network error: {e}", url=url) from e

    async def _fetch(self, client: httpx.AsyncClient, url: str) -> FetchedPage:
        current = url
        for _ in range(self.max_redirects + 1):
            parsed = validate_url(current)
            if self.resolve_hosts:
                await self._check_resolved_addresses(parsed)

            async with client.stream(
                "GET",
                current,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "text/html",
                },
                follow_redirects=False,
            ) as response:
                if response.is_redirect:
                    location = response.headers.get("location", "")
                    if not location:
                        raise FetchError(
                            FetchErrorKind.NON_SUCCESS_STATUS,
                            f"Redirect without location ({response.status_code})",
                            url=current,
                            status=response.status_code,
                        )
                    current = urllib.parse.urljoin(str(response.url), location)
                    self.logger.debug("Following redirect", location=current)
                    continue

                if not response.is_success:
                    raise FetchError(
                        FetchErrorKind.NON_SUCCESS_STATUS,
                        f"Request failed with status code {response.status_code}",
                        url=current,
                        status=response.status_code,
                    )

                # A missing Content-Type is parsed as HTML
                content_type = response.headers.get("content-type", "")
                media_type = content_type.split(";", 1)[0].strip().lower()
                if media_type and media_type not in HTML_CONTENT_TYPES:
                    raise FetchError(
                        FetchErrorKind.UNSUPPORTED_CONTENT,
                        f"Unsupported content type: {media_type}",
                        url=current,
                    )

                declared = response.headers.get("content-length")
                if declared and declared.isdigit() and int(declared) > self.max_bytes:
                    raise FetchError(FetchErrorKind.TOO_LARGE, "Response too large", url=current)

                body = bytearray()
                async for chunk in response.aiter_bytes():
                    body.extend(chunk)
                    if len(body) > self.max_bytes:
                        raise FetchError(FetchErrorKind.TOO_LARGE, "Response too large", url=current)

                html = body.decode(response.encoding or "utf-8", errors="replace")
                if len(html) > self.max_bytes:
                    raise FetchError(FetchErrorKind.TOO_LARGE, "Response too large", url=current)

                return FetchedPage(url=str(response.url), html=html, status=response.status_code)

        raise FetchError(FetchErrorKind.NETWORK_ERROR, "Too many redirects", url=url)

    async def _check_resolved_addresses(self, parsed: urllib.parse.SplitResult) -> None:
        hostname = parsed.hostname or ""
        try:
            ipaddress.ip_address(hostname.strip("[]"))
            # Literal IPs were already checked by validate_url
            return
        except ValueError:
            pass

        port = parsed.port or (443 if parsed.scheme == "https" else 80)
        loop = asyncio.get_running_loop()
        try:
            infos = await loop.getaddrinfo(hostname, port, type=socket.SOCK_STREAM)
        except socket.gaierror as e:
            raise FetchError(
                FetchErrorKind.NETWORK_ERROR,
                f"Could not resolve host: {hostname}",
                url=parsed.geturl(),
            ) from e

        for _family, _type, _proto, _canon, sockaddr in infos:
            try:
                address = ipaddress.ip_address(sockaddr[0])
            except ValueError:
                continue
            if _is_blocked_ip(address):
                raise FetchError(
                    FetchErrorKind.BLOCKED_HOST,
                    "Invalid URL: host resolves to a private address",
                    url=parsed.geturl(),
                )


async def scrape_website(fetcher: SecureFetcher, url: str) -> ScrapedData:
    """Fetch and extract a page, downgrading any fetch failure to empty data.

    Args:
        fetcher: Fetcher to use.
        url: Page URL.

    Returns:
        Extracted data, or an empty ScrapedData carrying the error kind.
    """
    try:
        page = await fetcher.fetch_page(url)
    except FetchError as e:
        logger.warning(
            "Scraping failed, continuing with empty data",
            url=url,
            kind=e.kind.value,
            error=e.message,
        )
        return ScrapedData(error=e.kind, error_message=e.message)

    return extract_content(page.html, page.url)
