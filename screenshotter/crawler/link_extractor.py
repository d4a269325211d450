"""Link extraction — finds same-origin, navigable links on a rendered page."""

from __future__ import annotations

import logging
from urllib.parse import urljoin, urlparse

from playwright.async_api import Page

from screenshotter.url_utils import normalize_url, origin_prefix, url_origin

logger = logging.getLogger(__name__)

_SKIPPED_PREFIXES = ("#", "javascript:", "mailto:", "tel:")

_RAW_HREFS_JS = """() => {
    return Array.from(document.querySelectorAll('a[href]'))
        .map(a => a.getAttribute('href'))
        .filter(href => href !== null);
}"""


def _base_directory(path: str) -> str:
    """Truncate a path to its last ``/`` (``/a/b`` -> ``/a/``)."""
    if path.endswith("/"):
        return path
    return path[: path.rfind("/") + 1] or "/"


def _resolve_href(href: str, base_url: str) -> str | None:
    """Turn one raw href into an absolute candidate URL, or None to drop it."""
    base_prefix = origin_prefix(base_url)
    lowered = href.lower()

    if lowered.startswith(("http://", "https://")):
        if url_origin(href) != url_origin(base_url):
            return None
        return href

    if href.startswith("/"):
        return f"{base_prefix}{href}"

    if lowered.startswith(_SKIPPED_PREFIXES):
        return None

    # urljoin removes dot segments, so "../parent" climbs out of the directory.
    # It also passes through hrefs with their own scheme (ftp:, data:, ...).
    directory = _base_directory(urlparse(base_url).path)
    candidate = urljoin(f"{base_prefix}{directory}", href)
    if url_origin(candidate) != url_origin(base_url):
        return None
    return candidate


def filter_links(hrefs: list[str], base_url: str) -> list[str]:
    """Resolve raw hrefs against base_url and keep the in-scope ones.

    Output keeps discovery order and may contain duplicates; anything that
    carries a fragment is dropped entirely rather than stripped.
    """
    links = []
    for href in hrefs:
        try:
            candidate = _resolve_href(href, base_url)
        except ValueError as e:
            logger.warning("Invalid URL: %s (%s)", href, e)
            continue
        if candidate is None or "#" in candidate:
            continue
        normalized = normalize_url(candidate)
        if "#" in normalized:
            continue
        links.append(normalized)
    return links


async def extract_links(page: Page, base_url: str) -> list[str]:
    """Extract same-origin links from the page currently loaded in ``page``."""
    hrefs = await page.evaluate(_RAW_HREFS_JS)
    links = filter_links(hrefs or [], base_url)
    logger.debug("Link extraction for %s: %d raw hrefs, %d kept", base_url, len(hrefs or []), len(links))
    return links
