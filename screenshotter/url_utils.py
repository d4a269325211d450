"""Shared URL utilities — normalize URLs, compare origins, derive file-safe names."""

from __future__ import annotations

import re
from urllib.parse import urlparse

_DEFAULT_PORTS = {"http": 80, "https": 443}
_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9\-]")


def normalize_url(url: str) -> str:
    """Normalize a URL for deduplication.

    The root path collapses to empty and any other path loses its trailing
    slash, so ``https://example.com/`` and ``https://example.com`` share a key.
    The host is lower-cased and a default port is dropped, so
    ``https://EXAMPLE.com:443/a`` and ``https://example.com/a`` match too.
    Strings that do not parse as absolute URLs are returned unchanged.
    """
    try:
        parsed = urlparse(url)
        port = parsed.port
    except ValueError:
        return url
    if not parsed.scheme or not parsed.netloc:
        return url

    path = parsed.path
    if path == "/":
        path = ""
    elif len(path) > 1 and path.endswith("/"):
        path = path.rstrip("/")

    query = f"?{parsed.query}" if parsed.query else ""
    return f"{parsed.scheme}://{_normalize_netloc(parsed, port)}{path}{query}"


def _normalize_netloc(parsed, port: int | None) -> str:
    host = (parsed.hostname or "").lower()
    if ":" in host:
        host = f"[{host}]"
    if port is not None and port != _DEFAULT_PORTS.get(parsed.scheme):
        host = f"{host}:{port}"
    userinfo, sep, _ = parsed.netloc.rpartition("@")
    return f"{userinfo}{sep}{host}"


def is_absolute_http_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.hostname)


def url_origin(url: str) -> tuple[str, str, int | None]:
    """Return the (scheme, host, port) origin triple, filling in default ports.

    Raises ValueError for URLs with an invalid port.
    """
    parsed = urlparse(url)
    port = parsed.port or _DEFAULT_PORTS.get(parsed.scheme)
    return parsed.scheme, (parsed.hostname or ""), port


def origin_prefix(url: str) -> str:
    """Return ``scheme://netloc`` for a URL, suitable for joining with a path."""
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def is_same_origin(base_url: str, candidate_url: str) -> bool:
    try:
        return url_origin(base_url) == url_origin(candidate_url)
    except ValueError:
        return False


def sanitize_path(pathname: str) -> str:
    """Map a URL path to a filename fragment, e.g. ``/about/us`` -> ``about-us``."""
    if pathname.startswith("/"):
        pathname = pathname[1:]
    if pathname.endswith("/"):
        pathname = pathname[:-1]
    sanitized = _UNSAFE_FILENAME_CHARS.sub("_", pathname.replace("/", "-"))
    return sanitized or "root"
