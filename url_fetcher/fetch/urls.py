"""URL helpers for redirect resolution and sink naming."""

from pathlib import PurePosixPath
from urllib.parse import urlsplit

import httpx

from url_fetcher.fetch.constants import MAX_SUFFIX_HINT_LENGTH, SUPPORTED_SCHEMES
from url_fetcher.fetch.errors import InvalidUrlError


def normalize_url(url: str) -> str:
    """Parse a URL into its normalized absolute form.

    Scheme and host are lowercased so that history comparisons treat
    ``HTTPS://Example.com/x`` and ``https://example.com/x`` as the same URL.

    Args:
        url: URL string to normalize.

    Returns:
        Normalized URL string.

    Raises:
        InvalidUrlError: If the URL cannot be parsed, has no host, or is not
            http(s).
    """
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidUrlError(str(url), reason=str(e)) from e

    scheme = parsed.scheme.lower()
    if scheme not in SUPPORTED_SCHEMES:
        raise InvalidUrlError(url, reason=f"unsupported scheme {scheme!r}")
    if not parsed.host:
        raise InvalidUrlError(url, reason="missing host")

    normalized = parsed.copy_with(scheme=scheme, host=parsed.host.lower())
    if not urlsplit(url).path:
        # An empty path goes on the wire as "/"
        normalized = normalized.copy_with(path="/")
    return str(normalized)


def resolve_location(current_url: str, location: str) -> str:
    """Resolve a redirect ``Location`` value against the current hop.

    Absolute locations are returned unchanged. Anything else keeps the
    scheme, host and port of ``current_url``.

    Args:
        current_url: URL of the response that carried the Location header.
        location: Raw Location header value.

    Returns:
        Absolute URL of the redirect target.

    Raises:
        InvalidUrlError: If the Location value cannot be parsed.
    """
    try:
        target = httpx.URL(location)
        if target.is_absolute_url:
            return str(target)
        return str(httpx.URL(current_url).join(location))
    except httpx.InvalidURL as e:
        raise InvalidUrlError(location, reason=str(e)) from e


def suffix_hint(url: str) -> str | None:
    """Derive a temporary-file suffix from the extension of a URL path.

    Args:
        url: Source URL; its query string and fragment are ignored.

    Returns:
        The extension including the dot, or None when there is none or it
        is too long to be a real extension.
    """
    path = urlsplit(url).path
    suffix = PurePosixPath(path).suffix
    if not suffix or len(suffix) > MAX_SUFFIX_HINT_LENGTH:
        return None
    return suffix
