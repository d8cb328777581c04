"""
URL helpers shared by the remote store backends.
"""

from __future__ import annotations

from urllib.parse import quote, urlparse

from sshare.common.exceptions import InvalidURLError


def validate_base_url(url: str) -> str:
    """Return url without a trailing slash if it is an http(s) URL with a host.

    Raises:
        InvalidURLError: For any other scheme or an unparsable URL
    """
    try:
        parsed = urlparse(url)
    except ValueError as err:
        msg = f"invalid url {url!r}: {err}"
        raise InvalidURLError(msg) from err
    if parsed.scheme not in ("http", "https"):
        msg = f"url {url!r} is not an http or https url"
        raise InvalidURLError(msg)
    if not parsed.netloc:
        msg = f"url {url!r} has no host"
        raise InvalidURLError(msg)
    return url.rstrip("/")


def join_url(base: str, *segments: str) -> str:
    """Append quoted path segments to base."""
    parts = [base.rstrip("/")]
    parts.extend(quote(segment.strip("/"), safe="") for segment in segments)
    return "/".join(parts)
