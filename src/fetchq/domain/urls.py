"""URL normalisation applied by callers before submitting fetches."""

import re

from ..config.settings import DEFAULT_URL_PREFIX

_ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)


def resolve_url(url: str | None, prefix: str = DEFAULT_URL_PREFIX) -> str | None:
    """Resolve a possibly relative URL against a fixed prefix.

    Catalog entries carry either absolute URLs or server-relative paths
    such as "/gadgets/clock.gg". Absolute http(s) URLs pass through
    unchanged; anything else is appended to the prefix.

    Args:
        url: URL or path from the catalog. May be None or empty.
        prefix: Base to prepend to relative paths.

    Returns:
        The resolved URL, or None when there is nothing to fetch.
    """
    if not url:
        return None
    if _ABSOLUTE_URL.match(url):
        return url
    return prefix + url
