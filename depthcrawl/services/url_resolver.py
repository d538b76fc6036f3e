import logging
from urllib.parse import urljoin, urlsplit

logger = logging.getLogger(__name__)


def _has_control_chars(value: str) -> bool:
    return any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in value)


def resolve_url(base: str, href: str) -> str:
    """Resolve `href` against `base` and return an absolute URL, or "" if either cannot be parsed.

    An empty result means "drop this link"; it is never a usable URL.
    """
    if base is None or href is None:
        return ""
    href = href.strip()
    if _has_control_chars(base) or _has_control_chars(href):
        return ""
    try:
        base_parts = urlsplit(base)
        if not base_parts.scheme or not base_parts.netloc:
            return ""
        resolved = urljoin(base, href)
        parts = urlsplit(resolved)
        # Accessing .port validates it; a non-numeric or out-of-range port raises ValueError.
        parts.port
    except ValueError:
        logger.debug("Cannot resolve %r against %r", href, base)
        return ""
    if not parts.scheme:
        return ""
    return resolved
