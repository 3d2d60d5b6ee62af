from typing import List, Tuple
from urllib.parse import urljoin, urlsplit, urlunsplit, parse_qsl, urlencode

from wishlistwizard.core.constants import AMAZON_BASE_URL
from wishlistwizard.core.errors import MalformedLinkError

# Tracking and session noise Amazon appends to product links
VOLATILE_PARAMS = ("psc", "ref_")
VARIANT_PARAM = ("th", "1")


def _set_param(pairs: List[Tuple[str, str]], key: str, value: str) -> List[Tuple[str, str]]:
    """Replace the first occurrence of key in place and drop the rest, or append it."""
    result = []
    found = False
    for k, v in pairs:
        if k != key:
            result.append((k, v))
        elif not found:
            result.append((key, value))
            found = True
    if not found:
        result.append((key, value))
    return result


def normalize_product_link(href: str, base: str = AMAZON_BASE_URL) -> str:
    """
    Canonicalize a wishlist product href into a stable absolute Amazon URL.

    Relative hrefs are resolved against base. The psc and ref_ parameters are
    removed and th=1 is set so every link opens the same product-page
    variant. Normalizing an already-normalized URL returns it unchanged.

    Raises MalformedLinkError if no absolute http(s) URL can be built.
    """
    if not href or not href.strip():
        raise MalformedLinkError("Empty product link")

    try:
        parts = urlsplit(urljoin(base, href.strip()))
    except ValueError as e:
        raise MalformedLinkError(f"Cannot parse product link {href!r}: {e}") from e

    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise MalformedLinkError(f"Product link {href!r} is not an absolute http(s) URL")

    pairs = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k not in VOLATILE_PARAMS]
    pairs = _set_param(pairs, *VARIANT_PARAM)

    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(pairs), parts.fragment))
