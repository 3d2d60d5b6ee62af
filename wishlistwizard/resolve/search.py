import re
from typing import Any, List, Optional
from urllib.parse import quote, unquote
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from wishlistwizard.core.logging import log
from wishlistwizard.core.models import WishlistItem
from wishlistwizard.core.constants import (
    ORGANIC_RESULT_SELECTOR,
    SEARCH_RESULT_TIMEOUT_MS,
    SEARCH_SETTLE_MS,
    SEARCH_URL_TEMPLATE,
)

REDIRECT_TARGET_RE = re.compile(r"uddg=([^&]+)")


def build_search_query(item: WishlistItem) -> str:
    return f"{item.name} {' '.join(item.options)}".strip()


def build_search_url(query: str) -> str:
    # Same escaping as JavaScript's encodeURIComponent
    return SEARCH_URL_TEMPLATE.format(query=quote(query, safe="-_.!~*'()"))


def unwrap_redirect(href: str) -> str:
    """Return the destination embedded in a search-engine redirect link, or href itself."""
    match = REDIRECT_TARGET_RE.search(href)
    if match:
        return unquote(match.group(1))
    return href


class LinkResolver:
    """
    Best-effort lookup of a manufacturer (non-Amazon) link for each item,
    using the first organic DuckDuckGo result with Amazon excluded.
    """

    def __init__(
        self,
        page: Any,
        settle_ms: int = SEARCH_SETTLE_MS,
        result_timeout_ms: int = SEARCH_RESULT_TIMEOUT_MS,
    ):
        self.page = page
        self.settle_ms = settle_ms
        self.result_timeout_ms = result_timeout_ms

    async def resolve_all(self, items: List[WishlistItem]) -> int:
        """Fill external_link where it is empty. Returns how many links were found."""
        found = 0
        for item in items:
            if item.external_link:
                continue
            if await self.resolve(item):
                found += 1
        return found

    async def resolve(self, item: WishlistItem) -> Optional[str]:
        if item.external_link:
            return item.external_link

        query = build_search_query(item)
        if not query:
            return None

        log(f"Info: Searching for a verified product URL for \"{item.name}\"...")
        await self.page.goto(build_search_url(query), wait_until="domcontentloaded")
        await self.page.wait_for_timeout(self.settle_ms)

        try:
            anchor = await self.page.wait_for_selector(ORGANIC_RESULT_SELECTOR, timeout=self.result_timeout_ms)
        except PlaywrightTimeoutError:
            anchor = None

        href = await anchor.get_attribute("href") if anchor else None
        if not href:
            log(f"Notice: No verified URL found for \"{item.name}\".")
            return None

        item.external_link = unwrap_redirect(href)
        log(f"Success: Found verified URL for \"{item.name}\".", level="info", url=item.external_link)
        return item.external_link
