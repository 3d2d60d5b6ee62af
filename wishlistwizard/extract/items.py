import re
from typing import Any, List, Optional

from wishlistwizard.core.logging import log
from wishlistwizard.core.errors import MalformedLinkError
from wishlistwizard.core.models import WishlistItem
from wishlistwizard.core.constants import (
    AMAZON_BASE_URL,
    BYLINE_SELECTOR,
    CATALOG_NAME_SELECTOR,
    NON_CATALOG_MARKER_SELECTOR,
    NON_CATALOG_NAME_SELECTOR,
    OPTION_SELECTOR,
)
from wishlistwizard.extract.links import normalize_product_link

ABSOLUTE_URL_RE = re.compile(r"^https?://\S+$", re.IGNORECASE)


class ItemExtractor:
    """
    Turns wishlist item nodes into WishlistItem records.

    Two layouts exist. Non-catalog entries (no ASIN) carry a single free-text
    title that is sometimes just a pasted URL. Catalog entries carry a product
    anchor, a byline and zero or more selected-option labels.
    """

    def __init__(self, base_url: str = AMAZON_BASE_URL):
        self.base_url = base_url

    async def extract_all(self, nodes: List[Any]) -> List[WishlistItem]:
        items = []
        for node in nodes:
            item = await self.extract(node)
            if item is not None:
                items.append(item)
        return items

    async def extract(self, node: Any) -> Optional[WishlistItem]:
        """Extract one item; None when the node carries no usable data."""
        if await node.query_selector(NON_CATALOG_MARKER_SELECTOR):
            item = await self._extract_non_catalog(node)
        else:
            item = await self._extract_catalog(node)

        if not item.is_retained():
            log("Skipping wishlist node without name or link.", level="debug")
            return None

        log(
            f"Detail: Item scraped - Name: \"{item.name}\", Manufacturer: \"{item.manufacturer}\"",
            level="debug",
            item=item.model_dump(),
        )
        return item

    async def _extract_non_catalog(self, node: Any) -> WishlistItem:
        item = WishlistItem()
        text = await _text_of(node, NON_CATALOG_NAME_SELECTOR)
        if ABSOLUTE_URL_RE.match(text):
            item.external_link = text
        else:
            item.name = text
        return item

    async def _extract_catalog(self, node: Any) -> WishlistItem:
        item = WishlistItem()

        anchor = await node.query_selector(CATALOG_NAME_SELECTOR)
        if anchor:
            item.name = (await anchor.inner_text()).strip()
            href = await anchor.get_attribute("href")
            if href:
                try:
                    item.product_link = normalize_product_link(href, self.base_url)
                except MalformedLinkError as e:
                    log(f"Error: Problem parsing the product URL {href!r}: {e}", level="warning")

        item.manufacturer = await _text_of(node, BYLINE_SELECTOR)

        for option_el in await node.query_selector_all(OPTION_SELECTOR):
            option = (await option_el.inner_text()).strip()
            if option:
                item.options.append(option)

        return item


async def _text_of(node: Any, selector: str) -> str:
    el = await node.query_selector(selector)
    if not el:
        return ""
    return (await el.inner_text()).strip()
