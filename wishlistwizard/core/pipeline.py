import time
from pathlib import Path
from typing import Any, Callable, List, Optional

from wishlistwizard.core.logging import log
from wishlistwizard.core.errors import ListNameUnresolvedError, WishlistAbort
from wishlistwizard.core.models import (
    PipelineReport,
    UrlOutcome,
    UrlStatus,
    WishlistBatch,
    sanitize_list_name,
)
from wishlistwizard.core.constants import ITEM_NODE_SELECTOR, LIST_NAME_SELECTOR
from wishlistwizard.extract.items import ItemExtractor
from wishlistwizard.recon.captcha import CaptchaRecovery, CaptchaSolver
from wishlistwizard.recon.scroll import ScrollCompletionDetector
from wishlistwizard.resolve.search import LinkResolver
from wishlistwizard.utils.ascii_art import image_to_ascii
from wishlistwizard.utils.file_io import write_csv


class WishlistPipeline:
    """
    Runs every wishlist URL through the same page, one after another:
    navigate, clear a CAPTCHA, name the list, scroll to the end, extract
    items, look up missing manufacturer links and write the CSV.
    """

    def __init__(
        self,
        page: Any,
        solver: CaptchaSolver,
        output_dir: Optional[Path] = None,
        renderer: Callable[[bytes], str] = image_to_ascii,
        search_enabled: bool = True,
        extractor: Optional[ItemExtractor] = None,
        scroll_detector: Optional[ScrollCompletionDetector] = None,
        captcha: Optional[CaptchaRecovery] = None,
        resolver: Optional[LinkResolver] = None,
    ):
        self.page = page
        self.output_dir = Path(output_dir) if output_dir else Path.cwd()
        self.search_enabled = search_enabled
        self.extractor = extractor or ItemExtractor()
        self.scroll_detector = scroll_detector or ScrollCompletionDetector(page)
        self.captcha = captcha or CaptchaRecovery(page, solver, renderer)
        self.resolver = resolver or LinkResolver(page)

    async def run(self, urls: List[str]) -> PipelineReport:
        """Process all URLs. URL-level aborts are recorded and the loop moves on."""
        report = PipelineReport()
        for url in urls:
            started = time.time()
            try:
                batch, path = await self.process(url)
                report.outcomes.append(UrlOutcome(
                    url=url, status=UrlStatus.DONE, output_path=str(path), item_count=len(batch.items)
                ))
            except WishlistAbort as e:
                log(f"Error: {e} Skipping {url}.", level="error", url=url, error_type=type(e).__name__)
                report.outcomes.append(UrlOutcome(url=url, status=UrlStatus.FAILED, error=str(e)))
            finally:
                log("Wishlist finished", level="debug", url=url, duration_seconds=round(time.time() - started, 2))

        log("All tasks completed.", succeeded=len(report.succeeded), failed=len(report.failed))
        return report

    async def process(self, url: str):
        """Scrape one wishlist and write its CSV. Returns (batch, csv_path)."""
        log(f"Step 5: Navigating to your Amazon wishlist: {url}", url=url)
        await self.page.goto(url, wait_until="domcontentloaded")

        await self.captcha.recover(url)

        log("Step 6: Extracting the wishlist name for file output...")
        list_name = await self.resolve_list_name(url)
        log(f"Success: Wishlist name determined as \"{list_name}\".")

        log("Step 7: Scrolling to load all items in the wishlist. Please wait...")
        scroll = await self.scroll_detector.run()
        log(
            "Scrolling finished",
            level="debug",
            url=url,
            complete=scroll.complete,
            attempts=scroll.attempts,
        )

        log("Step 8: Gathering wishlist item details...")
        nodes = await self.page.query_selector_all(ITEM_NODE_SELECTOR)
        log(f"Status: {len(nodes)} item(s) found in the wishlist.")
        batch = WishlistBatch(list_name=list_name, source_url=url)
        batch.items = await self.extractor.extract_all(nodes)

        if self.search_enabled:
            log("Step 9: Verifying product URLs via DuckDuckGo (if needed)...")
            await self.resolver.resolve_all(batch.items)

        log("Step 10: Preparing data for CSV export...")
        path = write_csv(self.output_dir / batch.output_filename, batch.items)
        log(
            f"Final Step: Successfully saved your wishlist data to \"{path}\".",
            url=url,
            item_count=len(batch.items),
        )
        return batch, path

    async def resolve_list_name(self, url: str = "") -> str:
        element = await self.page.query_selector(LIST_NAME_SELECTOR)
        raw = (await element.inner_text()).strip() if element else ""
        if not raw:
            raise ListNameUnresolvedError(
                "Unable to retrieve a valid wishlist name. The list may not be public "
                "or CAPTCHA verification may have failed.",
                url=url,
            )
        return sanitize_list_name(raw)
