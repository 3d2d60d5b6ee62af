import asyncio
import os
import traceback
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from wishlistwizard.core.config import ConfigManager
from wishlistwizard.core.errors import NoWishlistUrlError
from wishlistwizard.core.logging import log, Logger
from wishlistwizard.core.models import PipelineReport
from wishlistwizard.core.pipeline import WishlistPipeline
from wishlistwizard.interactive.ui import UI
from wishlistwizard.recon.browser import BrowserManager
from wishlistwizard.utils.ux import UX


async def run_pipeline(urls: List[str], config: Dict[str, Any], output_dir: Optional[Path] = None) -> PipelineReport:
    """Open one browser and push every wishlist through the same page."""
    async with BrowserManager.from_config(config) as browser:
        pipeline = WishlistPipeline(
            browser.page,
            solver=UI.ask_captcha,
            output_dir=output_dir or config.get("output_dir"),
            search_enabled=config.get("search_enabled", True),
        )
        return await pipeline.run(urls)


def scrape(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", help="Directory for the CSV files (default: current directory)"),
):
    """
    Export one or more public Amazon wishlists to CSV.
    """
    run_scrape(verbose=verbose, output_dir=output_dir)


def run_scrape(verbose: bool = False, output_dir: Optional[Path] = None) -> None:
    log_dir = os.environ.get("WISHLISTWIZARD_LOG_DIR")
    Logger.setup_logging(log_dir=Path(log_dir) if log_dir else None, verbose=verbose)
    log("Starting the Amazon wishlist scraper...")

    config = ConfigManager.load_config()

    log("Step 4: Awaiting wishlist URL(s) from user input...")
    try:
        urls = ConfigManager.parse_wishlist_urls(UI.ask_wishlist_urls())
    except NoWishlistUrlError as e:
        UX.print_error(f"Error: {e}")
        raise typer.Exit(code=1)

    try:
        report = asyncio.run(run_pipeline(urls, config, output_dir))
    except KeyboardInterrupt:
        log("Scrape interrupted by user.", level="warning")
        raise typer.Exit(code=0)
    except Exception as e:
        log(f"Unhandled error encountered: {e}", level="error")
        log(f"Fatal Traceback: {traceback.format_exc()}", level="debug")
        raise typer.Exit(code=1)

    UI.show_summary(report)
    if not UX.print_run_result(report):
        raise typer.Exit(code=1)
