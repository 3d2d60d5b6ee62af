from typing import Dict, Optional, Any
from playwright.async_api import async_playwright
from playwright_stealth import Stealth

from wishlistwizard.core.logging import log
from wishlistwizard.core.constants import BROWSER_LAUNCH_ARGS, DEFAULT_USER_AGENT


class BrowserManager:
    """
    Owns the single Playwright page that the whole run shares.
    """
    def __init__(
        self,
        headless: bool = False,
        user_agent: str = DEFAULT_USER_AGENT,
        executable_path: Optional[str] = None,
        stealth: Optional[Stealth] = None,
    ):
        self.headless = headless
        self.user_agent = user_agent
        self.executable_path = executable_path
        self.stealth = stealth or Stealth()
        self.playwright = None
        self.browser = None
        self.context = None
        self.page = None

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "BrowserManager":
        return cls(
            headless=config.get("headless", False),
            user_agent=config.get("user_agent") or DEFAULT_USER_AGENT,
            executable_path=config.get("chrome_path"),
        )

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self) -> None:
        """Start the browser session."""
        if self.executable_path:
            log(f"Step 1: Using system Chrome at {self.executable_path}.")
        else:
            log("Step 1: Using Playwright Chromium browser.")

        self.playwright = await async_playwright().start()

        launch_args = {
            "headless": self.headless,
            "args": BROWSER_LAUNCH_ARGS,
        }
        if self.executable_path:
            launch_args["executable_path"] = self.executable_path

        log(f"Step 2: Launching {'headless' if self.headless else 'headed'} browser...")
        self.browser = await self.playwright.chromium.launch(**launch_args)

        log("Step 3: Initializing browser context...")
        self.context = await self.browser.new_context(user_agent=self.user_agent)
        # Masks navigator.webdriver, HeadlessChrome and similar automation tells on every page
        await self.stealth.apply_stealth_async(self.context)
        self.page = await self.context.new_page()

    async def close(self) -> None:
        """Close the browser session."""
        if self.context:
            await self.context.close()
        if self.browser:
            await self.browser.close()
        if self.playwright:
            await self.playwright.stop()
        self.context = self.browser = self.playwright = self.page = None
