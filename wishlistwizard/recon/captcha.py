import inspect
from typing import Any, Awaitable, Callable, Optional, Union
from PIL import UnidentifiedImageError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from wishlistwizard.core.logging import log
from wishlistwizard.core.errors import CaptchaRecoveryError
from wishlistwizard.core.constants import (
    CAPTCHA_CONTAINER_SELECTOR,
    CAPTCHA_DETECT_TIMEOUT_MS,
    CAPTCHA_INPUT_SELECTOR,
    CAPTCHA_PROMPT_SELECTOR,
    CAPTCHA_SETTLE_MS,
)
from wishlistwizard.utils.ascii_art import image_to_ascii

# Receives the rendered challenge, returns the human's answer (sync or async)
CaptchaSolver = Callable[[str], Union[str, Awaitable[str]]]


class CaptchaRecovery:
    """
    Human-in-the-loop recovery from Amazon's "Enter the characters" challenge.

    Exactly one submission is made per challenge. A challenge that survives the
    submission is escalated as CaptchaRecoveryError instead of retried.
    """

    def __init__(
        self,
        page: Any,
        solver: CaptchaSolver,
        renderer: Callable[[bytes], str] = image_to_ascii,
        detect_timeout_ms: int = CAPTCHA_DETECT_TIMEOUT_MS,
        settle_ms: int = CAPTCHA_SETTLE_MS,
    ):
        self.page = page
        self.solver = solver
        self.renderer = renderer
        self.detect_timeout_ms = detect_timeout_ms
        self.settle_ms = settle_ms

    async def detect(self) -> bool:
        try:
            await self.page.wait_for_selector(CAPTCHA_PROMPT_SELECTOR, timeout=self.detect_timeout_ms)
            return True
        except PlaywrightTimeoutError:
            return False

    async def recover(self, url: str = "") -> bool:
        """
        Returns False when no challenge was shown and True when one was solved.
        Raises CaptchaRecoveryError when the challenge could not be cleared.
        """
        if not await self.detect():
            log("No CAPTCHA challenge detected. Continuing with wishlist scraping.", level="debug")
            return False

        log("Alert: CAPTCHA challenge detected. Preparing to solve CAPTCHA...", level="warning", url=url)

        container = await self.page.query_selector(CAPTCHA_CONTAINER_SELECTOR)
        if not container:
            raise CaptchaRecoveryError("CAPTCHA image not found on the challenge page.", url=url)

        try:
            art = self.renderer(await container.screenshot())
        except UnidentifiedImageError as e:
            raise CaptchaRecoveryError(f"CAPTCHA image could not be read: {e}", url=url) from e
        answer = await self._ask(art)

        captcha_input = await self.page.query_selector(CAPTCHA_INPUT_SELECTOR)
        if not captcha_input:
            raise CaptchaRecoveryError("CAPTCHA input field not found on the challenge page.", url=url)

        await captcha_input.fill(answer.strip().upper())
        await captcha_input.press("Enter")
        log("Submitted CAPTCHA response. Waiting for verification...")
        await self.page.wait_for_timeout(self.settle_ms)

        if await self.page.query_selector(CAPTCHA_PROMPT_SELECTOR):
            raise CaptchaRecoveryError(
                "CAPTCHA verification failed. Please check your input and try again.", url=url
            )

        log("CAPTCHA solved successfully.", url=url)
        return True

    async def _ask(self, art: str) -> str:
        answer: Optional[Any] = self.solver(art)
        if inspect.isawaitable(answer):
            answer = await answer
        return answer or ""
