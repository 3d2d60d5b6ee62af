import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional
from playwright.async_api import Error as PlaywrightError

from wishlistwizard.core.logging import log
from wishlistwizard.core.constants import (
    END_OF_LIST_SELECTOR,
    MAX_SCROLL_ATTEMPTS,
    SCROLL_SETTLE_MS,
    STABILIZE_POLL_MS,
    STABILIZE_THRESHOLD_MS,
)

SCROLL_TO_BOTTOM_JS = "window.scrollTo(0, document.body.scrollHeight)"

# Upper bound on the stabilizing phase when the sentinel keeps flickering
MAX_STABILIZE_MS = 6 * STABILIZE_THRESHOLD_MS


class ScrollState(Enum):
    SCROLLING = "SCROLLING"
    SENTINEL_SEEN = "SENTINEL_SEEN"
    STABILIZING = "STABILIZING"
    DONE = "DONE"


@dataclass
class ScrollResult:
    state: ScrollState
    complete: bool
    attempts: int


class ScrollCompletionDetector:
    """
    Scrolls an infinite-scroll wishlist until the "End of list" sentinel has
    stayed visible for a continuous stretch, or the scroll budget runs out.
    """

    def __init__(
        self,
        page: Any,
        sentinel_selector: str = END_OF_LIST_SELECTOR,
        max_attempts: int = MAX_SCROLL_ATTEMPTS,
        settle_ms: int = SCROLL_SETTLE_MS,
        stabilize_ms: int = STABILIZE_THRESHOLD_MS,
        poll_ms: int = STABILIZE_POLL_MS,
        max_stabilize_ms: int = MAX_STABILIZE_MS,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.page = page
        self.sentinel_selector = sentinel_selector
        self.max_attempts = max_attempts
        self.settle_ms = settle_ms
        self.stabilize_ms = stabilize_ms
        self.poll_ms = poll_ms
        self.max_stabilize_ms = max_stabilize_ms
        self.clock = clock or time.monotonic
        self.state = ScrollState.SCROLLING
        self.attempts = 0

    async def run(self) -> ScrollResult:
        self.state = ScrollState.SCROLLING
        self.attempts = 0

        while self.state == ScrollState.SCROLLING:
            await self.page.evaluate(SCROLL_TO_BOTTOM_JS)
            await self.page.wait_for_timeout(self.settle_ms)
            self.attempts += 1

            if await self._sentinel_visible():
                self.state = ScrollState.SENTINEL_SEEN
            elif self.attempts >= self.max_attempts:
                self.state = ScrollState.DONE
                log(
                    "Notice: End of list not detected after maximum scroll attempts; proceeding with available items.",
                    level="warning",
                    attempts=self.attempts,
                )
                return ScrollResult(self.state, complete=False, attempts=self.attempts)

        log("Status: Reached the end of the wishlist.", attempts=self.attempts)
        self.state = ScrollState.STABILIZING
        complete = await self._stabilize()
        self.state = ScrollState.DONE
        return ScrollResult(self.state, complete=complete, attempts=self.attempts)

    async def _stabilize(self) -> bool:
        """Wait until the sentinel has been visible without a gap for stabilize_ms."""
        visible_ms = 0.0
        started = last_check = self.clock()

        while True:
            sentinel = await self._query_sentinel()
            now = self.clock()
            if sentinel is not None and await self._is_visible(sentinel, scroll=True):
                visible_ms += (now - last_check) * 1000
            else:
                visible_ms = 0.0
            last_check = now

            if visible_ms >= self.stabilize_ms:
                log("Status: End of list stayed visible; all items loaded.", level="debug")
                return True

            if (now - started) * 1000 >= self.max_stabilize_ms:
                log("Notice: End of list kept disappearing; proceeding with available items.", level="warning")
                return False

            await self.page.wait_for_timeout(self.poll_ms)

    async def _query_sentinel(self):
        try:
            return await self.page.query_selector(self.sentinel_selector)
        except PlaywrightError:
            return None

    async def _sentinel_visible(self) -> bool:
        sentinel = await self._query_sentinel()
        return sentinel is not None and await self._is_visible(sentinel)

    @staticmethod
    async def _is_visible(element: Any, scroll: bool = False) -> bool:
        try:
            if scroll:
                await element.scroll_into_view_if_needed()
            return await element.is_visible()
        except PlaywrightError:
            # Detached during a reflow
            return False
