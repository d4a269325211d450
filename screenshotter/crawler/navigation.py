"""Page navigation with an early-capture deadline.

Playwright is asked to wait for network idle with a long upper bound, while
the crawler only waits for the shorter, user-configured early timeout. When
the early timeout wins, capture proceeds on whatever has rendered so far and
the navigation keeps running in the background; its result is discarded.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from screenshotter.models.config import NAVIGATION_TIMEOUT_MS

logger = logging.getLogger(__name__)


class NavigationOutcome(str, Enum):
    LOADED = "loaded"
    EARLY_TIMEOUT = "early_timeout"
    NAVIGATION_TIMEOUT = "navigation_timeout"


def _discard_navigation_result(task: asyncio.Task) -> None:
    """Retrieve a background navigation's outcome so it is never re-raised."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("Background navigation ended with: %s", exc)


async def navigate_with_early_timeout(
    page: Page,
    url: str,
    early_timeout_ms: int,
    navigation_timeout_ms: int = NAVIGATION_TIMEOUT_MS,
) -> tuple[NavigationOutcome, asyncio.Task]:
    """Navigate ``page`` to ``url`` and return once loaded or the early timeout fires.

    Returns the outcome and the navigation task; the task may still be pending
    when the outcome is EARLY_TIMEOUT. A Playwright timeout on the navigation
    itself is reported as NAVIGATION_TIMEOUT; any other navigation error is
    raised.
    """
    navigation = asyncio.ensure_future(
        page.goto(url, wait_until="networkidle", timeout=navigation_timeout_ms)
    )
    navigation.add_done_callback(_discard_navigation_result)

    done, _ = await asyncio.wait({navigation}, timeout=early_timeout_ms / 1000)
    if navigation not in done:
        logger.info(
            "Early timeout (%dms) reached for %s, capturing what has rendered",
            early_timeout_ms, url,
        )
        return NavigationOutcome.EARLY_TIMEOUT, navigation

    try:
        navigation.result()
    except PlaywrightTimeoutError:
        logger.warning(
            "Navigation timeout (%dms) reached for %s, continuing with capture",
            navigation_timeout_ms, url,
        )
        return NavigationOutcome.NAVIGATION_TIMEOUT, navigation

    logger.debug("Navigation complete (network idle): %s", url)
    return NavigationOutcome.LOADED, navigation
