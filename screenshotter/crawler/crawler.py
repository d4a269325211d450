"""Site crawler — visits same-origin pages and captures them at each resolution."""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from playwright.async_api import Browser, Page, async_playwright

from screenshotter.models.config import NAVIGATION_TIMEOUT_MS, ScreenshotConfig
from screenshotter.models.run_report import PageResult, RunReport
from screenshotter.url_utils import is_absolute_http_url, normalize_url
from screenshotter.utils.browser import create_context, launch_browser
from screenshotter.utils.run_directory import resolve_run_directory, screenshot_filename

from .link_extractor import extract_links
from .navigation import navigate_with_early_timeout

logger = logging.getLogger(__name__)


class CrawlSetupError(RuntimeError):
    """Raised when the run cannot start: bad seed URL, output dir, or browser."""


class CrawlState(str, Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    CRAWLING = "crawling"
    DRAINING = "draining"
    DONE = "done"
    FAILED = "failed"


class Crawler:
    """Crawls a website breadth-first and screenshots every visited page.

    One browser page is reused for the whole run. The crawl loop:

    1. Pops the oldest URL off the frontier
    2. Skips it if its normalized form was already visited
    3. Navigates, racing network idle against the early timeout
    4. Captures a full-page screenshot per configured resolution, in order
    5. In crawl mode, queues the page's same-origin links at the tail
    6. Repeats until the frontier is empty or the page budget is spent

    Duplicates are allowed into the frontier and filtered when dequeued.
    A failure on one URL is logged and recorded; the run carries on.
    """

    def __init__(self, config: ScreenshotConfig):
        self.config = config
        self.state = CrawlState.IDLE
        self.run_dir: Optional[Path] = None

        self._frontier: deque[str] = deque()
        self._visited_urls: set[str] = set()
        self._processed_count = 0
        self._pending_navigations: list[asyncio.Task] = []
        self._report = RunReport(
            seed_url=config.url,
            crawl_enabled=config.crawl,
            max_pages=config.max_pages,
        )

    async def run(self) -> RunReport:
        """Execute the crawl and return a RunReport."""
        start_time = time.time()
        self._report.started_at = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
        self.state = CrawlState.INITIALIZING

        try:
            seed = self._validate_seed()
            self._log_settings(seed)
            self.run_dir = self._prepare_run_directory(seed)
            self._report.run_directory = str(self.run_dir)

            async with async_playwright() as p:
                browser = await self._launch(p)
                try:
                    page = await self._open_page(browser)
                    self.state = CrawlState.CRAWLING
                    self._frontier.append(seed)
                    await self._crawl(page)
                    self.state = CrawlState.DRAINING
                    self._drain()
                finally:
                    await self._release(browser)
        except Exception:
            self.state = CrawlState.FAILED
            raise

        self.state = CrawlState.DONE
        duration = time.time() - start_time
        self._report.completed_at = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
        self._report.duration_seconds = round(duration, 2)
        logger.info(
            "Run complete: %d pages, %d screenshots in %.1fs",
            self._report.pages_processed, self._report.screenshots_taken, duration,
        )
        return self._report

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def _validate_seed(self) -> str:
        seed = normalize_url(self.config.url)
        if not is_absolute_http_url(seed):
            raise CrawlSetupError(
                f"Invalid URL: {self.config.url!r}. "
                "Please provide a full URL including http:// or https://"
            )
        return seed

    def _prepare_run_directory(self, seed: str) -> Path:
        hostname = urlparse(seed).hostname
        today = datetime.now(timezone.utc).date()
        try:
            return resolve_run_directory(self.config.output_dir, hostname, today=today)
        except OSError as e:
            raise CrawlSetupError(f"Could not create output directory: {e}") from e

    async def _launch(self, playwright) -> Browser:
        logger.info("Launching %s...", self.config.browser)
        try:
            browser = await launch_browser(
                playwright, self.config.browser, headless=self.config.headless
            )
        except Exception as e:
            raise CrawlSetupError(f"Failed to launch {self.config.browser}: {e}") from e
        logger.info("Browser launched successfully.")
        return browser

    async def _open_page(self, browser: Browser) -> Page:
        try:
            context = await create_context(browser)
            return await context.new_page()
        except Exception as e:
            raise CrawlSetupError(f"Failed to open a browser page: {e}") from e

    def _log_settings(self, seed: str) -> None:
        logger.info("Target URL: %s", seed)
        logger.info("Browser: %s", self.config.browser)
        logger.info("Output directory: %s", Path(self.config.output_dir).resolve())
        logger.info(
            "Early screenshot timeout: %dms, navigation max timeout: %dms",
            self.config.timeout_ms, NAVIGATION_TIMEOUT_MS,
        )
        logger.info("Crawl mode: %s", "enabled" if self.config.crawl else "disabled")
        if self.config.crawl:
            logger.info("Max pages: %d", self.config.max_pages)
        logger.info(
            "Resolutions to capture: %s",
            ", ".join(r.label for r in self.config.resolutions),
        )

    # ------------------------------------------------------------------
    # Core crawl loop
    # ------------------------------------------------------------------

    async def _crawl(self, page: Page) -> None:
        """Breadth-first crawl until the frontier empties or the budget is spent."""
        while self._frontier and self._processed_count < self.config.max_pages:
            url = normalize_url(self._frontier.popleft())
            if url in self._visited_urls:
                continue

            self._visited_urls.add(url)
            self._processed_count += 1
            logger.info(
                "[%d/%d] Processing URL: %s",
                self._processed_count, self.config.max_pages, url,
            )

            result = await self._process_url(page, url)
            self._report.pages.append(result)

    async def _process_url(self, page: Page, url: str) -> PageResult:
        """Navigate, capture, and (in crawl mode) discover links for one URL."""
        result = PageResult(url=url)
        try:
            outcome, navigation = await navigate_with_early_timeout(
                page, url, self.config.timeout_ms
            )
            result.navigation = outcome.value
            self._track_navigation(navigation)

            await self._capture(page, url, result)

            if self.config.crawl:
                links = await extract_links(page, url)
                result.links_found = len(links)
                queued = self._enqueue_links(links)
                logger.info(
                    "Found %d links, %d queued. Queue size: %d, visited: %d",
                    len(links), queued, len(self._frontier), len(self._visited_urls),
                )
        except Exception as e:
            logger.error("Error processing %s: %s", url, e)
            logger.debug("Skipping to next URL after failure on %s", url, exc_info=True)
            result.status = "failed"
            result.error = str(e) or type(e).__name__
        return result

    def _track_navigation(self, navigation: asyncio.Task) -> None:
        """Keep only still-running navigations for teardown."""
        self._pending_navigations = [t for t in self._pending_navigations if not t.done()]
        if not navigation.done():
            self._pending_navigations.append(navigation)

    async def _capture(self, page: Page, url: str, result: PageResult) -> None:
        for resolution in self.config.resolutions:
            await page.set_viewport_size(resolution.as_viewport())
            output_path = self.run_dir / screenshot_filename(resolution, url)
            await page.screenshot(path=str(output_path), full_page=True)
            result.screenshots.append(str(output_path))
            logger.info("Screenshot saved (%s): %s", resolution.label, output_path)

    def _enqueue_links(self, links: list[str]) -> int:
        """Append unvisited links to the frontier. Returns how many were queued."""
        queued = 0
        for link in links:
            normalized = normalize_url(link)
            if normalized in self._visited_urls:
                continue
            self._frontier.append(normalized)
            queued += 1
        return queued

    # ------------------------------------------------------------------
    # Draining and teardown
    # ------------------------------------------------------------------

    def _drain(self) -> None:
        budget_reached = self._processed_count >= self.config.max_pages
        self._report.budget_reached = budget_reached
        self._report.frontier_remaining = len(self._frontier)

        logger.info(
            "Crawling complete. Processed %d pages (%d failed), budget reached: %s, "
            "%d frontier entries left.",
            self._processed_count, self._report.pages_failed,
            "yes" if budget_reached else "no", len(self._frontier),
        )
        if budget_reached and self._frontier:
            logger.info(
                "Reached maximum page limit of %d. %d URLs not processed.",
                self.config.max_pages, len(self._frontier),
            )

    async def _release(self, browser: Browser) -> None:
        pending = [t for t in self._pending_navigations if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._pending_navigations.clear()

        logger.info("Closing browser...")
        try:
            await browser.close()
        except Exception as e:
            logger.warning("Browser close failed: %s", e)
        else:
            logger.info("Browser closed.")
