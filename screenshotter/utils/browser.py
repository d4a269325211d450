"""Browser launch utilities — one Playwright browser, context, and page per run."""

from __future__ import annotations

from playwright.async_api import Browser, BrowserContext, BrowserType, Playwright

from screenshotter.models.config import SUPPORTED_BROWSERS


def get_browser_type(playwright: Playwright, name: str) -> BrowserType:
    """Return the Playwright browser type for a supported browser name."""
    name = name.lower()
    if name not in SUPPORTED_BROWSERS:
        raise ValueError(
            f"Invalid browser '{name}'. Choose from: {', '.join(SUPPORTED_BROWSERS)}"
        )
    return getattr(playwright, name)


async def launch_browser(playwright: Playwright, name: str, headless: bool = True) -> Browser:
    return await get_browser_type(playwright, name).launch(headless=headless)


async def create_context(browser: Browser) -> BrowserContext:
    """Create a fresh browser context; the crawler sets the viewport per resolution."""
    return await browser.new_context()
