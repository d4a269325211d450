"""Pytest configuration and shared fixtures."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, Mock, patch

import pytest

from screenshotter.models.config import ScreenshotConfig
from screenshotter.models.resolution import Resolution
from screenshotter.models.run_report import PageResult, RunReport


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def desktop_resolution() -> Resolution:
    return Resolution(width=1920, height=1080)


@pytest.fixture
def mobile_resolution() -> Resolution:
    return Resolution(width=390, height=844)


@pytest.fixture
def screenshot_config(tmp_path: Path, desktop_resolution: Resolution) -> ScreenshotConfig:
    """Create a test screenshot configuration writing under tmp_path."""
    return ScreenshotConfig(
        url="https://example.com",
        resolutions=[desktop_resolution],
        output_dir=str(tmp_path / "out"),
        browser="chromium",
        crawl=False,
        max_pages=50,
        timeout_ms=5000,
    )


@pytest.fixture
def temp_config_file(screenshot_config: ScreenshotConfig, tmp_path: Path) -> Path:
    """Create a temporary config file."""
    config_file = tmp_path / "screenshotter.json"
    screenshot_config.save(config_file)
    return config_file


# ============================================================================
# Report Fixtures
# ============================================================================


@pytest.fixture
def run_report() -> RunReport:
    return RunReport(
        seed_url="https://example.com",
        run_directory="/tmp/out/generated-screenshots/example.com/20260101/1",
        started_at="2026-01-01T00:00:00Z",
        completed_at="2026-01-01T00:00:05Z",
        duration_seconds=5.0,
        crawl_enabled=True,
        max_pages=2,
        pages=[
            PageResult(
                url="https://example.com",
                navigation="loaded",
                screenshots=["/tmp/out/1920x1080-root.png"],
                links_found=3,
            ),
            PageResult(
                url="https://example.com/broken",
                status="failed",
                error="net::ERR_CONNECTION_REFUSED",
            ),
        ],
        budget_reached=True,
        frontier_remaining=2,
    )


# ============================================================================
# Playwright Fixtures
# ============================================================================


def make_mock_page(links_by_url: dict[str, list[str]] | None = None) -> AsyncMock:
    """Build a mock Playwright page.

    ``links_by_url`` maps a visited URL to the raw hrefs its DOM exposes;
    ``page.evaluate`` answers with the hrefs of the most recent ``goto``.
    """
    links_by_url = links_by_url or {}
    page = AsyncMock()
    page.visited = []

    async def goto(url, **kwargs):
        page.visited.append(url)
        return Mock(status=200)

    async def evaluate(js_code, *args, **kwargs):
        current = page.visited[-1] if page.visited else ""
        return list(links_by_url.get(current, []))

    page.goto = AsyncMock(side_effect=goto)
    page.evaluate = AsyncMock(side_effect=evaluate)
    page.set_viewport_size = AsyncMock()
    page.screenshot = AsyncMock()
    return page


@pytest.fixture
def mock_page() -> AsyncMock:
    return make_mock_page()


@pytest.fixture
def page_factory():
    return make_mock_page


@pytest.fixture
def patched_playwright():
    """Patch the crawler's Playwright entry points.

    Yields a namespace whose ``page`` attribute can be replaced before the
    crawl runs, plus the browser and launcher mocks for assertions.
    """
    state = Mock()
    state.page = make_mock_page()
    state.browser = AsyncMock()
    state.browser.close = AsyncMock()

    async def new_page():
        return state.page

    state.context = AsyncMock()
    state.context.new_page = AsyncMock(side_effect=new_page)

    with patch("screenshotter.crawler.crawler.async_playwright") as mock_pw, \
         patch("screenshotter.crawler.crawler.launch_browser",
               new_callable=AsyncMock, return_value=state.browser) as mock_launch, \
         patch("screenshotter.crawler.crawler.create_context",
               new_callable=AsyncMock, return_value=state.context):
        mock_pw.return_value.__aenter__ = AsyncMock(return_value=MagicMock())
        mock_pw.return_value.__aexit__ = AsyncMock(return_value=False)
        state.launch = mock_launch
        yield state
