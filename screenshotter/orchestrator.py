"""Run orchestrator — drives the crawler from synchronous callers and persists reports."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from screenshotter.crawler.crawler import Crawler
from screenshotter.models.config import ScreenshotConfig
from screenshotter.models.run_report import RunReport

logger = logging.getLogger(__name__)


class Orchestrator:
    """Runs one screenshot crawl per invocation."""

    def __init__(self, config: ScreenshotConfig):
        self.config = config

    def run(self) -> RunReport:
        """Execute the crawl/capture run to completion."""
        return asyncio.run(self._run())

    async def _run(self) -> RunReport:
        crawler = Crawler(self.config)
        return await crawler.run()


def save_report(report: RunReport, path: str | Path) -> Path:
    """Write a machine-readable JSON report of the run."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = report.model_dump()
    data["summary"] = {
        "pages_processed": report.pages_processed,
        "pages_failed": report.pages_failed,
        "screenshots_taken": report.screenshots_taken,
    }
    logger.debug("Saving run report to %s", path)
    with open(path, "w") as f:
        json.dump(data, f, indent=2, default=str)
    return path
