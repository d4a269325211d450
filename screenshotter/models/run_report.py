"""Run report data structures produced by the crawler."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class PageResult(BaseModel):
    """Outcome of processing a single URL."""
    url: str
    status: str = "captured"  # captured, failed
    navigation: str = ""  # loaded, early_timeout, navigation_timeout
    screenshots: list[str] = Field(default_factory=list)  # file paths
    links_found: int = 0
    error: Optional[str] = None


class RunReport(BaseModel):
    seed_url: str
    run_directory: str = ""
    started_at: str = ""
    completed_at: str = ""
    duration_seconds: float = 0.0
    crawl_enabled: bool = False
    max_pages: int = 0
    pages: list[PageResult] = Field(default_factory=list)
    budget_reached: bool = False
    frontier_remaining: int = 0

    @property
    def pages_processed(self) -> int:
        return len(self.pages)

    @property
    def pages_failed(self) -> int:
        return sum(1 for p in self.pages if p.status == "failed")

    @property
    def screenshots_taken(self) -> int:
        return sum(len(p.screenshots) for p in self.pages)
