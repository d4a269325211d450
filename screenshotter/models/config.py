"""Configuration models for the screenshotter."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, PositiveInt, field_validator

from .resolution import DEFAULT_RESOLUTION, Resolution, dedupe_resolutions, parse_resolution

# Upper bound Playwright gets for a networkidle navigation; the early timeout
# usually wins the race well before this.
NAVIGATION_TIMEOUT_MS = 30000

SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")

BrowserName = Literal["chromium", "firefox", "webkit"]


class ScreenshotConfig(BaseModel):
    # Target
    url: str

    # Capture settings
    resolutions: list[Resolution] = Field(
        default_factory=lambda: [DEFAULT_RESOLUTION], min_length=1
    )
    output_dir: str = "."
    browser: BrowserName = "chromium"
    headless: bool = True

    # Crawl settings
    crawl: bool = False
    max_pages: PositiveInt = 50
    timeout_ms: PositiveInt = 5000

    @field_validator("url", mode="before")
    @classmethod
    def strip_url(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("browser", mode="before")
    @classmethod
    def lowercase_browser(cls, v):
        return v.lower() if isinstance(v, str) else v

    @field_validator("resolutions", mode="before")
    @classmethod
    def parse_resolution_strings(cls, v):
        if isinstance(v, (list, tuple)):
            return [parse_resolution(item) if isinstance(item, str) else item for item in v]
        return v

    @field_validator("resolutions")
    @classmethod
    def drop_duplicate_resolutions(cls, v: list[Resolution]) -> list[Resolution]:
        return dedupe_resolutions(v)

    @classmethod
    def load(cls, path: str | Path) -> "ScreenshotConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)
