"""Output layout — run-number allocation and screenshot naming.

Screenshots land in ``<output>/generated-screenshots/<host>/<YYYYMMDD>/<run>/``.
The run number is one past the highest numeric directory already present for
the day. Nothing locks that directory, so two invocations started at the same
moment against the same output root can pick the same run number.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from screenshotter.models.resolution import Resolution
from screenshotter.url_utils import sanitize_path

logger = logging.getLogger(__name__)

SCREENSHOTS_DIRNAME = "generated-screenshots"


def ensure_directory(path: Path) -> Path:
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def next_run_number(date_dir: Path) -> int:
    """Return one more than the largest numeric subdirectory name, or 1."""
    date_dir = Path(date_dir)
    if not date_dir.is_dir():
        return 1
    existing = [
        int(entry.name)
        for entry in date_dir.iterdir()
        if entry.is_dir() and entry.name.isascii() and entry.name.isdigit()
    ]
    return max(existing) + 1 if existing else 1


def resolve_run_directory(
    output_dir: str | Path, hostname: str, today: Optional[date] = None
) -> Path:
    """Create and return the run directory for this invocation."""
    today = today or datetime.now(timezone.utc).date()
    date_dir = Path(output_dir) / SCREENSHOTS_DIRNAME / hostname / today.strftime("%Y%m%d")
    ensure_directory(date_dir)
    run_number = next_run_number(date_dir)
    logger.info("Using run number: %d", run_number)
    return ensure_directory(date_dir / str(run_number))


def screenshot_filename(resolution: Resolution, url: str) -> str:
    return f"{resolution.label}-{sanitize_path(urlparse(url).path)}.png"
