"""Tests for run-number allocation and screenshot naming."""

from datetime import date
from pathlib import Path

from screenshotter.models.resolution import Resolution
from screenshotter.utils.run_directory import (
    SCREENSHOTS_DIRNAME,
    ensure_directory,
    next_run_number,
    resolve_run_directory,
    screenshot_filename,
)


class TestNextRunNumber:
    """Tests for next_run_number."""

    def test_empty_directory_starts_at_one(self, tmp_path: Path):
        assert next_run_number(tmp_path) == 1

    def test_missing_directory_treated_as_empty(self, tmp_path: Path):
        assert next_run_number(tmp_path / "does-not-exist") == 1

    def test_picks_one_past_highest(self, tmp_path: Path):
        for n in ("1", "2", "5"):
            (tmp_path / n).mkdir()
        assert next_run_number(tmp_path) == 6

    def test_ignores_non_numeric_entries(self, tmp_path: Path):
        (tmp_path / "3").mkdir()
        (tmp_path / "latest").mkdir()
        (tmp_path / "4a").mkdir()
        (tmp_path / "99").write_text("a file, not a run directory")
        assert next_run_number(tmp_path) == 4


class TestResolveRunDirectory:
    """Tests for resolve_run_directory."""

    def test_builds_layout_and_creates_directory(self, tmp_path: Path):
        run_dir = resolve_run_directory(tmp_path, "example.com", today=date(2026, 3, 7))

        assert run_dir == tmp_path / SCREENSHOTS_DIRNAME / "example.com" / "20260307" / "1"
        assert run_dir.is_dir()

    def test_successive_runs_get_new_numbers(self, tmp_path: Path):
        first = resolve_run_directory(tmp_path, "example.com", today=date(2026, 3, 7))
        second = resolve_run_directory(tmp_path, "example.com", today=date(2026, 3, 7))

        assert first.name == "1"
        assert second.name == "2"

    def test_numbering_is_per_host_and_day(self, tmp_path: Path):
        resolve_run_directory(tmp_path, "example.com", today=date(2026, 3, 7))
        other_host = resolve_run_directory(tmp_path, "other.org", today=date(2026, 3, 7))
        other_day = resolve_run_directory(tmp_path, "example.com", today=date(2026, 3, 8))

        assert other_host.name == "1"
        assert other_day.name == "1"


class TestEnsureDirectory:
    """Tests for ensure_directory."""

    def test_creates_parents_and_is_idempotent(self, tmp_path: Path):
        target = tmp_path / "a" / "b" / "c"
        ensure_directory(target)
        ensure_directory(target)
        assert target.is_dir()


class TestScreenshotFilename:
    """Tests for screenshot_filename."""

    def test_root_page(self):
        res = Resolution(width=1920, height=1080)
        assert screenshot_filename(res, "https://example.com") == "1920x1080-root.png"

    def test_nested_page(self):
        res = Resolution(width=390, height=844)
        assert screenshot_filename(res, "https://example.com/about/us") == "390x844-about-us.png"

    def test_query_not_part_of_name(self):
        res = Resolution(width=800, height=600)
        assert screenshot_filename(res, "https://example.com/search?q=1") == "800x600-search.png"
