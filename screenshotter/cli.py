"""CLI entry point for the site screenshotter."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from click.core import ParameterSource
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from screenshotter.crawler.crawler import CrawlSetupError
from screenshotter.models.config import SUPPORTED_BROWSERS, ScreenshotConfig
from screenshotter.models.resolution import (
    DEFAULT_RESOLUTION,
    DEVICE_PRESETS,
    Resolution,
    ResolutionError,
    parse_resolution,
)
from screenshotter.models.run_report import RunReport
from screenshotter.orchestrator import Orchestrator, save_report

console = Console()
logger = logging.getLogger(__name__)

# CLI option name -> ScreenshotConfig field
_OPTION_FIELDS = {
    "output": "output_dir",
    "browser": "browser",
    "crawl": "crawl",
    "max_pages": "max_pages",
    "timeout": "timeout_ms",
}


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _parse_resolution_option(ctx, param, values: tuple[str, ...]) -> list[Resolution]:
    resolutions = []
    for value in values:
        try:
            resolutions.append(parse_resolution(value))
        except ResolutionError as e:
            raise click.BadParameter(str(e), ctx=ctx, param=param) from e
    return resolutions


def build_resolutions(
    custom: list[Resolution], desktop: bool, mobile: bool
) -> list[Resolution]:
    """Combine custom resolutions with device presets; 1920x1080 if none given."""
    resolutions = list(custom) or [DEFAULT_RESOLUTION]
    if desktop:
        resolutions += DEVICE_PRESETS["desktop"]
    if mobile:
        resolutions += DEVICE_PRESETS["mobile"]
    return resolutions


def print_summary(report: RunReport) -> None:
    table = Table(title="Run Summary")
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Seed URL", report.seed_url)
    table.add_row("Run Directory", report.run_directory)
    table.add_row("Duration", f"{report.duration_seconds}s")
    table.add_row("Pages Processed", str(report.pages_processed))
    table.add_row("Failed", f"[red]{report.pages_failed}[/red]")
    table.add_row("Screenshots", f"[green]{report.screenshots_taken}[/green]")
    if report.crawl_enabled:
        table.add_row("Budget Reached", "yes" if report.budget_reached else "no")
        table.add_row("Unprocessed URLs", str(report.frontier_remaining))
    console.print(table)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Capture full-page website screenshots at multiple resolutions."""
    setup_logging(verbose)


@cli.command()
@click.argument("url", required=False)
@click.option(
    "--resolution", "-r", "resolutions", multiple=True, metavar="WxH",
    callback=_parse_resolution_option,
    help="Custom screen resolution (e.g., 1920x1080). Repeatable.",
)
@click.option("--desktop", "-d", is_flag=True, help="Add desktop preset resolutions (1920x1080)")
@click.option("--mobile", "-m", is_flag=True, help="Add mobile preset resolutions (390x844)")
@click.option("--output", "-o", default=".", show_default=True, help="Base output directory")
@click.option(
    "--browser", "-b", default="chromium", show_default=True,
    type=click.Choice(SUPPORTED_BROWSERS, case_sensitive=False),
    help="Browser engine to use",
)
@click.option("--crawl", "-c", is_flag=True, help="Follow same-origin links from the page")
@click.option(
    "--max-pages", "-p", default=50, show_default=True, type=click.IntRange(min=1),
    help="Maximum number of pages to capture (used with --crawl)",
)
@click.option(
    "--timeout", "-t", default=5000, show_default=True, type=click.IntRange(min=1),
    help="Early screenshot timeout in milliseconds",
)
@click.option("--headed", is_flag=True, help="Show the browser window")
@click.option("--config", "config_path", default=None, help="Load settings from a saved config file")
@click.option("--report", "report_path", default=None, help="Write a JSON run report to this path")
@click.pass_context
def capture(
    ctx: click.Context,
    url: Optional[str],
    resolutions: list[Resolution],
    desktop: bool,
    mobile: bool,
    output: str,
    browser: str,
    crawl: bool,
    max_pages: int,
    timeout: int,
    headed: bool,
    config_path: Optional[str],
    report_path: Optional[str],
) -> None:
    """Screenshot URL (and, with --crawl, the pages it links to)."""
    try:
        cfg = _build_config(ctx, url, resolutions, desktop, mobile, headed, config_path)
    except FileNotFoundError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red]\n{escape(str(e))}")
        sys.exit(1)

    try:
        report = Orchestrator(cfg).run()
    except CrawlSetupError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)
    except Exception:
        logger.exception("An error occurred during the run")
        sys.exit(1)

    print_summary(report)
    if report_path:
        path = save_report(report, report_path)
        console.print(f"  JSON report: [blue]{path}[/blue]")


def _build_config(
    ctx: click.Context,
    url: Optional[str],
    resolutions: list[Resolution],
    desktop: bool,
    mobile: bool,
    headed: bool,
    config_path: Optional[str],
) -> ScreenshotConfig:
    """Merge a saved config (if any) with the options given on the command line."""
    params = ctx.params
    if config_path:
        data = ScreenshotConfig.load(config_path).model_dump()
        if url:
            data["url"] = url
        for option, field in _OPTION_FIELDS.items():
            if ctx.get_parameter_source(option) != ParameterSource.DEFAULT:
                data[field] = params[option]
        if resolutions or desktop or mobile:
            data["resolutions"] = build_resolutions(resolutions, desktop, mobile)
        if headed:
            data["headless"] = False
        return ScreenshotConfig(**data)

    if not url:
        raise click.UsageError("Missing argument 'URL' (or pass --config).", ctx=ctx)
    return ScreenshotConfig(
        url=url,
        resolutions=build_resolutions(resolutions, desktop, mobile),
        headless=not headed,
        **{field: params[option] for option, field in _OPTION_FIELDS.items()},
    )


@cli.command()
@click.option("--target", "-t", prompt="Target URL", help="Website URL to capture")
@click.option("--config", "-c", "config_path", default="screenshotter.json", help="Config file path")
def init(target: str, config_path: str) -> None:
    """Create a default configuration file."""
    path = Path(config_path)
    if path.exists():
        if not click.confirm(f"{path} already exists. Overwrite?"):
            return

    cfg = ScreenshotConfig(url=target)
    cfg.save(path)
    console.print(f"[green]Created {path}[/green]")
    console.print("\nYou can now customize this file and run:")
    console.print(f"  [blue]site-screenshotter capture --config {path}[/blue]")


if __name__ == "__main__":
    cli()
