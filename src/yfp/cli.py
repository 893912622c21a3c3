"""Click-based CLI for yfp.

Thin wrapper around library modules: build a query, get bars from the
network or a saved page, hand them to the exporter.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import sys
from datetime import date
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from yfp.core import ExtractionError, FileFormat, Frequency, YfpError, load_config
from yfp.prices import (
    HistoryQuery,
    HistoryTableParser,
    PriceBar,
    YahooHistoryClient,
    export_bars,
    prepare_file_name,
    to_human_phrase,
)
from yfp.prices.dates import format_canonical

console = Console(stderr=True)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run_async(coro):
    """Run an async coroutine from synchronous Click code."""
    return asyncio.run(coro)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=_LOG_FORMAT,
        stream=sys.stderr,
    )
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def _load_config(ctx: click.Context):
    """Load config lazily, caching on first call."""
    if "config" not in ctx.obj:
        ctx.obj["config"] = load_config(config_path=ctx.obj.get("config_path"))
    return ctx.obj["config"]


def _build_query(ticker: str, start: str, end: str | None, frequency: str) -> HistoryQuery:
    try:
        return HistoryQuery(
            ticker=ticker, start=start, end=end, frequency=Frequency(frequency.lower())
        )
    except ValidationError as e:
        raise click.BadParameter(str(e)) from e


def _print_summary(query: HistoryQuery, file_name: str, file_format: FileFormat) -> None:
    """Render the resolved request as a Rich table."""
    end = query.end or format_canonical(date.today())
    table = Table(title="Price History Request")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Ticker", query.ticker)
    table.add_row("Start", to_human_phrase(query.start))
    table.add_row("End", to_human_phrase(end))
    table.add_row("Frequency", str(query.frequency))
    table.add_row("File", f"{file_name}.{file_format.value}")
    console.print(table)


def _export(
    ctx: click.Context,
    bars: list[PriceBar],
    file_format: FileFormat,
    file_name: str,
    output_dir: str | None,
) -> Path:
    config = _load_config(ctx)
    path = export_bars(bars, file_name, file_format, output_dir or config.output.directory)
    console.print(f"[green]✓[/green] Saved {len(bars)} bars to {path}")
    return path


def _resolve_output(
    ctx: click.Context,
    query: HistoryQuery,
    file_format: str | None,
    file_name: str | None,
) -> tuple[FileFormat, str]:
    config = _load_config(ctx)
    fmt = FileFormat(file_format.lower()) if file_format else config.output.file_format
    name = prepare_file_name(
        query.ticker,
        query.start,
        query.end,
        query.frequency,
        file_name=file_name,
        prefix=config.output.prefix,
    )
    return fmt, name


def _handle_errors(func):
    """Report library errors as a one-line message and exit 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except YfpError as exc:
            console.print(f"[red]Error ({type(exc).__name__}): {exc}[/red]")
            raise SystemExit(1) from exc

    return wrapper


def _history_options(func):
    """Options shared by every command that produces a file."""
    options = [
        click.option("--ticker", "-t", required=True, help="Ticker of the instrument."),
        click.option("--start", "-s", required=True, help="Start date (YYYY-MM-DD)."),
        click.option(
            "--end",
            "-e",
            default=None,
            help="End date (YYYY-MM-DD). Defaults to today.",
        ),
        click.option(
            "--file-format",
            "-f",
            type=click.Choice([f.value for f in FileFormat], case_sensitive=False),
            default=None,
            help="Output format. Defaults to the configured format.",
        ),
        click.option("--file-name", "-n", default=None, help="Output file name without extension."),
        click.option(
            "--output-dir",
            "-o",
            type=click.Path(file_okay=False),
            default=None,
            help="Directory for the output file.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


_FREQUENCY_ARG = click.argument(
    "frequency",
    type=click.Choice([f.value for f in Frequency], case_sensitive=False),
)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    envvar="YFP_CONFIG",
    default=None,
    help="Path to yfp.yml config file.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
@click.version_option(package_name="yfp")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """yfp: quote history scraper."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


# ---------------------------------------------------------------------------
# fetch
# ---------------------------------------------------------------------------


@cli.command()
@_FREQUENCY_ARG
@_history_options
@click.pass_context
@_handle_errors
def fetch(
    ctx: click.Context,
    frequency: str,
    ticker: str,
    start: str,
    end: str | None,
    file_format: str | None,
    file_name: str | None,
    output_dir: str | None,
) -> None:
    """Download a quote history page and export its price table."""
    config = _load_config(ctx)
    query = _build_query(ticker, start, end, frequency)
    fmt, name = _resolve_output(ctx, query, file_format, file_name)
    _print_summary(query, name, fmt)

    async def _run() -> list[PriceBar]:
        async with YahooHistoryClient(config.http) as client:
            return await client.get_history(query)

    bars = _run_async(_run())
    _export(ctx, bars, fmt, name, output_dir)


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------


@cli.command("parse")
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False))
@_FREQUENCY_ARG
@_history_options
@click.pass_context
@_handle_errors
def parse_file(
    ctx: click.Context,
    html_file: str,
    frequency: str,
    ticker: str,
    start: str,
    end: str | None,
    file_format: str | None,
    file_name: str | None,
    output_dir: str | None,
) -> None:
    """Export the price table of a saved history page (no network)."""
    query = _build_query(ticker, start, end, frequency)
    fmt, name = _resolve_output(ctx, query, file_format, file_name)
    _print_summary(query, name, fmt)

    try:
        raw = Path(html_file).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ExtractionError(
            f"{html_file} is not valid UTF-8: {e.reason}",
            context={"path": html_file},
        ) from e
    bars = HistoryTableParser().parse(raw, query.frequency, query.start, query.end)
    _export(ctx, bars, fmt, name, output_dir)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
