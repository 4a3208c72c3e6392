"""Typer CLI entrypoint for Trend Radar."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .config import RadarConfig, load_config
from .engine import BlockDetector, PatternExtractor
from .errors import BlockedError, ConfigError, ParseError
from .logging_conf import configure_logging
from .service import query_trends
from .sources.scrape import parse_ranking_page

app = typer.Typer(
    help="Trend Radar: trending searches and hashtags from several sources.",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console(stderr=True)


@dataclass
class AppState:
    config: RadarConfig
    verbose: bool = False


def build_state(verbose: bool, config_path: Optional[Path] = None) -> AppState:
    try:
        config = load_config(config_path)
    except ConfigError as exc:
        console.print(f"Invalid configuration: {exc}", style="red")
        raise typer.Exit(code=2) from exc
    configure_logging(verbose=verbose, log_dir=config.log_dir)
    return AppState(config=config, verbose=verbose)


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def _mask(secret: str) -> str:
    if not secret:
        return "-"
    if len(secret) <= 6:
        return "*" * len(secret)
    return secret[:3] + "*" * (len(secret) - 6) + secret[-3:]


def _render_config_table(config: RadarConfig) -> Table:
    table = Table(title="Effective configuration", box=box.SIMPLE_HEAD)
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="green", overflow="fold")
    provider = "api" if config.apify.enabled else "scrape"
    rows = [
        ("feed.url", config.feed.url),
        ("feed.max_items", str(config.feed.max_items)),
        ("hashtag provider", provider),
        ("scrape.candidates", "\n".join(config.scrape.candidate_urls())),
        ("scrape.rules.version", config.scrape.rules.version),
        ("apify.token", _mask(config.apify.token)),
        ("apify.actor_id", config.apify.actor_id),
        ("apify.country_code", config.apify.country_code.upper()),
        ("apify.period", config.apify.period),
        ("apify.max_items", str(config.apify.max_items)),
        ("apify.industry", config.apify.industry or "-"),
        ("http.request_timeout", f"{config.http.request_timeout:g}s"),
        ("source_timeout", f"{config.source_timeout:g}s"),
        ("Cache-Control", config.cache.header_value()),
    ]
    for key, value in rows:
        table.add_row(key, value)
    return table


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging.", is_flag=True),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="YAML or JSON configuration file."
    ),
) -> None:
    ctx.obj = build_state(verbose, config_path)


@app.command("fetch", help="Aggregate all sources and print the JSON payload.")
def fetch(
    ctx: typer.Context,
    pretty: bool = typer.Option(True, "--pretty/--compact", help="Indent the JSON output."),
) -> None:
    state = _get_state(ctx)
    try:
        response = query_trends(state.config)
    except KeyboardInterrupt:
        console.print("Cancelled.", style="yellow")
        raise typer.Exit(code=130)
    typer.echo(response.json(indent=2 if pretty else None))
    if response.status_code != 200:
        raise typer.Exit(code=1)
    errors = response.body.get("errors") or {}
    for source, message in errors.items():
        if message:
            console.print(f"{source}: {message}", style="yellow")


@app.command("show-config", help="Show the effective configuration (token masked).")
def show_config(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    Console().print(_render_config_table(state.config))


@app.command("check-block", help="Classify a text as challenge page or real content.")
def check_block(ctx: typer.Context, text: str = typer.Argument(..., help="Page text to test.")) -> None:
    state = _get_state(ctx)
    detector = BlockDetector(state.config.scrape.rules.block_indicators)
    indicator = detector.detect(text)
    if indicator is None:
        typer.echo("not blocked")
    else:
        typer.echo(f"blocked (matched '{indicator}')")


@app.command("extract", help="Run block detection and hashtag extraction on a saved HTML page.")
def extract(
    ctx: typer.Context,
    html_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Saved HTML page."),
) -> None:
    state = _get_state(ctx)
    rules = state.config.scrape.rules
    html = html_file.read_text(encoding="utf-8", errors="ignore")
    try:
        items = parse_ranking_page(
            html,
            html_file.as_posix(),
            detector=BlockDetector(rules.block_indicators),
            extractor=PatternExtractor(rules),
            max_items=state.config.scrape.max_items,
        )
    except (BlockedError, ParseError) as exc:
        console.print(str(exc), style="red")
        raise typer.Exit(code=1) from exc
    table = Table(title=f"Hashtags · {len(items)} found", box=box.SIMPLE_HEAD)
    table.add_column("Rank", justify="right", style="cyan")
    table.add_column("Hashtag", style="magenta")
    table.add_column("Posts", style="green")
    for item in items:
        table.add_row(str(item.rank), f"#{item.hashtag}", item.posts_text or "-")
    Console().print(table)


def cli() -> None:
    app()


if __name__ == "__main__":
    cli()
